from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel, QMessageBox
from PySide6.QtCore import Qt


def wrap_center(w: QWidget) -> QWidget:
    host = QWidget()
    lay = QVBoxLayout(host)
    lay.addStretch(1)
    lay.addWidget(w, 0, Qt.AlignCenter)
    lay.addStretch(1)
    return host


def placeholder(text: str) -> QWidget:
    lab = QLabel(text)
    lab.setAlignment(Qt.AlignCenter)
    lab.setWordWrap(True)
    return wrap_center(lab)


def _notify(parent: QWidget, title: str, text: str, icon) -> QMessageBox:
    # Non-modal so a failed operation never blocks the rest of the session.
    box = QMessageBox(icon, title, text, QMessageBox.Ok, parent)
    box.setAttribute(Qt.WA_DeleteOnClose, True)
    box.setWindowModality(Qt.NonModal)
    box.show()
    return box


def info(parent: QWidget, title: str, text: str):
    return _notify(parent, title, text, QMessageBox.Information)


def error(parent: QWidget, title: str, text: str):
    return _notify(parent, title, text, QMessageBox.Critical)


def confirm(parent: QWidget, title: str, text: str) -> bool:
    resp = QMessageBox.question(parent, title, text, QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
    return resp == QMessageBox.Yes
