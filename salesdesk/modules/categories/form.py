from PySide6.QtWidgets import QDialog, QFormLayout, QLineEdit, QDialogButtonBox, QVBoxLayout, QLabel

from ...api.repositories.categories_repo import Category
from ...utils.validators import non_empty


class CategoryForm(QDialog):
    def __init__(self, parent=None, initial: Category | None = None):
        super().__init__(parent)
        self.setWindowTitle("Edit Category" if initial else "New Category")
        self.setModal(True)
        self._payload = None

        self.name = QLineEdit()
        self.desc = QLineEdit()
        if initial:
            self.name.setText(initial.name)
            self.desc.setText(initial.description)
        self.name_error = QLabel()
        self.name_error.setStyleSheet("color: red;")

        form = QFormLayout()
        form.addRow("Name*", self.name)
        form.addRow("", self.name_error)
        form.addRow("Description", self.desc)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(btns)

    def get_payload(self) -> dict | None:
        name = (self.name.text() or "").strip()
        if not non_empty(name):
            self.name_error.setText("Name is required")
            self.name.setFocus()
            return None
        self.name_error.setText("")
        return {"name": name, "description": (self.desc.text() or "").strip()}

    def accept(self):
        p = self.get_payload()
        if p is None:
            return
        self._payload = p
        super().accept()

    def payload(self):
        return self._payload
