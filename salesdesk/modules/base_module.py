from PySide6.QtCore import QObject
from PySide6.QtWidgets import QWidget


class BaseModule(QObject):
    """A navigable page: controllers own their view and expose it here."""

    def get_widget(self) -> QWidget:
        raise NotImplementedError

    def refresh(self) -> None:
        """Re-fetch whatever the page shows. Called when the page is opened."""
        pass
