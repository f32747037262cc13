from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLineEdit, QLabel, QGroupBox
)

from ...widgets.table_view import TableView


class SummaryCard(QGroupBox):
    def __init__(self, title: str, parent=None):
        super().__init__(title, parent)
        lay = QVBoxLayout(self)
        self.value = QLabel("$0.00")
        self.value.setStyleSheet("font-size: 18px; font-weight: bold;")
        lay.addWidget(self.value)

    def set_value(self, text: str):
        self.value.setText(text)


class SalesView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)

        # --- Summary ---
        cards = QHBoxLayout()
        self.card_revenue = SummaryCard("Total Revenue")
        self.card_average = SummaryCard("Average Sale")
        self.card_items = SummaryCard("Items Sold")
        for c in (self.card_revenue, self.card_average, self.card_items):
            cards.addWidget(c)
        root.addLayout(cards)

        # --- Toolbar ---
        bar = QHBoxLayout()
        self.btn_add = QPushButton("New Sale")
        self.btn_refresh = QPushButton("Refresh")
        bar.addWidget(self.btn_add)
        bar.addWidget(self.btn_refresh)
        bar.addStretch(1)
        self.search = QLineEdit()
        self.search.setPlaceholderText("Search sales by customer ID…")
        bar.addWidget(QLabel("Search:"))
        bar.addWidget(self.search, 2)
        root.addLayout(bar)

        self.tbl = TableView()
        root.addWidget(self.tbl, 1)

        self.empty_label = QLabel("")
        self.empty_label.setStyleSheet("color: #6B7280;")
        root.addWidget(self.empty_label)
