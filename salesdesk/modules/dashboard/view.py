from __future__ import annotations

from typing import Dict, List, Tuple

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QColor, QFont, QStandardItem, QStandardItemModel
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame,
    QHeaderView, QAbstractItemView, QStyledItemDelegate, QStyle,
)

from ...widgets.table_view import TableView

REVENUE_BAR = QColor("#3b82f6")
SALES_BAR = QColor("#10b981")

# Row shape pushed by the controller: (label, value text, bar fraction 0..1)
ChartRow = Tuple[str, str, float]


class BarDelegate(QStyledItemDelegate):
    """Paints a horizontal bar whose length is the fraction stored in UserRole."""

    def __init__(self, color: QColor, parent=None) -> None:
        super().__init__(parent)
        self.color = color

    def paint(self, painter, option, index) -> None:
        if option.state & QStyle.State_Selected:
            painter.fillRect(option.rect, option.palette.highlight())
        fraction = index.data(Qt.UserRole) or 0.0
        rect = option.rect.adjusted(4, 5, -4, -5)
        width = int(rect.width() * max(0.0, min(float(fraction), 1.0)))
        if width > 0:
            painter.save()
            painter.fillRect(rect.x(), rect.y(), width, rect.height(), self.color)
            painter.restore()


class KPICard(QFrame):
    def __init__(self, title: str, caption: str) -> None:
        super().__init__()
        self.setObjectName("kpi_card")
        self.setStyleSheet("""
            QFrame#kpi_card {
                border: 1px solid #e1e1e1;
                border-radius: 10px;
                background: #fff;
            }
        """)
        v = QVBoxLayout(self)
        v.setContentsMargins(12, 10, 12, 12)
        v.setSpacing(2)

        self.lbl_title = QLabel(title)
        f = self.lbl_title.font()
        f.setBold(True)
        self.lbl_title.setFont(f)

        self.lbl_value = QLabel("—")
        fv = QFont(self.lbl_value.font())
        fv.setPointSize(fv.pointSize() + 6)
        fv.setBold(True)
        self.lbl_value.setFont(fv)

        self.lbl_caption = QLabel(caption)
        self.lbl_caption.setStyleSheet("color: #777;")

        v.addWidget(self.lbl_title)
        v.addWidget(self.lbl_value)
        v.addWidget(self.lbl_caption)

    def set_value(self, s: str) -> None:
        self.lbl_value.setText(s)

    def set_caption(self, s: str) -> None:
        self.lbl_caption.setText(s)


class _Card(QWidget):
    """Wrap any widget in a titled card frame."""
    def __init__(self, inner: QWidget, title: str, footer: QLabel) -> None:
        super().__init__()
        v = QVBoxLayout(self)
        v.setContentsMargins(0, 0, 0, 0)
        frame = QFrame()
        frame.setFrameShape(QFrame.StyledPanel)
        frame.setStyleSheet("QFrame { border:1px solid #dcdcdc; border-radius:8px; }")
        fl = QVBoxLayout(frame)
        fl.setContentsMargins(12, 10, 12, 12)
        fl.setSpacing(6)
        fl.addWidget(QLabel(f"<b>{title}</b>"))
        fl.addWidget(inner, 1)
        fl.addWidget(footer)
        v.addWidget(frame)


class DashboardView(QWidget):
    """
    Landing page: headline cards plus monthly revenue and daily sales charts.
    The controller drives it through the set_* methods.
    """
    refresh_requested = Signal()

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._kpi_cards: Dict[str, KPICard] = {}
        self._build_ui()

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)
        root.setSpacing(10)

        top = QHBoxLayout()
        title = QLabel("<h2>Dashboard</h2>")
        title.setTextFormat(Qt.RichText)
        top.addWidget(title)
        top.addStretch(1)
        self.btn_refresh = QPushButton("Refresh")
        self.btn_refresh.clicked.connect(self.refresh_requested)
        top.addWidget(self.btn_refresh)
        root.addLayout(top)

        cards = QHBoxLayout()
        cards.setSpacing(10)
        for key, title, caption in (
            ("revenue_month", "Revenue This Month", "current calendar month"),
            ("sales_week", "Sales (Last 7 Days)", "number of sales"),
            ("best_day", "Best Day", "most sales in the last 7 days"),
        ):
            card = KPICard(title, caption)
            self._kpi_cards[key] = card
            cards.addWidget(card)
        root.addLayout(cards)

        charts = QHBoxLayout()
        charts.setSpacing(10)

        self.tbl_revenue = TableView(sortable=False)
        self.model_revenue = QStandardItemModel(0, 3)
        self._prep_chart(self.tbl_revenue, self.model_revenue, ["Month", "Revenue", ""], REVENUE_BAR)
        self.lbl_revenue_empty = QLabel("")
        self.lbl_revenue_empty.setStyleSheet("color: #6B7280;")
        charts.addWidget(_Card(self.tbl_revenue, "Monthly Revenue", self.lbl_revenue_empty), 1)

        self.tbl_sales = TableView(sortable=False)
        self.model_sales = QStandardItemModel(0, 3)
        self._prep_chart(self.tbl_sales, self.model_sales, ["Date", "Sales", ""], SALES_BAR)
        self.lbl_sales_empty = QLabel("")
        self.lbl_sales_empty.setStyleSheet("color: #6B7280;")
        charts.addWidget(_Card(self.tbl_sales, "Sales, Last 7 Days", self.lbl_sales_empty), 1)

        root.addLayout(charts, 1)

    # ---------------- setters for the controller ----------------

    def set_kpi_value(self, key: str, text: str, caption: str | None = None) -> None:
        card = self._kpi_cards.get(key)
        if not card:
            return
        card.set_value(text)
        if caption is not None:
            card.set_caption(caption)

    def kpi_value(self, key: str) -> str:
        return self._kpi_cards[key].lbl_value.text()

    def set_revenue(self, rows: List[ChartRow], empty_text: str = "") -> None:
        self._fill(self.model_revenue, self.tbl_revenue, rows)
        self.lbl_revenue_empty.setText(empty_text)

    def set_daily_sales(self, rows: List[ChartRow], empty_text: str = "") -> None:
        self._fill(self.model_sales, self.tbl_sales, rows)
        self.lbl_sales_empty.setText(empty_text)

    # ---------------- helpers ----------------

    @staticmethod
    def _prep_chart(tv: TableView, model: QStandardItemModel, headers: List[str], color: QColor) -> None:
        model.setHorizontalHeaderLabels(headers)
        tv.setModel(model)
        tv.setSelectionMode(QAbstractItemView.NoSelection)
        tv.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeToContents)
        tv.horizontalHeader().setSectionResizeMode(2, QHeaderView.Stretch)
        tv.setItemDelegateForColumn(2, BarDelegate(color, tv))

    @staticmethod
    def _fill(model: QStandardItemModel, tv: TableView, rows: List[ChartRow]) -> None:
        model.removeRows(0, model.rowCount())
        for label, value, fraction in rows:
            amount = QStandardItem(value)
            amount.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            bar = QStandardItem()
            bar.setData(fraction, Qt.UserRole)
            model.appendRow([QStandardItem(label), amount, bar])
        tv.resizeColumnsToContents()
