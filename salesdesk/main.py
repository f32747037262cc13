from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QListWidget,
    QListWidgetItem,
    QStackedWidget,
    QHBoxLayout,
    QSizePolicy,
)
from PySide6.QtCore import Qt
from dataclasses import dataclass, field
from importlib import import_module
from pathlib import Path
import argparse
import sys

from .api import get_client
from .api.client import ApiClient
from .config import API_BASE_URL, DOWNLOAD_DIR
from .constants import APP_NAME
from .modules.base_module import BaseModule
from .utils.loggers import get_logger
from .utils.ui_helpers import placeholder

_log = get_logger("salesdesk")


@dataclass
class AppContext:
    """What every page needs; handed to controllers explicitly."""
    client: ApiClient
    download_dir: Path = field(default_factory=lambda: DOWNLOAD_DIR)


def _lazy_get(name: str, attr: str):
    """Import a module by name and fetch an attribute from it, with a clear error if missing."""
    try:
        mod = import_module(name)
    except ImportError as e:
        raise ImportError(f"Failed to import module '{name}': {e}") from e
    try:
        return getattr(mod, attr)
    except AttributeError as e:
        raise ImportError(f"'{attr}' not found in module '{name}'.") from e


# (title, module path, controller class, extra kwargs taken from the context)
PAGES = [
    ("Dashboard", "salesdesk.modules.dashboard.controller", "DashboardController", ()),
    ("Categories", "salesdesk.modules.categories.controller", "CategoriesController", ()),
    ("Inventory", "salesdesk.modules.product.controller", "ProductController", ()),
    ("Sales", "salesdesk.modules.sales.controller", "SalesController", ()),
    ("Invoices", "salesdesk.modules.invoices.controller", "InvoicesController", ("download_dir",)),
]


class MainWindow(QMainWindow):
    def __init__(self, ctx: AppContext):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.setWindowFlag(Qt.WindowMinimizeButtonHint, True)
        self.setWindowFlag(Qt.WindowMaximizeButtonHint, True)
        self.setMinimumSize(820, 520)
        self.ctx = ctx

        # ---- Central layout: left nav + stacked pages ----
        central = QWidget(self)
        layout = QVBoxLayout(central)
        self.setCentralWidget(central)

        self.nav = QListWidget()
        self.nav.setFixedWidth(110)
        self.nav.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Expanding)
        self.stack = QStackedWidget()

        row = QWidget()
        row_lay = QHBoxLayout(row)
        row_lay.addWidget(self.nav)
        row_lay.addWidget(self.stack, 1)
        layout.addWidget(row, 1)

        self.module_info: list[dict] = []
        # loaded controllers by nav index
        self.modules: dict[int, BaseModule] = {}

        for title, path, cls, ctx_kwargs in PAGES:
            self._add_module_deferred(title, path, cls, ctx_kwargs)

        self.nav.currentRowChanged.connect(self._on_nav_item_changed)
        if self.nav.count():
            self.nav.setCurrentRow(0)

    def _add_module_deferred(self, title: str, module_path: str, class_name: str, ctx_kwargs=()):
        """Add module info for deferred loading."""
        self.module_info.append({
            "title": title,
            "module_path": module_path,
            "class_name": class_name,
            "kwargs": {k: getattr(self.ctx, k) for k in ctx_kwargs},
        })
        self.nav.addItem(QListWidgetItem(title))
        self.stack.addWidget(placeholder(f"Loading {title}..."))

    def _on_nav_item_changed(self, index: int):
        """Load module when navigating to it; refresh it when it is already loaded."""
        if index < 0 or index >= len(self.module_info):
            return
        if index in self.modules:
            self.modules[index].refresh()
        else:
            self._load_module(index)
        self.stack.setCurrentIndex(index)

    def _load_module(self, index: int):
        info = self.module_info[index]
        QApplication.setOverrideCursor(Qt.WaitCursor)
        try:
            Controller = _lazy_get(info["module_path"], info["class_name"])
            controller = Controller(self.ctx.client, **info["kwargs"])
        except ImportError as e:
            _log.error("[%s] failed to load: %s", info["title"], e)
            self._replace_page(index, placeholder(f"{info['title']}\n\nLoading failed"))
            return
        finally:
            QApplication.restoreOverrideCursor()
        self.modules[index] = controller
        self._replace_page(index, controller.get_widget())

    def _replace_page(self, index: int, widget: QWidget):
        current = self.stack.widget(index)
        self.stack.removeWidget(current)
        current.deleteLater()
        self.stack.insertWidget(index, widget)

    def find_module(self, title: str) -> BaseModule | None:
        for i, info in enumerate(self.module_info):
            if info["title"] == title:
                if i not in self.modules:
                    self._load_module(i)
                return self.modules.get(i)
        return None

    def open_print_view(self, sale_id: str):
        """Print layout for a sale id, without going through the invoice list."""
        ctrl = self.find_module("Invoices")
        if ctrl is not None:
            return ctrl.print_invoice(sale_id)
        return None

    def download_invoice(self, sale_id: str):
        """Write the invoice PDF for a sale id into the download directory."""
        ctrl = self.find_module("Invoices")
        if ctrl is not None:
            return ctrl.save_pdf(sale_id)
        return None


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="salesdesk", description=f"{APP_NAME} sales console")
    p.add_argument("--api-url", default=API_BASE_URL, help="REST API base URL")
    p.add_argument("--print", dest="print_sale", metavar="SALE_ID",
                   help="open the print layout for a sale and print it")
    p.add_argument("--download", dest="download_sale", metavar="SALE_ID",
                   help="save the invoice PDF for a sale into the download directory")
    return p


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)

    ctx = AppContext(client=get_client(args.api_url))
    _log.info("using API at %s", ctx.client.base_url)

    win = MainWindow(ctx)
    win.resize(1100, 680)
    win.show()
    if args.print_sale:
        win.open_print_view(args.print_sale)
    if args.download_sale:
        win.download_invoice(args.download_sale)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
