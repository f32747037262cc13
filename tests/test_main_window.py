# tests/test_main_window.py
from salesdesk.main import AppContext, MainWindow, build_parser
from salesdesk.modules.dashboard.controller import DashboardController
from salesdesk.modules.invoices.controller import InvoicesController

from conftest import SALE_1


def test_pages_load_lazily(qtbot, client, notes, tmp_path):
    win = MainWindow(AppContext(client=client, download_dir=tmp_path))
    qtbot.addWidget(win)
    titles = [win.nav.item(i).text() for i in range(win.nav.count())]
    assert titles == ["Dashboard", "Categories", "Inventory", "Sales", "Invoices"]
    assert isinstance(win.modules[0], DashboardController)
    assert 4 not in win.modules

    win.nav.setCurrentRow(4)
    ctrl = win.modules[4]
    assert isinstance(ctrl, InvoicesController)
    assert ctrl.download_dir == tmp_path
    assert win.stack.currentWidget() is ctrl.get_widget()


def test_find_module_loads_on_demand(qtbot, client, notes):
    win = MainWindow(AppContext(client=client))
    qtbot.addWidget(win)
    sales = win.find_module("Sales")
    assert sales is win.modules[3]
    assert win.find_module("Nope") is None


def test_download_by_sale_id(qtbot, client, notes, tmp_path):
    win = MainWindow(AppContext(client=client, download_dir=tmp_path))
    qtbot.addWidget(win)
    path = win.download_invoice(SALE_1)
    assert path == tmp_path / "invoice-a1b2c3d4.pdf"
    assert path.read_bytes().startswith(b"%PDF")
    assert notes.titles("info") == ["Download complete"]


def test_download_unknown_sale_writes_nothing(qtbot, client, notes, tmp_path):
    win = MainWindow(AppContext(client=client, download_dir=tmp_path))
    qtbot.addWidget(win)
    assert win.download_invoice("no-such-sale") is None
    assert notes.titles("error") == ["Invoice not found"]
    assert list(tmp_path.iterdir()) == []


def test_cli_arguments():
    args = build_parser().parse_args(["--api-url", "http://x/api", "--print", "abc", "--download", "def"])
    assert args.api_url == "http://x/api"
    assert args.print_sale == "abc"
    assert args.download_sale == "def"
    assert build_parser().parse_args([]).download_sale is None
