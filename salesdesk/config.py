import os
from pathlib import Path

from .constants import DEFAULT_API_BASE_URL

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "resources" / "templates"
FONTS_DIR = BASE_DIR / "resources" / "fonts"

API_BASE_URL = os.environ.get("SALESDESK_API_URL", DEFAULT_API_BASE_URL).rstrip("/")

DOWNLOAD_DIR = Path(
    os.environ.get("SALESDESK_DOWNLOAD_DIR", str(Path.home() / "Downloads"))
).expanduser()
