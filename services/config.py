# services/config.py
from __future__ import annotations
import os
from pathlib import Path

# ------------------------------------------------------------------------------
# Helper: get env var with fallback
# ------------------------------------------------------------------------------
def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return v if v is not None and v != "" else default

# ------------------------------------------------------------------------------
# Store
# ------------------------------------------------------------------------------
DB_URL: str = _env("DB_URL", "sqlite://./db.sqlite3")

# find_all() pulls rows from the store in windows of this size
FETCH_ALL_CHUNK: int = int(_env("FETCH_ALL_CHUNK", "100"))

# /pageable defaults
PAGE_DEFAULT_SIZE: int = int(_env("PAGE_DEFAULT_SIZE", "2"))

# ------------------------------------------------------------------------------
# HTTP
# ------------------------------------------------------------------------------
CORS_ORIGINS: list[str] = [
    o.strip()
    for o in _env("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if o.strip()
]

# ------------------------------------------------------------------------------
# Reports
# ------------------------------------------------------------------------------
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
REPORT_TEMPLATE: str = _env("REPORT_TEMPLATE", str(TEMPLATES_DIR / "invoices.yaml"))

# ---------------- Azure File Share (client photos) ----------------
# a connection string wins; otherwise the account URL (optionally with a SAS
# token) plus, when there is no SAS token, the account key
AZURE_FILES_CONNECTION_STRING: str = _env("AZURE_FILES_CONNECTION_STRING", "")
AZURE_FILES_ACCOUNT_URL: str = _env("AZURE_FILES_ACCOUNT_URL", "")
AZURE_FILES_ACCOUNT_KEY: str = _env("AZURE_FILES_ACCOUNT_KEY", "")

AZURE_FILES_SHARE: str = _env("AZURE_FILES_SHARE", "media")
AZURE_FILES_BASE_DIR: str = _env("AZURE_FILES_BASE_DIR", "")

# uploads land under MEDIA_DIR/<resource type>/
MEDIA_DIR: str = _env("MEDIA_DIR", "clients")
