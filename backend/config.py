"""Application configuration."""

import os
from pathlib import Path

DATA_DIR = Path(os.environ.get("DATA_DIR", str(Path(__file__).parent.parent / "data")))
DATA_DIR.mkdir(parents=True, exist_ok=True)

STORAGE_DIR = Path(os.environ.get("STORAGE_DIR", str(DATA_DIR / "storage")))
STORAGE_DIR.mkdir(parents=True, exist_ok=True)

DATABASE_URL = os.environ.get("DATABASE_URL", f"sqlite:///{DATA_DIR}/drop.db")

# Object storage bucket holding uploaded bytes
STORAGE_BUCKET = os.environ.get("STORAGE_BUCKET", "files").strip() or "files"

# Origin used in share links; falls back to the request's base URL
PUBLIC_ORIGIN = os.environ.get("PUBLIC_ORIGIN", "").strip().rstrip("/")

# Upload limits
DEFAULT_EXPIRY_MINUTES = int(os.environ.get("DEFAULT_EXPIRY_MINUTES", "5"))
MAX_EXPIRY_MINUTES = int(os.environ.get("MAX_EXPIRY_MINUTES", "10"))
MAX_FILE_SIZE = os.environ.get("MAX_FILE_SIZE", "100MB").strip()

# Cleanup trigger authentication
SERVICE_KEY = os.environ.get("SERVICE_KEY", "").strip()
SERVICE_KEY_ENABLED = bool(SERVICE_KEY)

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
