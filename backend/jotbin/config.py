from __future__ import annotations

import os
from pathlib import Path

# Base dir: repository root (we are in backend/jotbin/)
REPO_ROOT = Path(__file__).resolve().parents[2]


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def data_dir() -> Path:
    return Path(os.getenv("APP_DATA_DIR", str(REPO_ROOT / "data")))


def static_dir() -> Path:
    return Path(os.getenv("APP_STATIC_DIR", str(REPO_ROOT / "dist")))


def is_development() -> bool:
    return os.getenv("APP_ENV", "production").lower() == "development"


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def short_id_length() -> int:
    n = _int_env("SHORT_ID_LENGTH", 8)
    return n if n > 0 else 8


def host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def port() -> int:
    return _int_env("PORT", 3001)
