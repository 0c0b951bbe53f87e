"""
Environment variable loading for TurboAuth.

- TURBOAUTH_ADMIN_ADDRESS: initial admin identity (60 uppercase letters)
- TURBOAUTH_DB_URL / DATABASE_URL: SQLAlchemy URL for registry persistence
- TURBOAUTH_DB_PATH: SQLite file used when no URL is set (default: turboauth.db)
- TURBOAUTH_PERSIST: 1/0, save registry snapshots after each mutation (default: 1)
- API_HOST / API_PORT: HTTP bind address (default: 0.0.0.0:8000)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_turboauth/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_DB_PATH = "turboauth.db"
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8000

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def load_turboauth_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env."""
    load_dotenv(_ENV_PATH, override=False)


def get_admin_address() -> str:
    """Return TURBOAUTH_ADMIN_ADDRESS from env, or empty string when unset."""
    load_turboauth_env()
    return (os.getenv("TURBOAUTH_ADMIN_ADDRESS") or "").strip()


def get_database_url() -> str:
    """
    Resolve the registry database URL.
    Order: TURBOAUTH_DB_URL > DATABASE_URL > sqlite:///TURBOAUTH_DB_PATH.
    """
    load_turboauth_env()
    url = (os.getenv("TURBOAUTH_DB_URL") or os.getenv("DATABASE_URL") or "").strip()
    if url:
        return url
    path = (os.getenv("TURBOAUTH_DB_PATH") or "").strip() or DEFAULT_DB_PATH
    return f"sqlite:///{path}"


def get_api_host() -> str:
    load_turboauth_env()
    return (os.getenv("API_HOST") or "").strip() or DEFAULT_API_HOST


def get_api_port() -> int:
    """Return API_PORT as int; falls back to the default on empty or non-numeric values."""
    load_turboauth_env()
    raw = (os.getenv("API_PORT") or "").strip()
    try:
        return int(raw) if raw else DEFAULT_API_PORT
    except ValueError:
        return DEFAULT_API_PORT


def persistence_enabled() -> bool:
    """Return True unless TURBOAUTH_PERSIST is set to a false value."""
    load_turboauth_env()
    raw = (os.getenv("TURBOAUTH_PERSIST") or "").strip().lower()
    if raw in _FALSE_VALUES:
        return False
    return raw in _TRUE_VALUES or raw == ""


def mask_database_url(url: str) -> str:
    """Strip credentials and query string from a DB URL for logging."""
    return url.split("?")[0].split("@")[-1].split("//")[-1]
