"""
Application settings.

Responsibilities:
- Build a typed, immutable Settings object from env (see config.env).
- Cache it so every module sees the same values; tests reset with
  get_settings.cache_clear() after changing env.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass

from backend_turboauth.config import env


@dataclass(frozen=True)
class Settings:
    """Service configuration resolved from environment."""

    admin_address: str
    database_url: str
    api_host: str
    api_port: int
    persist: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "admin_address": self.admin_address,
            "database_url": env.mask_database_url(self.database_url),
            "api_host": self.api_host,
            "api_port": self.api_port,
            "persist": self.persist,
        }


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the current application settings (cached)."""
    return Settings(
        admin_address=env.get_admin_address(),
        database_url=env.get_database_url(),
        api_host=env.get_api_host(),
        api_port=env.get_api_port(),
        persist=env.persistence_enabled(),
    )
