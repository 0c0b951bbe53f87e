"""
Pytest fixtures for TurboAuth tests. Registry with a fixed clock, recording
notifier, temporary SQLite store and FastAPI TestClient.
"""

from __future__ import annotations

import pytest

ADMIN = "B" * 60
WALLET = "A" * 60
WALLET_2 = "Q" * 60
NEW_ADMIN = "C" * 60
CONTRACT = "D" * 60

FIXED_NOW = 1_700_000_000


@pytest.fixture
def clock():
    """Mutable clock: set clock.now to move time."""

    class _Clock:
        now = FIXED_NOW

        def __call__(self) -> int:
            return self.now

    return _Clock()


@pytest.fixture
def notifier(clock):
    from backend_turboauth.registry import RecordingNotifier

    return RecordingNotifier(clock=clock)


@pytest.fixture
def registry(notifier, clock):
    from backend_turboauth.registry import Registry

    return Registry(ADMIN, notifier=notifier, clock=clock)


@pytest.fixture
def store(tmp_path):
    """RegistryStore on a temporary SQLite DB with tables created."""
    from backend_turboauth.database import RegistryStore

    s = RegistryStore(f"sqlite:///{tmp_path / 'turboauth.db'}")
    s.init_db()
    yield s
    s.dispose()


@pytest.fixture
def client(registry, store):
    """FastAPI TestClient over the registry fixture, persisting to the temp store."""
    from fastapi.testclient import TestClient

    from backend_turboauth.api_server.server import create_app

    return TestClient(create_app(registry, store))


@pytest.fixture
def clean_settings(monkeypatch):
    """Clear TurboAuth env vars and the settings cache around a test."""
    from backend_turboauth.config import get_settings

    for key in (
        "TURBOAUTH_ADMIN_ADDRESS",
        "TURBOAUTH_DB_URL",
        "DATABASE_URL",
        "TURBOAUTH_DB_PATH",
        "TURBOAUTH_PERSIST",
        "API_HOST",
        "API_PORT",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
