"""
Tests for RegistryStore (SQLAlchemy persistence) using a temporary SQLite DB.
"""

from __future__ import annotations

from backend_turboauth.database import RegistryStore
from backend_turboauth.registry import AuthStatus, RecordingNotifier, Registry

ADMIN = "B" * 60
WALLET = "A" * 60
WALLET_2 = "Q" * 60
NEW_ADMIN = "C" * 60
CONTRACT = "D" * 60


def test_load_empty_db_returns_none(store):
    assert store.load() is None


def test_load_registry_creates_default(store):
    registry = store.load_registry(ADMIN)
    assert registry.get_admin() == ADMIN
    assert len(registry) == 0


def test_save_and_restore(store, registry):
    registry.set_status(WALLET, AuthStatus.ACTIVE, 75)
    registry.set_status(WALLET_2, AuthStatus.BLOCKED, 3)
    registry.set_next_contract(CONTRACT)
    registry.transfer_admin(NEW_ADMIN)
    store.save(registry)

    notifier = RecordingNotifier()
    restored = store.load_registry(ADMIN, notifier=notifier)
    assert restored.get_admin() == NEW_ADMIN
    assert restored.get_next_contract() == CONTRACT
    assert restored.get_status(WALLET) == registry.get_status(WALLET)
    assert restored.get_status(WALLET_2).status is AuthStatus.BLOCKED
    assert notifier.events == []


def test_save_replaces_previous_snapshot(store, registry):
    registry.set_status(WALLET, AuthStatus.ACTIVE, 75)
    store.save(registry)
    fresh = Registry(ADMIN)
    store.save(fresh)
    snap = store.load()
    assert snap is not None
    assert snap.records == {}
    assert snap.next_contract_address == ""


def test_store_survives_new_instance(tmp_path):
    url = f"sqlite:///{tmp_path / 'reopen.db'}"
    first = RegistryStore(url)
    first.init_db()
    registry = Registry(ADMIN)
    registry.set_status(WALLET, AuthStatus.REVIEW, 42)
    first.save(registry)
    first.dispose()

    second = RegistryStore(url)
    second.init_db()
    restored = second.load_registry(NEW_ADMIN)
    assert restored.get_admin() == ADMIN
    assert restored.get_status(WALLET).trust_score == 42
    second.dispose()


def test_init_db_is_idempotent(store):
    store.init_db()
    store.init_db()
    assert store.load() is None


def test_load_skips_rows_with_unparseable_status(store, registry):
    from backend_turboauth.database import WalletAuthRow

    registry.set_status(WALLET, AuthStatus.ACTIVE, 75)
    registry.set_status(WALLET_2, AuthStatus.REVIEW, 20)
    store.save(registry)
    with store._session_scope() as session:
        session.query(WalletAuthRow).filter(WalletAuthRow.wallet == WALLET_2).update(
            {"status": "DELETED"}
        )

    snap = store.load()
    assert snap is not None
    assert list(snap.records) == [WALLET]
    restored = store.load_registry(ADMIN)
    assert restored.get_status(WALLET).trust_score == 75
    assert WALLET_2 not in restored


def test_save_waits_for_registry_lock(store, registry):
    """A save cannot snapshot while another caller holds the registry lock."""
    import threading

    registry.set_status(WALLET, AuthStatus.ACTIVE, 10)
    with registry.locked():
        saver = threading.Thread(target=store.save, args=(registry,))
        saver.start()
        saver.join(timeout=0.2)
        assert saver.is_alive()
        registry.set_status(WALLET, AuthStatus.BLOCKED, 90)
    saver.join(timeout=10)
    assert not saver.is_alive()
    snap = store.load()
    assert snap is not None
    assert snap.records[WALLET] == registry.get_status(WALLET)
