"""
TurboAuth registry persistence — SQLAlchemy-backed snapshot store.

The registry itself is in-memory; the host persists it here after each
successful mutation and restores it on startup. Uses TURBOAUTH_DB_URL or
DATABASE_URL when set; otherwise SQLite (TURBOAUTH_DB_PATH or turboauth.db).
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Column, Integer, String, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend_turboauth.config.env import mask_database_url
from backend_turboauth.core.exceptions import InvalidStatusError
from backend_turboauth.logging import get_logger
from backend_turboauth.registry.contract import Registry
from backend_turboauth.registry.models import (
    AuthStatus,
    RegistrySnapshot,
    WalletAuthRecord,
)
from backend_turboauth.registry.notifier import Notifier

logger = get_logger(__name__)

Base = declarative_base()

META_ADMIN_ADDRESS = "admin_address"
META_NEXT_CONTRACT = "next_contract_address"

# -----------------------------------------------------------------------------
# SQLAlchemy models
# -----------------------------------------------------------------------------


class WalletAuthRow(Base):
    """One row per registered wallet: status, trust score and last update time."""

    __tablename__ = "wallet_auth"

    wallet = Column(String(60), primary_key=True)
    status = Column(String(16), nullable=False, index=True)
    trust_score = Column(Integer, nullable=False)
    updated_at = Column(Integer, nullable=False)  # Unix seconds

    def to_record(self) -> WalletAuthRecord:
        return WalletAuthRecord(
            status=AuthStatus.parse(self.status),
            trust_score=int(self.trust_score),
            updated_at=int(self.updated_at),
        )


class RegistryMeta(Base):
    """Key/value registry fields (admin address, next contract address)."""

    __tablename__ = "registry_meta"

    key = Column(String(64), primary_key=True)
    value = Column(String(256), nullable=False, default="")


# -----------------------------------------------------------------------------
# Store
# -----------------------------------------------------------------------------


class RegistryStore:
    """Save and restore full registry snapshots."""

    def __init__(self, url: str) -> None:
        self.url = url
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self._engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        """Context manager for a single session. Commits on success, rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> None:
        """Create tables if they do not exist. Safe to call on every startup."""
        try:
            Base.metadata.create_all(bind=self._engine)
            logger.info("registry_store_init_db", url=mask_database_url(self.url))
        except Exception as e:
            logger.exception("registry_store_init_db_failed", error=str(e))
            raise

    def save(self, registry: Registry) -> None:
        """
        Replace persisted state with the registry's current snapshot.

        The snapshot and the commit both happen under the registry lock, so a
        concurrent mutation cannot be overwritten by an older snapshot.
        """
        with registry.locked():
            self.save_snapshot(registry.snapshot())

    def save_snapshot(self, snapshot: RegistrySnapshot) -> None:
        """Replace persisted state with snapshot in one transaction."""
        with self._session_scope() as session:
            session.query(WalletAuthRow).delete()
            session.query(RegistryMeta).delete()
            session.add_all(
                WalletAuthRow(
                    wallet=wallet,
                    status=record.status.value,
                    trust_score=record.trust_score,
                    updated_at=record.updated_at,
                )
                for wallet, record in snapshot.records.items()
            )
            session.add(RegistryMeta(key=META_ADMIN_ADDRESS, value=snapshot.admin_address))
            session.add(
                RegistryMeta(key=META_NEXT_CONTRACT, value=snapshot.next_contract_address)
            )
        logger.debug("registry_saved", wallets=len(snapshot.records))

    def load(self) -> RegistrySnapshot | None:
        """Return the persisted snapshot, or None when nothing has been saved yet."""
        with self._session_scope() as session:
            meta = {row.key: row.value for row in session.query(RegistryMeta).all()}
            admin = meta.get(META_ADMIN_ADDRESS)
            if not admin:
                return None
            records: dict[str, WalletAuthRecord] = {}
            dropped = 0
            for row in session.query(WalletAuthRow).all():
                try:
                    records[row.wallet] = row.to_record()
                except InvalidStatusError:
                    dropped += 1
        if dropped:
            logger.warning("registry_rows_dropped", reason="invalid_status", dropped=dropped)
        return RegistrySnapshot(
            admin_address=admin,
            next_contract_address=meta.get(META_NEXT_CONTRACT) or "",
            records=records,
        )

    def load_registry(
        self,
        default_admin: str,
        notifier: Notifier | None = None,
    ) -> Registry:
        """
        Restore the registry from the database, or create a fresh one owned by
        default_admin when nothing is persisted. Raises InvalidAddressError when
        the resulting admin is malformed.
        """
        snapshot = self.load()
        if snapshot is None:
            logger.info("registry_created", source="default_admin")
            return Registry(default_admin, notifier=notifier)
        logger.info(
            "registry_restored",
            wallets=len(snapshot.records),
            has_next_contract=bool(snapshot.next_contract_address),
        )
        return Registry.from_snapshot(snapshot, notifier=notifier)

    def dispose(self) -> None:
        self._engine.dispose()
