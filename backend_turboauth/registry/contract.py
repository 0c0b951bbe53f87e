"""
Wallet authorization registry: the TurboAuth contract state machine.

Holds a mapping wallet -> WalletAuthRecord, the admin identity and an optional
upgrade pointer to a successor contract. Mutations validate input, write the
new state, then notify. Invalid mutation input is a soft rejection (False, no
side effects); only construction with a bad admin raises.

Caller authority is NOT checked here. The host must confirm the caller is the
current admin before invoking any mutator; AuthorizedRegistry (registry.guard)
is the in-process way to do that.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator

from backend_turboauth.core.exceptions import InvalidAddressError
from backend_turboauth.logging import get_logger
from backend_turboauth.registry.models import (
    DEFAULT_RECORD,
    AuthStatus,
    LookupOutcome,
    LookupResult,
    RegistrySnapshot,
    WalletAuthRecord,
)
from backend_turboauth.registry.notifier import LoggingNotifier, Notifier
from backend_turboauth.utils.wallet_utils import (
    is_valid_address,
    is_valid_score,
    short_address,
)

logger = get_logger(__name__)


def _unix_now() -> int:
    return int(time.time())


class Registry:
    """Single-admin wallet authorization registry."""

    def __init__(
        self,
        admin: str,
        notifier: Notifier | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        if not is_valid_address(admin):
            raise InvalidAddressError(admin, "Invalid admin address")
        self._records: dict[str, WalletAuthRecord] = {}
        self._admin_address = admin
        self._next_contract_address = ""
        self._notifier = notifier if notifier is not None else LoggingNotifier()
        self._clock = clock or _unix_now
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_status(self, wallet: str) -> WalletAuthRecord:
        """Record for wallet; the default {UNKNOWN, 0, 0} if malformed or unregistered."""
        return self.lookup(wallet).record

    def lookup(self, wallet: str) -> LookupResult:
        """Like get_status, but says whether the address was malformed or just unseen."""
        if not is_valid_address(wallet):
            return LookupResult(LookupOutcome.INVALID_ADDRESS)
        with self._lock:
            record = self._records.get(wallet)
        if record is None:
            return LookupResult(LookupOutcome.NOT_FOUND)
        return LookupResult(LookupOutcome.OK, record)

    def get_statuses(self, wallets: Iterable[str]) -> dict[str, WalletAuthRecord]:
        """Batch read; every requested key maps to its get_status result."""
        with self._lock:
            return {w: self.get_status(w) for w in wallets}

    def get_admin(self) -> str:
        return self._admin_address

    def get_next_contract(self) -> str:
        return self._next_contract_address

    def is_admin(self, address: str) -> bool:
        return address == self._admin_address

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, wallet: object) -> bool:
        return wallet in self._records

    # ------------------------------------------------------------------
    # Mutations (caller must already be authorized)
    # ------------------------------------------------------------------

    def set_status(self, wallet: str, status: AuthStatus, trust_score: int) -> bool:
        """
        Create or overwrite the record for wallet.

        Returns False with no write and no event when the address is malformed,
        the score is outside [0, 100] or status is not an AuthStatus. On success
        emits Registered if the previous status was UNKNOWN (or absent), else
        StatusChanged.
        """
        if not is_valid_address(wallet):
            logger.debug("set_status_rejected", reason="invalid_address")
            return False
        if not is_valid_score(trust_score):
            logger.debug(
                "set_status_rejected",
                wallet_id=short_address(wallet),
                reason="invalid_trust_score",
                trust_score=trust_score,
            )
            return False
        if not isinstance(status, AuthStatus):
            logger.debug(
                "set_status_rejected",
                wallet_id=short_address(wallet),
                reason="invalid_status",
            )
            return False

        with self._lock:
            previous = self._records.get(wallet)
            old_status = previous.status if previous is not None else AuthStatus.UNKNOWN
            self._records[wallet] = WalletAuthRecord(
                status=status,
                trust_score=trust_score,
                updated_at=self._clock(),
            )

        if old_status is AuthStatus.UNKNOWN:
            self._notify("on_registered", wallet, status, trust_score)
        else:
            self._notify("on_status_changed", wallet, old_status, status, trust_score)
        return True

    def set_next_contract(self, contract_address: str) -> bool:
        """Point clients at a successor contract. No reachability or compatibility check."""
        if not is_valid_address(contract_address):
            logger.debug("set_next_contract_rejected", reason="invalid_address")
            return False
        with self._lock:
            self._next_contract_address = contract_address
        self._notify("on_contract_upgraded", contract_address)
        return True

    def transfer_admin(self, new_admin: str) -> bool:
        """Replace the admin identity. Emits no notification."""
        if not is_valid_address(new_admin):
            logger.debug("transfer_admin_rejected", reason="invalid_address")
            return False
        with self._lock:
            self._admin_address = new_admin
        logger.info("admin_transferred", new_admin=short_address(new_admin))
        return True

    # ------------------------------------------------------------------
    # Host integration
    # ------------------------------------------------------------------

    @contextmanager
    def locked(self) -> Iterator[Registry]:
        """Hold the registry lock so a caller can check then mutate atomically."""
        with self._lock:
            yield self

    def snapshot(self) -> RegistrySnapshot:
        with self._lock:
            return RegistrySnapshot(
                admin_address=self._admin_address,
                next_contract_address=self._next_contract_address,
                records=dict(self._records),
            )

    @classmethod
    def from_snapshot(
        cls,
        snapshot: RegistrySnapshot,
        notifier: Notifier | None = None,
        clock: Callable[[], int] | None = None,
    ) -> Registry:
        """
        Rebuild a registry from persisted state without emitting events.
        Raises InvalidAddressError for a bad admin; drops invalid records.
        """
        registry = cls(snapshot.admin_address, notifier=notifier, clock=clock)
        next_contract = snapshot.next_contract_address or ""
        if next_contract and not is_valid_address(next_contract):
            logger.warning("snapshot_next_contract_dropped", reason="invalid_address")
            next_contract = ""
        registry._next_contract_address = next_contract
        dropped = 0
        for wallet, record in snapshot.records.items():
            if not is_valid_address(wallet) or not is_valid_score(record.trust_score):
                dropped += 1
                continue
            registry._records[wallet] = record
        if dropped:
            logger.warning("snapshot_records_dropped", dropped=dropped)
        return registry

    def _notify(self, hook: str, *args: object) -> None:
        # State is already committed; a notifier failure must not change the outcome.
        try:
            getattr(self._notifier, hook)(*args)
        except Exception as e:
            logger.exception(
                "notifier_failed",
                hook=hook,
                notifier=type(self._notifier).__name__,
                error=str(e),
            )


__all__ = ["DEFAULT_RECORD", "Registry"]
