"""
Registry event notifiers.

The registry calls three hooks after a mutation has been committed:
on_registered, on_status_changed and on_contract_upgraded. Hooks are
synchronous and fire-and-forget; the registry logs and discards any
exception a notifier raises, so delivery problems are the notifier's concern.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from backend_turboauth.logging import get_logger
from backend_turboauth.registry.models import AuthStatus

logger = get_logger(__name__)


def _unix_now() -> int:
    return int(time.time())


class EventKind(str, Enum):
    REGISTERED = "Registered"
    STATUS_CHANGED = "StatusChanged"
    CONTRACT_UPGRADED = "ContractUpgraded"


@dataclass(frozen=True)
class RegistryEvent:
    """One emitted registry event. Fields not relevant to the kind are None."""

    kind: EventKind
    wallet: str | None = None
    status: AuthStatus | None = None
    old_status: AuthStatus | None = None
    trust_score: int | None = None
    contract_address: str | None = None
    emitted_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"kind": self.kind.value, "emitted_at": self.emitted_at}
        if self.wallet is not None:
            out["wallet"] = self.wallet
        if self.old_status is not None:
            out["old_status"] = self.old_status.value
        if self.status is not None:
            out["status"] = self.status.value
        if self.trust_score is not None:
            out["trust_score"] = self.trust_score
        if self.contract_address is not None:
            out["contract_address"] = self.contract_address
        return out


class Notifier:
    """Base notifier: every hook is a no-op. Subclass and override what you need."""

    def on_registered(self, wallet: str, status: AuthStatus, trust_score: int) -> None:
        pass

    def on_status_changed(
        self,
        wallet: str,
        old_status: AuthStatus,
        new_status: AuthStatus,
        trust_score: int,
    ) -> None:
        pass

    def on_contract_upgraded(self, contract_address: str) -> None:
        pass


class LoggingNotifier(Notifier):
    """Writes each event to the structured log stream for off-chain observers."""

    def on_registered(self, wallet: str, status: AuthStatus, trust_score: int) -> None:
        logger.info(
            "wallet_registered",
            wallet_id=wallet,
            status=status.value,
            trust_score=trust_score,
        )

    def on_status_changed(
        self,
        wallet: str,
        old_status: AuthStatus,
        new_status: AuthStatus,
        trust_score: int,
    ) -> None:
        logger.info(
            "wallet_status_changed",
            wallet_id=wallet,
            old_status=old_status.value,
            new_status=new_status.value,
            trust_score=trust_score,
        )

    def on_contract_upgraded(self, contract_address: str) -> None:
        logger.info("contract_upgraded", next_contract=contract_address)


class RecordingNotifier(Notifier):
    """
    Keeps every event in memory, in emission order.

    clock stamps emitted_at; pass the registry's clock so event times line up
    with record updated_at values.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self.events: list[RegistryEvent] = []
        self._clock = clock or _unix_now

    def on_registered(self, wallet: str, status: AuthStatus, trust_score: int) -> None:
        self.events.append(
            RegistryEvent(
                kind=EventKind.REGISTERED,
                wallet=wallet,
                status=status,
                trust_score=trust_score,
                emitted_at=self._clock(),
            )
        )

    def on_status_changed(
        self,
        wallet: str,
        old_status: AuthStatus,
        new_status: AuthStatus,
        trust_score: int,
    ) -> None:
        self.events.append(
            RegistryEvent(
                kind=EventKind.STATUS_CHANGED,
                wallet=wallet,
                old_status=old_status,
                status=new_status,
                trust_score=trust_score,
                emitted_at=self._clock(),
            )
        )

    def on_contract_upgraded(self, contract_address: str) -> None:
        self.events.append(
            RegistryEvent(
                kind=EventKind.CONTRACT_UPGRADED,
                contract_address=contract_address,
                emitted_at=self._clock(),
            )
        )

    def kinds(self) -> list[EventKind]:
        return [e.kind for e in self.events]

    def clear(self) -> None:
        self.events.clear()


class CompositeNotifier(Notifier):
    """
    Fan out each hook to several notifiers in order.

    A child that raises is logged and skipped; the remaining children still
    receive the event.
    """

    def __init__(self, *notifiers: Notifier) -> None:
        self.notifiers: list[Notifier] = list(notifiers)

    def _dispatch(self, hook: str, *args: Any) -> None:
        for notifier in self.notifiers:
            try:
                getattr(notifier, hook)(*args)
            except Exception as e:
                logger.exception(
                    "notifier_child_failed",
                    hook=hook,
                    notifier=type(notifier).__name__,
                    error=str(e),
                )

    def on_registered(self, wallet: str, status: AuthStatus, trust_score: int) -> None:
        self._dispatch("on_registered", wallet, status, trust_score)

    def on_status_changed(
        self,
        wallet: str,
        old_status: AuthStatus,
        new_status: AuthStatus,
        trust_score: int,
    ) -> None:
        self._dispatch("on_status_changed", wallet, old_status, new_status, trust_score)

    def on_contract_upgraded(self, contract_address: str) -> None:
        self._dispatch("on_contract_upgraded", contract_address)
