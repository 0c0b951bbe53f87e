"""
Wallet authorization registry — status/score state machine, notifiers and
the caller-authorization guard.
"""

from backend_turboauth.registry.models import (
    DEFAULT_RECORD,
    AuthStatus,
    LookupOutcome,
    LookupResult,
    RegistrySnapshot,
    WalletAuthRecord,
)
from backend_turboauth.registry.notifier import (
    CompositeNotifier,
    EventKind,
    LoggingNotifier,
    Notifier,
    RecordingNotifier,
    RegistryEvent,
)
from backend_turboauth.registry.contract import Registry
from backend_turboauth.registry.guard import (
    AdminChecker,
    AuthorizationChecker,
    AuthorizedRegistry,
)

__all__ = [
    "DEFAULT_RECORD",
    "AdminChecker",
    "AuthStatus",
    "AuthorizationChecker",
    "AuthorizedRegistry",
    "CompositeNotifier",
    "EventKind",
    "LoggingNotifier",
    "LookupOutcome",
    "LookupResult",
    "Notifier",
    "RecordingNotifier",
    "Registry",
    "RegistryEvent",
    "RegistrySnapshot",
    "WalletAuthRecord",
]
