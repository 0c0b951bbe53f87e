"""
Data models for the wallet authorization registry.

AuthStatus, the per-wallet record, tagged lookup results and the full
registry snapshot used for persistence. All records are immutable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from backend_turboauth.core.exceptions import InvalidStatusError


class AuthStatus(str, Enum):
    """Authentication status of a wallet. UNKNOWN doubles as "never registered"."""

    UNKNOWN = "UNKNOWN"
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"
    REVIEW = "REVIEW"

    @property
    def code(self) -> int:
        """On-chain ordinal (UNKNOWN=0 .. REVIEW=3)."""
        return _STATUS_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> AuthStatus:
        for status, value in _STATUS_CODES.items():
            if value == code:
                return status
        raise InvalidStatusError(code)

    @classmethod
    def parse(cls, value: Any) -> AuthStatus:
        """Accept a member, its name (any case) or its on-chain ordinal."""
        if isinstance(value, AuthStatus):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.from_code(value)
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidStatusError(value)


_STATUS_CODES: dict[AuthStatus, int] = {
    AuthStatus.UNKNOWN: 0,
    AuthStatus.ACTIVE: 1,
    AuthStatus.BLOCKED: 2,
    AuthStatus.REVIEW: 3,
}


@dataclass(frozen=True)
class WalletAuthRecord:
    """
    Authorization state of one wallet.

    status: current AuthStatus.
    trust_score: 0-100.
    updated_at: Unix seconds of the last successful set_status; 0 when never registered.
    """

    status: AuthStatus = AuthStatus.UNKNOWN
    trust_score: int = 0
    updated_at: int = 0

    @classmethod
    def default(cls) -> WalletAuthRecord:
        return DEFAULT_RECORD

    def is_active(self) -> bool:
        return self.status is AuthStatus.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "trust_score": self.trust_score,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WalletAuthRecord:
        return cls(
            status=AuthStatus.parse(data.get("status", AuthStatus.UNKNOWN)),
            trust_score=int(data.get("trust_score", 0)),
            updated_at=int(data.get("updated_at", 0)),
        )


DEFAULT_RECORD = WalletAuthRecord()


class LookupOutcome(str, Enum):
    """Why a lookup did or did not find a record."""

    OK = "ok"
    INVALID_ADDRESS = "invalid_address"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class LookupResult:
    """Tagged read result: record is the default unless outcome is OK."""

    outcome: LookupOutcome
    record: WalletAuthRecord = DEFAULT_RECORD

    @property
    def found(self) -> bool:
        return self.outcome is LookupOutcome.OK

    def to_dict(self) -> dict[str, Any]:
        return {"outcome": self.outcome.value, "record": self.record.to_dict()}


@dataclass(frozen=True)
class RegistrySnapshot:
    """Complete registry state: admin, upgrade pointer and all wallet records."""

    admin_address: str
    next_contract_address: str = ""
    records: dict[str, WalletAuthRecord] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "admin_address": self.admin_address,
            "next_contract_address": self.next_contract_address,
            "records": {w: r.to_dict() for w, r in self.records.items()},
        }
