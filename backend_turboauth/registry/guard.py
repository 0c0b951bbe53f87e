"""
Caller authorization for registry mutations.

The Registry itself trusts every caller. AuthorizedRegistry wraps it for hosts
that know the invoking identity: each mutator takes the caller first and
raises UnauthorizedError before any validation or state change when the
checker refuses. The check and the mutation run under the registry lock, so
a concurrent admin transfer cannot slip in between them.
"""

from __future__ import annotations

from typing import Iterable

from backend_turboauth.core.exceptions import UnauthorizedError
from backend_turboauth.logging import get_logger
from backend_turboauth.registry.contract import Registry
from backend_turboauth.registry.models import (
    AuthStatus,
    LookupResult,
    WalletAuthRecord,
)
from backend_turboauth.utils.wallet_utils import short_address

logger = get_logger(__name__)


class AuthorizationChecker:
    """Decides whether caller may mutate registry."""

    def is_authorized(self, caller: str, registry: Registry) -> bool:
        raise NotImplementedError


class AdminChecker(AuthorizationChecker):
    """Only the current admin may mutate."""

    def is_authorized(self, caller: str, registry: Registry) -> bool:
        return bool(caller) and registry.is_admin(caller)


class AuthorizedRegistry:
    """Registry facade that enforces caller authority on every mutator."""

    def __init__(
        self,
        registry: Registry,
        checker: AuthorizationChecker | None = None,
    ) -> None:
        self.registry = registry
        self.checker = checker or AdminChecker()

    def _require(self, caller: str, operation: str) -> None:
        if not self.checker.is_authorized(caller, self.registry):
            logger.warning(
                "unauthorized_mutation",
                operation=operation,
                caller=short_address(caller or ""),
            )
            raise UnauthorizedError(caller, operation)

    def set_status(
        self,
        caller: str,
        wallet: str,
        status: AuthStatus,
        trust_score: int,
    ) -> bool:
        with self.registry.locked():
            self._require(caller, "set_status")
            return self.registry.set_status(wallet, status, trust_score)

    def set_next_contract(self, caller: str, contract_address: str) -> bool:
        with self.registry.locked():
            self._require(caller, "set_next_contract")
            return self.registry.set_next_contract(contract_address)

    def transfer_admin(self, caller: str, new_admin: str) -> bool:
        with self.registry.locked():
            self._require(caller, "transfer_admin")
            return self.registry.transfer_admin(new_admin)

    # Reads are public.

    def get_status(self, wallet: str) -> WalletAuthRecord:
        return self.registry.get_status(wallet)

    def lookup(self, wallet: str) -> LookupResult:
        return self.registry.lookup(wallet)

    def get_statuses(self, wallets: Iterable[str]) -> dict[str, WalletAuthRecord]:
        return self.registry.get_statuses(wallets)

    def get_admin(self) -> str:
        return self.registry.get_admin()

    def get_next_contract(self) -> str:
        return self.registry.get_next_contract()
