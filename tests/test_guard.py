"""
Tests for AuthorizedRegistry: only the current admin may mutate; refusal
happens before validation and leaves no trace.
"""

from __future__ import annotations

import pytest

from backend_turboauth.core.exceptions import UnauthorizedError
from backend_turboauth.registry import (
    AdminChecker,
    AuthorizationChecker,
    AuthorizedRegistry,
    AuthStatus,
    EventKind,
)

ADMIN = "B" * 60
WALLET = "A" * 60
NEW_ADMIN = "C" * 60
CONTRACT = "D" * 60
STRANGER = "Z" * 60


@pytest.fixture
def guard(registry):
    return AuthorizedRegistry(registry)


def test_default_checker_is_admin_checker(guard):
    assert isinstance(guard.checker, AdminChecker)


def test_admin_can_set_status(guard, notifier):
    assert guard.set_status(ADMIN, WALLET, AuthStatus.ACTIVE, 75) is True
    assert guard.get_status(WALLET).trust_score == 75
    assert notifier.kinds() == [EventKind.REGISTERED]


def test_stranger_is_refused(guard, registry, notifier):
    with pytest.raises(UnauthorizedError) as exc:
        guard.set_status(STRANGER, WALLET, AuthStatus.ACTIVE, 75)
    assert exc.value.operation == "set_status"
    assert exc.value.to_dict()["error"] == "UNAUTHORIZED"
    assert len(registry) == 0
    assert notifier.events == []


def test_refusal_precedes_validation(guard):
    """An unauthorized caller gets UnauthorizedError even for invalid input."""
    with pytest.raises(UnauthorizedError):
        guard.set_status(STRANGER, "bad", AuthStatus.ACTIVE, 500)


def test_empty_caller_refused(guard):
    with pytest.raises(UnauthorizedError):
        guard.set_next_contract("", CONTRACT)


def test_soft_rejection_passes_through(guard):
    assert guard.set_status(ADMIN, WALLET, AuthStatus.ACTIVE, 101) is False


def test_transfer_moves_authority(guard):
    assert guard.transfer_admin(ADMIN, NEW_ADMIN) is True
    assert guard.get_admin() == NEW_ADMIN
    with pytest.raises(UnauthorizedError):
        guard.set_next_contract(ADMIN, CONTRACT)
    assert guard.set_next_contract(NEW_ADMIN, CONTRACT) is True
    assert guard.get_next_contract() == CONTRACT


def test_stranger_cannot_transfer(guard):
    with pytest.raises(UnauthorizedError):
        guard.transfer_admin(STRANGER, STRANGER)
    assert guard.get_admin() == ADMIN


def test_reads_are_public(guard):
    assert guard.lookup("bad").outcome.value == "invalid_address"
    assert guard.get_statuses([WALLET])[WALLET].status is AuthStatus.UNKNOWN


class _AllowList(AuthorizationChecker):
    def __init__(self, *callers):
        self.callers = set(callers)

    def is_authorized(self, caller, registry):
        return caller in self.callers


def test_custom_checker(registry):
    guard = AuthorizedRegistry(registry, checker=_AllowList(STRANGER))
    assert guard.set_status(STRANGER, WALLET, AuthStatus.REVIEW, 40) is True
    with pytest.raises(UnauthorizedError):
        guard.set_status(ADMIN, WALLET, AuthStatus.REVIEW, 40)


def test_base_checker_not_implemented(registry):
    with pytest.raises(NotImplementedError):
        AuthorizationChecker().is_authorized(ADMIN, registry)
