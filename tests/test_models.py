"""
Tests for registry data models: AuthStatus parsing, record defaults and serialization.
"""

from __future__ import annotations

import pytest

from backend_turboauth.core.exceptions import InvalidStatusError
from backend_turboauth.registry import (
    DEFAULT_RECORD,
    AuthStatus,
    LookupOutcome,
    LookupResult,
    RegistrySnapshot,
    WalletAuthRecord,
)


def test_status_codes_match_on_chain_ordinals():
    assert [s.code for s in AuthStatus] == [0, 1, 2, 3]
    assert AuthStatus.from_code(2) is AuthStatus.BLOCKED


@pytest.mark.parametrize(
    "value,expected",
    [
        (AuthStatus.REVIEW, AuthStatus.REVIEW),
        ("ACTIVE", AuthStatus.ACTIVE),
        (" blocked ", AuthStatus.BLOCKED),
        (0, AuthStatus.UNKNOWN),
        (3, AuthStatus.REVIEW),
    ],
)
def test_parse(value, expected):
    assert AuthStatus.parse(value) is expected


@pytest.mark.parametrize("value", ["DELETED", 4, -1, None, True, 1.0])
def test_parse_invalid(value):
    with pytest.raises(InvalidStatusError):
        AuthStatus.parse(value)


def test_default_record():
    assert WalletAuthRecord.default() == WalletAuthRecord(AuthStatus.UNKNOWN, 0, 0)
    assert WalletAuthRecord.default() is DEFAULT_RECORD
    assert not DEFAULT_RECORD.is_active()


def test_record_dict_round_trip():
    record = WalletAuthRecord(AuthStatus.BLOCKED, 10, 1_700_000_000)
    data = record.to_dict()
    assert data == {"status": "BLOCKED", "trust_score": 10, "updated_at": 1_700_000_000}
    assert WalletAuthRecord.from_dict(data) == record


def test_record_is_immutable():
    with pytest.raises(AttributeError):
        DEFAULT_RECORD.trust_score = 5


def test_lookup_result_defaults_to_default_record():
    result = LookupResult(LookupOutcome.NOT_FOUND)
    assert result.record == DEFAULT_RECORD
    assert not result.found
    assert result.to_dict()["outcome"] == "not_found"


def test_snapshot_to_dict():
    snap = RegistrySnapshot(
        admin_address="B" * 60,
        records={"A" * 60: WalletAuthRecord(AuthStatus.ACTIVE, 75, 1)},
    )
    data = snap.to_dict()
    assert data["next_contract_address"] == ""
    assert data["records"]["A" * 60]["status"] == "ACTIVE"
