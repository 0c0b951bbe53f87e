"""Wallet address and trust score validation utilities."""

from __future__ import annotations

import re
from typing import Any

ADDRESS_LENGTH = 60
MIN_TRUST_SCORE = 0
MAX_TRUST_SCORE = 100

# Qubic identity: 60 uppercase A-Z characters
_ADDRESS_RE = re.compile(r"[A-Z]{60}")


def is_valid_address(address: Any) -> bool:
    """Return True if address is exactly 60 uppercase ASCII letters."""
    if not isinstance(address, str) or len(address) != ADDRESS_LENGTH:
        return False
    return _ADDRESS_RE.fullmatch(address) is not None


def is_valid_score(score: Any) -> bool:
    """Return True if score is an int in [0, 100]. bool is not a score."""
    if isinstance(score, bool) or not isinstance(score, int):
        return False
    return MIN_TRUST_SCORE <= score <= MAX_TRUST_SCORE


def short_address(address: str, keep: int = 16) -> str:
    """Truncate an address for log output."""
    if len(address) <= keep:
        return address
    return address[:keep] + "..."
