"""
Core utilities — shared exceptions and cross-cutting concerns.
"""

from backend_turboauth.core.exceptions import (
    InvalidAddressError,
    InvalidStatusError,
    TurboAuthError,
    UnauthorizedError,
)

__all__ = [
    "InvalidAddressError",
    "InvalidStatusError",
    "TurboAuthError",
    "UnauthorizedError",
]
