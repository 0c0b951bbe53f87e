"""
Application-level exceptions.

Responsibilities:
- Define domain exceptions (InvalidAddress, InvalidStatus, Unauthorized).
- Provide consistent error codes and messages for API error handling.

Only hard failures raise: registry construction/restoration with a bad admin,
unparseable status values, and refused callers at the authorization guard.
Mutation-time validation is soft (mutators return False).
"""

from __future__ import annotations

from typing import Any


class TurboAuthError(Exception):
    """Base class for TurboAuth errors; carries a stable error code."""

    code = "TURBOAUTH_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message}


class InvalidAddressError(TurboAuthError, ValueError):
    """Address is not 60 uppercase A-Z characters."""

    code = "INVALID_ADDRESS"

    def __init__(self, address: str, message: str = "Invalid wallet address") -> None:
        super().__init__(message)
        self.address = address


class InvalidStatusError(TurboAuthError, ValueError):
    """Value cannot be interpreted as an AuthStatus."""

    code = "INVALID_STATUS"

    def __init__(self, value: Any) -> None:
        super().__init__(f"Invalid auth status: {value!r}")
        self.value = value


class UnauthorizedError(TurboAuthError):
    """Caller is not allowed to mutate the registry."""

    code = "UNAUTHORIZED"

    def __init__(self, caller: str, operation: str) -> None:
        super().__init__(f"Caller not authorized for {operation}")
        self.caller = caller
        self.operation = operation

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["operation"] = self.operation
        return out
