"""Error codes and exception types.

Every failure that crosses a module boundary is a ``PkgCompleteError`` carrying a
machine-readable ``code`` and a ``recoverable`` flag. Registry failures are caught by
the resolver and the prefetch orchestrator and degrade to empty results; the other
error types signal programming or configuration mistakes and are left to propagate.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    REGISTRY_UNAVAILABLE = "REGISTRY_UNAVAILABLE"
    REGISTRY_AUTH_FAILED = "REGISTRY_AUTH_FAILED"
    REGISTRY_RATE_LIMITED = "REGISTRY_RATE_LIMITED"
    REGISTRY_BAD_RESPONSE = "REGISTRY_BAD_RESPONSE"
    PACKAGE_NOT_FOUND = "PACKAGE_NOT_FOUND"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    INVALID_CONFIG = "INVALID_CONFIG"


class PkgCompleteError(Exception):
    """Base error with a stable code for callers and logs."""

    def __init__(self, code: ErrorCode, message: str, *, recoverable: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "recoverable": self.recoverable,
            }
        }


class RegistryError(PkgCompleteError):
    """A registry call failed (transport, auth, throttling, or bad payload)."""


class InvalidTransitionError(PkgCompleteError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            ErrorCode.INVALID_STATE_TRANSITION,
            f"Cannot move cache readiness from {current!r} to {target!r}",
        )
        self.current = current
        self.target = target


class ConfigError(PkgCompleteError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.INVALID_CONFIG, message)
