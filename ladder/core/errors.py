"""
Exception hierarchy for the ladder engine.

Rule: every error has a machine-readable `code` string so callers can
branch on it without parsing English messages.

Only configuration and programming mistakes raise. Expected outcomes of
scoring (a rejected level-up, an empty record set, an out-of-range score)
are returned as values by the services, never raised.
"""
from __future__ import annotations

from typing import Any


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class LadderError(Exception):
    """Base class for all engine-level errors."""
    code: str = "LADDER_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class LevelTableError(LadderError):
    code = "INVALID_LEVEL_TABLE"


class UnknownDomainError(LadderError):
    code = "UNKNOWN_DOMAIN"

    def __init__(self, domain: str, allowed: tuple[str, ...]):
        super().__init__(
            message=f"Unknown rating domain '{domain}'.",
            details={"domain": domain, "allowed": list(allowed)},
        )


class UnknownWindowPolicyError(LadderError):
    code = "UNKNOWN_WINDOW_POLICY"

    def __init__(self, name: str, allowed: tuple[str, ...]):
        super().__init__(
            message=f"Unknown trend window policy '{name}'.",
            details={"policy": name, "allowed": list(allowed)},
        )
