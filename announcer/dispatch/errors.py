"""Dispatch error taxonomy.

Per-recipient delivery failures are not exceptions; they travel as
``WriteResult`` values and end up in ``DeliveryOutcome.failure_details``.
"""
from __future__ import annotations

MISSING_CONTENT = "missing_content"
MISSING_TARGETING = "missing_targeting"
UNKNOWN_TARGETING_MODE = "unknown_targeting_mode"
MISSING_RECIPIENTS = "missing_recipients"
INVALID_FIELD = "invalid_field"

VALID_REASONS: frozenset[str] = frozenset({
    MISSING_CONTENT,
    MISSING_TARGETING,
    UNKNOWN_TARGETING_MODE,
    MISSING_RECIPIENTS,
    INVALID_FIELD,
})


class DispatchError(Exception):
    """Base class for dispatch failures surfaced to the caller."""


class AnnouncementValidationError(DispatchError, ValueError):
    """The request is malformed; nothing was written."""

    def __init__(self, reason: str, message: str) -> None:
        if reason not in VALID_REASONS:
            raise ValueError(f"Unknown validation reason {reason!r}")
        super().__init__(message)
        self.reason = reason
        self.message = message


class DependencyUnavailable(DispatchError):
    """Storage or the notification writer is not reachable."""
