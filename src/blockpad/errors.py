"""Blockpad Error Hierarchy.

Provides a structured error hierarchy for editor operations:
- BlockpadError: Base exception for all editor errors
- ValidationError: Input validation failures (unknown block types, bad payloads)
- UploadError: Image upload failures
- ConfigurationError: Configuration/setup issues

The editing engine itself never raises for invariant-protecting cases;
those are silent no-ops. These errors cover the edges where a caller hands
the engine something it cannot interpret.

Usage:
    from blockpad.errors import ValidationError

    if raw_type not in known_types:
        raise ValidationError("Unknown block type", field="type", value=raw_type)
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Error Base Classes
# =============================================================================


class BlockpadError(Exception):
    """Base exception for all blockpad errors.

    Attributes:
        message: Human-readable error description
        recoverable: Whether the operation can be retried
        context: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        *,
        recoverable: bool = False,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured dictionary for transport."""
        return {
            "type": type(self).__name__.lower().replace("error", ""),
            "message": self.message,
            "recoverable": self.recoverable,
            **{k: v for k, v in self.context.items() if v is not None},
        }


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(BlockpadError):
    """Input validation failed.

    Example:
        raise ValidationError("Unknown block type", field="type", value="table")
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = _truncate(str(value), 100)
        super().__init__(message, recoverable=False, context=context)
        self.field = field


# =============================================================================
# Upload Errors
# =============================================================================


class UploadError(BlockpadError):
    """Image upload failed.

    Uploads are retryable by nature, so these are marked recoverable.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        filename: str | None = None,
    ) -> None:
        super().__init__(
            message,
            recoverable=True,
            context={
                "status_code": status_code,
                "filename": _truncate(filename, 200),
            },
        )
        self.status_code = status_code


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(BlockpadError):
    """Configuration or setup issue."""

    def __init__(
        self,
        message: str,
        *,
        setting: str | None = None,
        expected: str | None = None,
    ) -> None:
        super().__init__(
            message,
            recoverable=False,
            context={
                "setting": setting,
                "expected": expected,
            },
        )


def _truncate(value: str | None, max_len: int) -> str | None:
    """Truncate a string value for safe logging."""
    if value is None:
        return None
    if len(value) <= max_len:
        return value
    return value[:max_len] + "..."
