"""Callsight exception hierarchy."""

from __future__ import annotations


class CallsightError(Exception):
    """Base exception for all Callsight errors."""


class ConfigurationError(CallsightError):
    """Required settings are missing or inconsistent."""


class ValidationError(CallsightError):
    """A notification or result blob is missing or has a malformed required field."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class EnvelopeShapeError(ValidationError):
    """Message body matches neither the direct nor the wrapped envelope shape."""


class NotFoundSkip(CallsightError):
    """Completion event refers to an object that is not a job result.

    Raised and caught inside the persistence stage; never reaches the transport.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Not a result object: {key!r}")


class ExtractionError(CallsightError):
    """Result key does not yield a business identifier."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"Could not extract call ID from S3 key {key!r}: {reason}")


class EmptyBodyError(CallsightError):
    """Object fetch succeeded but the body was empty."""


class CursorDecodeError(CallsightError):
    """Client-supplied pagination token is invalid, foreign, or corrupted."""


class UpstreamError(CallsightError):
    """External job engine, object store, or table call failed."""
