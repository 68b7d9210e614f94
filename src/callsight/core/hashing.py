"""Correlation key derivation shared by the persistence and retrieval stages."""

from __future__ import annotations

import hashlib

from callsight.core.types import CallId, CorrelationKey


def correlation_key(call_id: CallId) -> CorrelationKey:
    """Return the MD5 hex digest of a call ID, used as the table partition key."""
    return hashlib.md5(call_id.encode("utf-8")).hexdigest()
