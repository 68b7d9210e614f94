"""Opaque pagination cursors over DynamoDB resume markers.

A cursor is URL-safe base64 of ``{"v": 1, "scope": ..., "key": <marker>}``.
The scope pins the cursor to the query shape that produced it, so a token
minted for one partition (or for a scan) is rejected everywhere else.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Optional

from callsight.core.exceptions import CursorDecodeError
from callsight.core.numbers import to_plain
from callsight.core.types import ResumeMarker
from callsight.models.record import HASH_ATTR, KEY_ATTRIBUTES, SORT_ATTR

CURSOR_VERSION = 1


@dataclass(frozen=True)
class CursorScope:
    """The query shape a cursor belongs to: a keyed query or an unscoped scan."""

    hash_key: Optional[str] = None
    newest_first: bool = True

    @property
    def tag(self) -> str:
        if self.hash_key is None:
            return "scan"
        return f"query:{self.hash_key}:{'desc' if self.newest_first else 'asc'}"


def encode_cursor(marker: ResumeMarker, scope: CursorScope) -> str:
    """Serialize a store resume marker into a transport-safe token.

    Raises TypeError or ValueError if the marker is not JSON-serializable.
    """
    document = {"v": CURSOR_VERSION, "scope": scope.tag, "key": to_plain(marker)}
    raw = json.dumps(document, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(token: str, scope: CursorScope) -> ResumeMarker:
    """Turn a client token back into the resume marker for ``scope``.

    Any corruption, version skew, or scope mismatch raises CursorDecodeError;
    there is no fallback to the first page.
    """
    try:
        padded = token + "=" * (-len(token) % 4)
        raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
        document = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise CursorDecodeError("Pagination token is not valid base64 JSON") from exc

    if not isinstance(document, dict) or document.get("v") != CURSOR_VERSION:
        raise CursorDecodeError("Pagination token has an unknown format")
    if document.get("scope") != scope.tag:
        raise CursorDecodeError("Pagination token belongs to a different query")

    marker = document.get("key")
    if not isinstance(marker, dict) or set(marker) != set(KEY_ATTRIBUTES):
        raise CursorDecodeError("Pagination token does not carry a table key")
    if not isinstance(marker[HASH_ATTR], str):
        raise CursorDecodeError("Pagination token has a malformed partition key")
    if isinstance(marker[SORT_ATTR], bool) or not isinstance(marker[SORT_ATTR], int):
        raise CursorDecodeError("Pagination token has a malformed sort key")
    if scope.hash_key is not None and marker[HASH_ATTR] != scope.hash_key:
        raise CursorDecodeError("Pagination token belongs to a different partition")
    return marker


def resolve_page_size(raw: Any, default: int, maximum: int) -> int:
    """Effective page size: non-numeric or non-positive input falls back to
    ``default``; anything above ``maximum`` is clamped to it."""
    if raw is None or isinstance(raw, bool):
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    if value <= 0:
        return default
    return min(value, maximum)
