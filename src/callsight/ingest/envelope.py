"""Envelope detection, unwrapping, and validation for delivered message bodies.

A queue record body is either the event itself (direct publish) or an SNS
notification whose ``Message`` field holds the event as a JSON string.
``detect_envelope`` resolves which one it is before any field is read.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Any
from urllib.parse import unquote_plus

import pydantic

from callsight.core.exceptions import EnvelopeShapeError, ExtractionError, ValidationError
from callsight.core.types import JsonDict
from callsight.models.notification import CompletionEvent, InboundNotification

NOTIFICATION_MARKERS = ("callId", "audioS3Uri")
COMPLETION_MARKERS = ("Records", "Event")
S3_TEST_EVENT = "s3:TestEvent"
DEFAULT_RESULT_SUFFIX = "result.json"


class EnvelopeKind(StrEnum):
    DIRECT = "direct"
    WRAPPED = "wrapped"


@dataclass(frozen=True)
class Envelope:
    """A message body resolved to its shape and inner payload."""

    kind: EnvelopeKind
    payload: JsonDict


def _load_json(raw: str | bytes | JsonDict, layer: str) -> Any:
    if isinstance(raw, dict):
        return raw
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise EnvelopeShapeError(f"{layer} is not valid JSON: {exc}") from exc


def _has_markers(obj: Any, markers: tuple[str, ...]) -> bool:
    return isinstance(obj, dict) and any(m in obj for m in markers)


def detect_envelope(body: str | bytes | JsonDict, markers: tuple[str, ...]) -> Envelope:
    """Resolve a message body to a direct or SNS-wrapped envelope.

    The direct shape is tried first; the ``Message`` string is only unwrapped
    when none of the marker fields are present at the top level.
    """
    outer = _load_json(body, "Message body")
    if _has_markers(outer, markers):
        return Envelope(EnvelopeKind.DIRECT, outer)

    message = outer.get("Message") if isinstance(outer, dict) else None
    if isinstance(message, str):
        inner = _load_json(message, "Wrapped Message")
        if _has_markers(inner, markers):
            return Envelope(EnvelopeKind.WRAPPED, inner)

    raise EnvelopeShapeError(
        f"Body matches neither a direct nor a wrapped event (expected one of {list(markers)})"
    )


def parse_notification(body: str | bytes | JsonDict) -> InboundNotification:
    """Unwrap and validate a call notification."""
    envelope = detect_envelope(body, NOTIFICATION_MARKERS)
    try:
        return InboundNotification.model_validate(envelope.payload)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or None
        raise ValidationError(
            f"Invalid notification field {field!r}: {first['msg']}", field=field
        ) from exc


def decode_s3_key(raw_key: str) -> str:
    """Undo S3 event key encoding: '+' for spaces, then percent-escapes."""
    return unquote_plus(raw_key)


def parse_completion_events(body: str | bytes | JsonDict) -> list[CompletionEvent]:
    """Unwrap an S3 event notification into completion events.

    S3 test events (sent when a notification is first configured) yield
    an empty list.
    """
    envelope = detect_envelope(body, COMPLETION_MARKERS)
    payload = envelope.payload
    if payload.get("Event") == S3_TEST_EVENT and "Records" not in payload:
        return []

    records = payload.get("Records")
    if not isinstance(records, list):
        raise ValidationError("Records must be a list", field="Records")

    events: list[CompletionEvent] = []
    for index, record in enumerate(records):
        try:
            s3 = record["s3"]
            bucket = s3["bucket"]["name"]
            raw_key = s3["object"]["key"]
        except (KeyError, TypeError) as exc:
            raise ValidationError(
                f"Records[{index}] is missing s3.bucket.name or s3.object.key",
                field=f"Records[{index}]",
            ) from exc
        if not bucket or not raw_key:
            raise ValidationError(
                f"Records[{index}] has an empty bucket or key", field=f"Records[{index}]"
            )
        try:
            event = CompletionEvent(
                bucket=bucket, key=decode_s3_key(raw_key), size=s3["object"].get("size") or 0
            )
        except pydantic.ValidationError as exc:
            raise ValidationError(
                f"Records[{index}] has a malformed s3.object field: {exc.errors()[0]['msg']}",
                field=f"Records[{index}].s3.object",
            ) from exc
        events.append(event)
    return events


def is_result_key(key: str, suffix: str = DEFAULT_RESULT_SUFFIX) -> bool:
    return key.endswith(suffix)


def extract_call_id(key: str, prefix: str) -> str:
    """Return the path segment immediately after ``prefix``.

    Layout is ``<prefix>/<callId>/.../<file>``; the prefix may itself span
    several segments. Extraction is structural only: the prefix text is
    not compared.
    """
    depth = len([p for p in prefix.strip("/").split("/") if p])
    parts = key.split("/")
    if len(parts) < depth + 2:
        raise ExtractionError(key, f"expected at least {depth + 2} path segments")
    call_id = parts[depth]
    if not call_id:
        raise ExtractionError(key, "call ID segment is empty")
    return call_id
