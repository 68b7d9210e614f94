"""Persistence stage: S3 completion event -> normalized call record."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pydantic

from callsight.core.config import AppSettings
from callsight.core.exceptions import EmptyBodyError, NotFoundSkip, ValidationError
from callsight.core.hashing import correlation_key
from callsight.core.protocols import IObjectStore, IRecordStore
from callsight.ingest.envelope import extract_call_id, is_result_key, parse_completion_events
from callsight.models.notification import CompletionEvent
from callsight.models.record import AnalyticsPayload, BedrockStatus, CallRecord
from callsight.stages.base import BaseStage

# BDA custom output nests the analytics under this key.
INFERENCE_RESULT_KEY = "inference_result"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_result_blob(data: bytes, location: str) -> AnalyticsPayload:
    """Parse a job result blob into the normalized analytics payload."""
    if not data or not data.strip():
        raise EmptyBodyError(f"Empty response body from {location}")
    try:
        blob = json.loads(data)
    except ValueError as exc:
        raise ValidationError(f"Result blob at {location} is not valid JSON: {exc}") from exc
    if isinstance(blob, dict) and isinstance(blob.get(INFERENCE_RESULT_KEY), dict):
        blob = blob[INFERENCE_RESULT_KEY]
    if not isinstance(blob, dict):
        raise ValidationError(f"Result blob at {location} is not a JSON object")
    try:
        return AnalyticsPayload.model_validate(blob)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Result blob at {location} has malformed fields: {exc}") from exc


class PersistenceStage(BaseStage[CallRecord]):
    """Fetches job results and appends one record per completion event.

    Every write gets a fresh ``epochTimestamp``; redelivery appends rather
    than overwrites, and readers take the newest record per hash.
    """

    def __init__(
        self,
        *,
        settings: AppSettings,
        object_store: IObjectStore,
        record_store: IRecordStore,
        logger: Any = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        super().__init__(settings=settings, logger=logger)
        self._objects = object_store
        self._records = record_store
        self._clock = clock

    def process_message(self, body: str) -> list[CallRecord]:
        persisted: list[CallRecord] = []
        for event in parse_completion_events(body):
            try:
                persisted.append(self.process_event(event))
            except NotFoundSkip as skip:
                self._log.info("completion_skipped", bucket=event.bucket, key=skip.key)
        return persisted

    def process_event(self, event: CompletionEvent) -> CallRecord:
        """Persist one result object. Raises NotFoundSkip for non-result keys."""
        s3 = self._settings.s3
        if not is_result_key(event.key, s3.result_suffix):
            raise NotFoundSkip(event.key)

        call_id = extract_call_id(event.key, s3.output_prefix)
        location = f"s3://{event.bucket}/{event.key}"
        self._log.info("result_fetching", call_id=call_id, location=location)
        analytics = parse_result_blob(self._objects.read(event.bucket, event.key), location)

        now = self._clock()
        record = CallRecord(
            hash=correlation_key(call_id),
            epoch_timestamp=int(now.timestamp() * 1000),
            call_id=call_id,
            s3_input_uri=f"s3://{s3.input_bucket}/{call_id}",
            s3_output_uri=f"s3://{event.bucket}/{s3.output_prefix.strip('/')}/{call_id}/",
            bedrock_status=BedrockStatus.SUCCESS,
            call_summary=analytics.call_summary,
            call_categories=analytics.call_categories,
            topics=analytics.topics,
            transcript=analytics.transcript,
            audio_summary=analytics.audio_summary,
            topic_summary=analytics.topic_summary,
            created_at=_iso(now),
            updated_at=_iso(now),
        )
        record = self._records.put_record(record)
        self._log.info(
            "record_persisted",
            call_id=call_id,
            hash=record.hash,
            epoch_timestamp=record.epoch_timestamp,
            has_summary=bool(analytics.call_summary),
            topics_count=len(analytics.topics),
        )
        return record
