"""Persisted call recording analytics records.

The stored item schema mixes camelCase key attributes (``hash``,
``epochTimestamp``) with snake_case payload attributes; field aliases keep
the Python side in snake_case.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, Field

HASH_ATTR = "hash"
SORT_ATTR = "epochTimestamp"
KEY_ATTRIBUTES = (HASH_ATTR, SORT_ATTR)


class BedrockStatus(StrEnum):
    SUCCESS = "SUCCESS"


class AnalyticsPayload(BaseModel):
    """Normalized conversational analytics from a job result blob."""

    call_summary: Optional[str] = None
    call_categories: list[str] = Field(default_factory=list)
    topics: list[Any] = Field(default_factory=list)
    transcript: Optional[str] = None
    audio_summary: Optional[str] = None
    topic_summary: Optional[str] = None

    model_config = {"extra": "ignore"}


class CallRecord(BaseModel):
    """One append-only row in the recordings table."""

    # --- Key Fields ---
    hash: str
    epoch_timestamp: int = Field(alias=SORT_ATTR)

    # --- Correlation Fields ---
    call_id: str
    s3_input_uri: str
    s3_output_uri: Optional[str] = None
    bedrock_invocation_arn: Optional[str] = None  # not known to the persistence flow
    bedrock_status: BedrockStatus = BedrockStatus.SUCCESS

    # --- Analytics Fields ---
    call_summary: Optional[str] = None
    call_categories: Optional[list[str]] = None
    topics: Optional[list[Any]] = None
    transcript: Optional[str] = None
    audio_summary: Optional[str] = None
    topic_summary: Optional[str] = None

    # --- Audit Fields ---
    created_at: str
    updated_at: str

    model_config = {"populate_by_name": True}

    @property
    def key(self) -> dict[str, Any]:
        return {HASH_ATTR: self.hash, SORT_ATTR: self.epoch_timestamp}

    def to_item(self) -> dict[str, Any]:
        """Serialize to the stored item shape, omitting absent attributes."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass
class RecordPage:
    """One page of stored items plus the store-native resume marker, if any."""

    items: list[dict[str, Any]] = field(default_factory=list)
    last_evaluated_key: Optional[dict[str, Any]] = None
