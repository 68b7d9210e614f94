"""Inbound messages: call notifications and S3 completion events."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

S3_URI_PATTERN = r"^s3://[a-z0-9][.\-a-z0-9]{0,61}[a-z0-9]/.+$"
MAX_CALL_ID_LENGTH = 255


class InboundNotification(BaseModel):
    """A new call recording is ready for transcription."""

    call_id: str = Field(alias="callId", min_length=1, max_length=MAX_CALL_ID_LENGTH)
    audio_s3_uri: str = Field(alias="audioS3Uri", pattern=S3_URI_PATTERN)
    timestamp: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    model_config = {"populate_by_name": True}

    @field_validator("call_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("callId must not be blank")
        return value


class CompletionEvent(BaseModel):
    """One object-created record from an S3 event notification."""

    bucket: str
    key: str  # already URL-decoded
    size: int = 0
