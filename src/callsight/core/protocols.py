"""Protocol interfaces for the external collaborators of each stage.

Stages depend only on these Protocols; production backends and in-memory
fakes both satisfy them structurally.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from callsight.models.jobs import JobInvocation
from callsight.models.record import CallRecord, RecordPage


# ---------------------------------------------------------------------------
# Job Engine
# ---------------------------------------------------------------------------

@runtime_checkable
class IJobEngine(Protocol):
    """Asynchronous transcription/analysis job submission (Bedrock Data Automation)."""

    def invoke(self, input_uri: str, output_uri: str, client_token: str) -> JobInvocation: ...


# ---------------------------------------------------------------------------
# Persistence: Object Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IObjectStore(Protocol):
    """S3-compatible read access to result blobs."""

    def read(self, bucket: str, key: str) -> bytes: ...


# ---------------------------------------------------------------------------
# Persistence: Record Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IRecordStore(Protocol):
    """Append-only call recording table keyed by (hash, epochTimestamp)."""

    def put_record(self, record: CallRecord) -> CallRecord:
        """Append without replacing; returns the record as written."""
        ...

    def query_by_hash(
        self,
        hash_key: str,
        limit: int,
        start_key: dict[str, Any] | None = None,
        newest_first: bool = True,
    ) -> RecordPage: ...

    def scan_records(self, limit: int, start_key: dict[str, Any] | None = None) -> RecordPage: ...
