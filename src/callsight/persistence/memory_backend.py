"""In-memory backends for unit tests: dict-backed fakes."""

from __future__ import annotations

from typing import Any

from callsight.core.exceptions import UpstreamError
from callsight.models.record import HASH_ATTR, SORT_ATTR, CallRecord, RecordPage


def _after(items: list[dict[str, Any]], start_key: dict[str, Any] | None) -> list[dict[str, Any]]:
    """Items strictly after the one whose key equals ``start_key``."""
    if not start_key:
        return items
    for index, item in enumerate(items):
        if item[HASH_ATTR] == start_key[HASH_ATTR] and item[SORT_ATTR] == start_key[SORT_ATTR]:
            return items[index + 1:]
    return []


def _paginate(items: list[dict[str, Any]], limit: int,
              start_key: dict[str, Any] | None) -> RecordPage:
    remaining = _after(items, start_key)
    page = remaining[:limit]
    lek = None
    if len(remaining) > limit and page:
        lek = {HASH_ATTR: page[-1][HASH_ATTR], SORT_ATTR: page[-1][SORT_ATTR]}
    return RecordPage(items=[dict(i) for i in page], last_evaluated_key=lek)


class MemoryRecordStore:
    """Dict-backed IRecordStore for unit tests."""

    def __init__(self) -> None:
        self._items: dict[tuple[str, int], dict[str, Any]] = {}
        self.put_count = 0

    def put_record(self, record: CallRecord) -> CallRecord:
        while (record.hash, record.epoch_timestamp) in self._items:
            record = record.model_copy(update={"epoch_timestamp": record.epoch_timestamp + 1})
        item = record.to_item()
        self._items[(item[HASH_ATTR], item[SORT_ATTR])] = item
        self.put_count += 1
        return record

    def query_by_hash(
        self,
        hash_key: str,
        limit: int,
        start_key: dict[str, Any] | None = None,
        newest_first: bool = True,
    ) -> RecordPage:
        items = sorted(
            (i for (h, _), i in self._items.items() if h == hash_key),
            key=lambda i: i[SORT_ATTR],
            reverse=newest_first,
        )
        return _paginate(items, limit, start_key)

    def scan_records(self, limit: int, start_key: dict[str, Any] | None = None) -> RecordPage:
        items = [self._items[k] for k in sorted(self._items)]
        return _paginate(items, limit, start_key)


class MemoryObjectStore:
    """Dict-backed IObjectStore for unit tests."""

    def __init__(self) -> None:
        self._objects: dict[tuple[str, str], bytes] = {}

    def put(self, bucket: str, key: str, data: bytes) -> None:
        self._objects[(bucket, key)] = data

    def read(self, bucket: str, key: str) -> bytes:
        try:
            return self._objects[(bucket, key)]
        except KeyError as exc:
            raise UpstreamError(f"S3 read failed for s3://{bucket}/{key}: NoSuchKey") from exc
