"""Retrieval stage: keyed and unscoped paginated reads of call records.

Every outcome, including unexpected failures, is a structured JSON body
with a status code; nothing raises to the HTTP adapter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from callsight.core.config import AppSettings
from callsight.core.exceptions import CursorDecodeError
from callsight.core.hashing import correlation_key
from callsight.core.logging import get_logger
from callsight.core.protocols import IRecordStore
from callsight.pagination.cursor import CursorScope, decode_cursor, encode_cursor, resolve_page_size

CORS_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}


@dataclass(frozen=True)
class RetrievalRequest:
    hash: Optional[str] = None
    call_id: Optional[str] = None
    page_size: Any = None  # raw client input
    next_token: Optional[str] = None


@dataclass(frozen=True)
class RetrievalResponse:
    status_code: int
    body: dict[str, Any]

    @property
    def headers(self) -> dict[str, str]:
        return dict(CORS_HEADERS)


class RetrievalService:
    """Resolves the query shape, decodes the cursor, and pages the store."""

    def __init__(self, *, settings: AppSettings, record_store: IRecordStore, logger: Any = None) -> None:
        self._settings = settings
        self._records = record_store
        self._log = logger if logger is not None else get_logger(self.__class__.__name__)

    def retrieve(self, request: RetrievalRequest) -> RetrievalResponse:
        try:
            return self._retrieve(request)
        except Exception as exc:
            self._log.exception("retrieval_failed", error_type=type(exc).__name__)
            return RetrievalResponse(500, {
                "error": "Internal server error",
                "message": str(exc) or "Unknown error occurred",
            })

    def _retrieve(self, request: RetrievalRequest) -> RetrievalResponse:
        pagination = self._settings.pagination
        page_size = resolve_page_size(
            request.page_size, pagination.default_page_size, pagination.max_page_size
        )

        # An explicit hash wins over a call ID; neither means an unscoped listing.
        if request.hash:
            hash_key: Optional[str] = request.hash
        elif request.call_id:
            hash_key = correlation_key(request.call_id)
        else:
            hash_key = None
        scope = CursorScope(hash_key=hash_key)

        start_key = None
        if request.next_token:
            try:
                start_key = decode_cursor(request.next_token, scope)
            except CursorDecodeError as exc:
                self._log.warning("cursor_rejected", scope=scope.tag, reason=str(exc))
                return RetrievalResponse(400, {
                    "error": "Invalid pagination token",
                    "message": "The nextToken is invalid or expired",
                })

        if hash_key is None:
            self._log.info("listing_records", page_size=page_size, resumed=start_key is not None)
            page = self._records.scan_records(limit=page_size, start_key=start_key)
            message = "Recent call recordings retrieved successfully"
        else:
            self._log.info("querying_records", hash=hash_key, page_size=page_size,
                           resumed=start_key is not None)
            page = self._records.query_by_hash(
                hash_key, limit=page_size, start_key=start_key, newest_first=scope.newest_first
            )
            if not page.items and start_key is None:
                return RetrievalResponse(404, {
                    "error": "No records found",
                    "message": "No call recording analytics found for the given hash",
                    "searchedHash": hash_key,
                })
            message = "Call recording analytics retrieved successfully"

        block: dict[str, Any] = {"pageSize": page_size}
        if page.last_evaluated_key is not None:
            try:
                block["nextToken"] = encode_cursor(page.last_evaluated_key, scope)
            except (TypeError, ValueError) as exc:
                self._log.warning("cursor_encode_failed", scope=scope.tag, error=str(exc))
        block["hasMore"] = page.last_evaluated_key is not None

        return RetrievalResponse(200, {
            "message": message,
            "count": len(page.items),
            "items": page.items,
            "pagination": block,
        })
