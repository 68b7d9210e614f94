"""AWS Lambda entry point: API Gateway proxy requests -> paginated record reads."""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

from callsight.core.config import RETRIEVAL_REQUIRED, load_settings
from callsight.core.logging import configure_logging
from callsight.persistence import create_persistence
from callsight.stages.retrieval import RetrievalRequest, RetrievalResponse, RetrievalService


@lru_cache(maxsize=1)
def _service() -> RetrievalService:
    settings = load_settings(RETRIEVAL_REQUIRED)
    configure_logging(settings.log_level, settings.log_format)
    record_store, _ = create_persistence(settings)
    return RetrievalService(settings=settings, record_store=record_store)


def request_from_event(event: dict[str, Any]) -> RetrievalRequest:
    """Read hash/callId/pageSize/nextToken from path and query parameters."""
    path = event.get("pathParameters") or {}
    query = event.get("queryStringParameters") or {}
    return RetrievalRequest(
        hash=path.get("hash") or query.get("hash"),
        call_id=query.get("callId"),
        page_size=query.get("pageSize"),
        next_token=query.get("nextToken"),
    )


def to_proxy_response(response: RetrievalResponse) -> dict[str, Any]:
    return {
        "statusCode": response.status_code,
        "headers": response.headers,
        "body": json.dumps(response.body),
    }


def handle_event(service: RetrievalService, event: dict[str, Any]) -> dict[str, Any]:
    return to_proxy_response(service.retrieve(request_from_event(event)))


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    return handle_event(_service(), event)
