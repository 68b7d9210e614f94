"""Call recording analytics retrieval endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from callsight.stages.retrieval import RetrievalRequest

router = APIRouter(tags=["recordings"])


def _respond(request: Request, retrieval_request: RetrievalRequest) -> JSONResponse:
    response = request.app.state.retrieval.retrieve(retrieval_request)
    return JSONResponse(
        status_code=response.status_code,
        content=response.body,
        headers=response.headers,
    )


@router.get("/recordings")
def list_recordings(
    request: Request,
    hash: Optional[str] = None,
    call_id: Optional[str] = Query(default=None, alias="callId"),
    page_size: Optional[str] = Query(default=None, alias="pageSize"),
    next_token: Optional[str] = Query(default=None, alias="nextToken"),
) -> JSONResponse:
    """List recent records, or records for a hash / callId."""
    return _respond(request, RetrievalRequest(
        hash=hash, call_id=call_id, page_size=page_size, next_token=next_token,
    ))


@router.get("/recordings/{hash}")
def get_recordings(
    request: Request,
    hash: str,
    page_size: Optional[str] = Query(default=None, alias="pageSize"),
    next_token: Optional[str] = Query(default=None, alias="nextToken"),
) -> JSONResponse:
    """Records for one correlation key, newest first."""
    return _respond(request, RetrievalRequest(
        hash=hash, page_size=page_size, next_token=next_token,
    ))
