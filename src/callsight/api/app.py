"""FastAPI application exposing the retrieval surface over HTTP."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from callsight.api.routes import health, recordings
from callsight.core.config import RETRIEVAL_REQUIRED, AppSettings, load_settings
from callsight.core.logging import configure_logging
from callsight.persistence import create_persistence
from callsight.stages.retrieval import RetrievalService


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build settings and the retrieval service unless they were injected."""
    if getattr(app.state, "retrieval", None) is None:
        settings = load_settings(RETRIEVAL_REQUIRED)
        configure_logging(settings.log_level, settings.log_format)
        record_store, _ = create_persistence(settings)
        app.state.settings = settings
        app.state.retrieval = RetrievalService(settings=settings, record_store=record_store)
    yield


def create_app(settings: AppSettings | None = None, retrieval: RetrievalService | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Callsight Call Recording Analytics",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.retrieval = retrieval
    app.include_router(health.router)
    app.include_router(recordings.router)
    return app
