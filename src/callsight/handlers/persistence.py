"""AWS Lambda entry point: SQS-delivered S3 completion events -> DynamoDB records."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from callsight.core.config import PERSISTENCE_REQUIRED, load_settings
from callsight.core.logging import configure_logging
from callsight.persistence import create_persistence
from callsight.stages.persistence import PersistenceStage


@lru_cache(maxsize=1)
def _stage() -> PersistenceStage:
    settings = load_settings(PERSISTENCE_REQUIRED)
    configure_logging(settings.log_level, settings.log_format)
    record_store, object_store = create_persistence(settings)
    return PersistenceStage(settings=settings, object_store=object_store, record_store=record_store)


def handler(event: dict[str, Any], context: Any) -> None:
    _stage().process_batch(event)
