"""AWS Lambda entry point: SQS call notifications -> Bedrock Data Automation jobs."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from callsight.core.config import TRANSCRIPTION_REQUIRED, load_settings
from callsight.core.logging import configure_logging
from callsight.engines import create_job_engine
from callsight.stages.invocation import InvocationStage


@lru_cache(maxsize=1)
def _stage() -> InvocationStage:
    settings = load_settings(TRANSCRIPTION_REQUIRED)
    configure_logging(settings.log_level, settings.log_format)
    return InvocationStage(settings=settings, engine=create_job_engine(settings))


def handler(event: dict[str, Any], context: Any) -> None:
    _stage().process_batch(event)
