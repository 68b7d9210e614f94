"""Invocation stage: call notification -> asynchronous transcription job."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from typing import Any

from callsight.core.config import AppSettings
from callsight.core.protocols import IJobEngine
from callsight.ingest.envelope import parse_notification
from callsight.models.jobs import JobSubmission
from callsight.stages.base import BaseStage


def _random_token() -> str:
    return str(uuid.uuid4())


class InvocationStage(BaseStage[JobSubmission]):
    """Validates notifications and submits one engine job per delivery.

    The client token is fresh for every delivery, so a redelivered
    notification produces a second job; duplicate results converge on the
    same partition in the persistence stage.
    """

    def __init__(
        self,
        *,
        settings: AppSettings,
        engine: IJobEngine,
        logger: Any = None,
        token_factory: Callable[[], str] = _random_token,
    ) -> None:
        super().__init__(settings=settings, logger=logger)
        self._engine = engine
        self._token_factory = token_factory

    def output_uri_for(self, call_id: str) -> str:
        s3 = self._settings.s3
        prefix = s3.output_prefix.strip("/")
        return f"s3://{s3.output_bucket}/{prefix}/{call_id}/"

    def process_message(self, body: str) -> list[JobSubmission]:
        notification = parse_notification(body)
        self._log.info(
            "notification_received",
            call_id=notification.call_id,
            audio_s3_uri=notification.audio_s3_uri,
        )

        output_uri = self.output_uri_for(notification.call_id)
        client_token = self._token_factory()
        invocation = self._engine.invoke(notification.audio_s3_uri, output_uri, client_token)

        self._log.info(
            "job_submitted",
            call_id=notification.call_id,
            invocation_arn=invocation.invocation_arn,
            client_token=client_token,
            output_uri=output_uri,
        )
        return [
            JobSubmission(
                call_id=notification.call_id,
                input_uri=notification.audio_s3_uri,
                output_uri=output_uri,
                client_token=client_token,
                invocation_arn=invocation.invocation_arn,
            )
        ]
