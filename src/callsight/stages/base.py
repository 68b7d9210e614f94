"""Base stage with common dependency wiring and SQS batch handling."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from callsight.core.config import AppSettings
from callsight.core.logging import get_logger
from callsight.core.types import JsonDict

R = TypeVar("R")


class BaseStage(Generic[R]):
    """Common base for the queue-driven stages.

    Settings and the logger are injected at construction time; subclasses
    add their own ports and implement ``process_message``.
    """

    def __init__(self, *, settings: AppSettings, logger: Any = None) -> None:
        self._settings = settings
        self._log = logger if logger is not None else get_logger(self.__class__.__name__)

    def process_message(self, body: str) -> list[R]:
        raise NotImplementedError

    def process_batch(self, event: JsonDict) -> list[R]:
        """Process SQS records strictly in order.

        The first failure is re-raised so the transport redelivers it;
        results already produced for earlier records are kept.
        """
        records = event.get("Records", [])
        self._log.info("batch_received", message_count=len(records))
        results: list[R] = []
        for record in records:
            message_id = record.get("messageId")
            try:
                results.extend(self.process_message(record["body"]))
            except Exception as exc:
                self._log.error(
                    "message_failed",
                    message_id=message_id,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                raise
        self._log.info("batch_completed", message_count=len(records), result_count=len(results))
        return results
