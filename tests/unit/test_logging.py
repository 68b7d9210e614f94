"""Tests for the structlog configuration."""

from __future__ import annotations

import json

import pytest
import structlog

from callsight.core.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


def _last_line(capsys) -> dict:
    return json.loads(capsys.readouterr().out.strip().splitlines()[-1])


def test_json_lines_carry_component_and_level(capsys):
    configure_logging("INFO", "json")
    get_logger("RetrievalService").info("querying_records", hash="abc")

    entry = _last_line(capsys)
    assert entry["event"] == "querying_records"
    assert entry["component"] == "RetrievalService"
    assert entry["level"] == "info"
    assert "timestamp" in entry


def test_exception_traceback_rendered_in_json(capsys):
    configure_logging("INFO", "json")
    log = get_logger("RetrievalService")
    try:
        raise RuntimeError("connection reset")
    except RuntimeError:
        log.exception("retrieval_failed")

    entry = _last_line(capsys)
    assert "exc_info" not in entry
    assert "Traceback" in entry["exception"]
    assert "RuntimeError: connection reset" in entry["exception"]


def test_level_filtering(capsys):
    configure_logging("WARNING", "json")
    log = get_logger("PersistenceStage")
    log.info("record_persisted")
    log.warning("cursor_rejected")

    lines = capsys.readouterr().out.strip().splitlines()
    assert [json.loads(line)["event"] for line in lines] == ["cursor_rejected"]
