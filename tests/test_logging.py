"""
Tests for the structured logging module.
"""

import json
import logging

import pytest

from agent_status.errors import RunNotStartedError
from agent_status.logging import (
    JSONFormatter,
    LogContext,
    StructuredLogger,
    TextFormatter,
    truncate_for_log,
)
from agent_status.records import AgentStartedRecord


def _record() -> AgentStartedRecord:
    return AgentStartedRecord(time=1.0, agent_id="a", agent_name="A", agent_runner_id="runner-1")


def _payloads(caplog) -> list[dict]:
    return [json.loads(r.getMessage()) for r in caplog.records]


@pytest.fixture
def logger() -> StructuredLogger:
    return StructuredLogger("agent_status_test", level="DEBUG", log_skipped=True)


class TestLogContext:
    def test_to_dict_drops_none(self):
        ctx = LogContext(run_id="run-1", extra={"custom": "value"})

        assert ctx.to_dict() == {"run_id": "run-1", "custom": "value"}

    def test_with_update(self):
        ctx = LogContext(run_id="run-1")
        updated = ctx.with_update(backend="redis", extra={"new": "value"})

        assert updated.run_id == "run-1"
        assert updated.backend == "redis"
        assert updated.extra == {"new": "value"}
        assert ctx.backend is None


class TestStructuredLogger:
    def test_record_appended(self, logger, caplog):
        with caplog.at_level(logging.DEBUG, logger="agent_status_test"):
            logger.log_record_appended("run-1", _record())

        (payload,) = _payloads(caplog)
        assert payload["event_type"] == "record_appended"
        assert payload["record_type"] == "agent_started"
        assert payload["agent_runner_id"] == "runner-1"

    def test_record_logging_can_be_disabled(self, caplog):
        quiet = StructuredLogger("agent_status_quiet", level="DEBUG", log_records=False)

        with caplog.at_level(logging.DEBUG, logger="agent_status_quiet"):
            quiet.log_record_appended("run-1", _record())
            quiet.log_record_skipped("type not tracked")

        assert caplog.records == []

    def test_record_payload_not_built_above_debug(self, monkeypatch):
        info = StructuredLogger("agent_status_info", level="INFO", log_skipped=True)
        calls = []
        monkeypatch.setattr(info, "_log", lambda *args, **kwargs: calls.append(args))

        info.log_record_appended("run-1", _record())
        info.log_record_skipped("type not tracked")

        assert calls == []

    def test_run_context(self, logger, caplog):
        with caplog.at_level(logging.DEBUG, logger="agent_status_test"):
            with logger.run_context("run-9", agent_runner_id="runner-9"):
                logger.info("inside")
            logger.info("outside")

        inside, outside = _payloads(caplog)
        assert inside["run_id"] == "run-9"
        assert inside["agent_runner_id"] == "runner-9"
        assert "run_id" not in outside

    def test_log_error(self, logger, caplog):
        with caplog.at_level(logging.DEBUG, logger="agent_status_test"):
            logger.log_error(RunNotStartedError("run-1"), level=logging.WARNING)

        (record,) = caplog.records
        payload = json.loads(record.getMessage())
        assert record.levelno == logging.WARNING
        assert payload["error_code"] == "AS_1001"
        assert payload["retryable"] is False
        assert payload["error_context"]["run_id"] == "run-1"

    def test_text_output(self, caplog):
        text_logger = StructuredLogger("agent_status_text", level="INFO", json_output=False)

        with caplog.at_level(logging.INFO, logger="agent_status_text"):
            text_logger.log_run_started("run-1", backend="memory")

        message = caplog.records[0].getMessage()
        assert message.startswith("Status update started for run run-1")
        assert "backend=memory" in message


class TestFormatters:
    def _log_record(self, msg: str) -> logging.LogRecord:
        return logging.LogRecord("agent_status", logging.INFO, __file__, 1, msg, None, None)

    def test_json_formatter_merges_payload(self):
        out = json.loads(JSONFormatter().format(self._log_record('{"message": "hi", "run_id": "r"}')))

        assert out["level"] == "INFO"
        assert out["message"] == "hi"
        assert out["run_id"] == "r"
        assert "timestamp" in out

    def test_json_formatter_plain_message(self):
        out = json.loads(JSONFormatter().format(self._log_record("plain text")))

        assert out["message"] == "plain text"

    def test_text_formatter(self):
        out = TextFormatter().format(self._log_record("hello"))

        assert "INFO" in out
        assert out.endswith("hello")


def test_truncate_for_log():
    assert truncate_for_log("short") == "short"
    long_text = "x" * 300
    assert truncate_for_log(long_text, max_length=10) == "x" * 10 + "... (300 chars total)"
