"""Tests for structured logging."""

import json
import logging
import sys

import pytest

from sonora.infrastructure.observability.logging import (
    CompactExceptionFormatter,
    CustomJsonFormatter,
    RunIdFilter,
    configure_logging,
    get_run_id,
    set_run_id,
)


@pytest.fixture(autouse=True)
def _reset_run_id():
    set_run_id("")
    yield
    set_run_id("")


def _record(msg: str = "hello", exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="sonora.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestRunId:
    """Test run ID functionality."""

    def test_set_and_get_run_id(self):
        assert set_run_id("run-123") == "run-123"
        assert get_run_id() == "run-123"

    def test_generates_id_when_none(self):
        result = set_run_id(None)

        assert len(result) == 8
        assert get_run_id() == result

    def test_default_is_empty(self):
        assert get_run_id() == ""

    def test_filter_stamps_record(self):
        set_run_id("abc")
        record = _record()

        assert RunIdFilter().filter(record) is True
        assert record.run_id == "abc"


class TestLoggingConfiguration:
    """Test logging configuration."""

    def test_configure_logging_debug_level(self):
        configure_logging(log_level="DEBUG", json_format=False, app_name="test-app")
        assert logging.getLogger("test").getEffectiveLevel() <= logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        configure_logging(log_level="chatty", json_format=False)
        assert logging.getLogger().level == logging.INFO

    def test_replaces_existing_handlers(self):
        configure_logging(log_level="INFO", json_format=False)
        configure_logging(log_level="INFO", json_format=True)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, CustomJsonFormatter)

    def test_http_libraries_are_quieted(self):
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING


class TestFormatters:
    def test_json_output_includes_run_id(self):
        set_run_id("run-42")
        record = _record()
        RunIdFilter().filter(record)
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "hello"
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "sonora.test"
        assert payload["run_id"] == "run-42"

    def test_json_output_omits_empty_run_id(self):
        record = _record()
        RunIdFilter().filter(record)

        payload = json.loads(CustomJsonFormatter("%(message)s").format(record))

        assert "run_id" not in payload

    def test_compact_exception_shows_root_cause_first(self):
        try:
            try:
                raise ConnectionError("socket closed")
            except ConnectionError as e:
                raise RuntimeError("lookup failed") from e
        except RuntimeError:
            exc_info = sys.exc_info()

        text = CompactExceptionFormatter().formatException(exc_info)

        lines = [line for line in text.splitlines() if line.startswith("╰─►")]
        assert lines == [
            "╰─► ConnectionError: socket closed",
            "╰─► RuntimeError: lookup failed",
        ]

    def test_compact_exception_without_exception(self):
        assert CompactExceptionFormatter().formatException((None, None, None)) == ""
