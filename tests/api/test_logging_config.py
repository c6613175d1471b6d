"""Tests for structured logging configuration."""

import json
import logging
import sys

import pytest

from dxrecords.api.logging_config import StructuredFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="dxrecords.domain.service",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_formats_json(self):
        output = StructuredFormatter().format(_record("Created test record rec-1"))

        data = json.loads(output)
        assert data["level"] == "INFO"
        assert data["logger"] == "dxrecords.domain.service"
        assert data["message"] == "Created test record rec-1"
        assert data["timestamp"].endswith("Z")

    def test_includes_request_context(self):
        output = StructuredFormatter().format(
            _record("GET /api/tests", request_id="req-1", client_ip="127.0.0.1", endpoint="/api/tests")
        )

        data = json.loads(output)
        assert data["request_id"] == "req-1"
        assert data["client_ip"] == "127.0.0.1"
        assert data["endpoint"] == "/api/tests"

    def test_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record("failed")
            record.exc_info = sys.exc_info()

        data = json.loads(StructuredFormatter().format(record))

        assert "RuntimeError: boom" in data["exception"]


class TestSetupLogging:
    def test_json_handler(self, restore_root_logger):
        setup_logging(use_json=True, log_level="DEBUG")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)

    def test_plain_handler_and_unknown_level(self, restore_root_logger):
        setup_logging(use_json=False, log_level="chatty")

        assert restore_root_logger.level == logging.INFO
        assert not isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)
