"""Tests for structured logging system."""

from __future__ import annotations

import json
import logging
import sys
import uuid

import pytest
from rich.logging import RichHandler

from medialens.shared.errors import ErrorCode, ErrorContext, InfrastructureError
from medialens.shared.logging import (
    StructuredFormatter,
    log_operation_error,
    log_operation_start,
    log_operation_success,
    setup_structured_logger,
)


@pytest.fixture
def logger_name():
    """Unique logger name; configured loggers stop propagating."""
    name = f"medialens_test_{uuid.uuid4().hex}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def _record(msg: str = "Test message", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestStructuredFormatter:
    """Test StructuredFormatter JSON output."""

    def test_format_basic_log(self):
        log_data = json.loads(StructuredFormatter().format(_record()))

        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "test_logger"
        assert log_data["message"] == "Test message"
        assert "timestamp" in log_data
        assert "error_code" not in log_data

    def test_format_log_with_context(self):
        """Structured extras are copied into the JSON document."""
        record = _record("Error occurred", logging.ERROR)
        record.error_code = "CATALOG_LOAD_FAILED"
        record.context = {"file_path": "/data/moviedb.txt.xz"}
        record.operation = "load_catalog"

        log_data = json.loads(StructuredFormatter().format(record))

        assert log_data["error_code"] == "CATALOG_LOAD_FAILED"
        assert log_data["context"] == {"file_path": "/data/moviedb.txt.xz"}
        assert log_data["operation"] == "load_catalog"

    def test_format_exception(self):
        try:
            raise ValueError("bad row")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()

        log_data = json.loads(StructuredFormatter().format(record))

        assert "ValueError: bad row" in log_data["exception"]

    def test_non_ascii_is_preserved(self):
        assert "Amélie" in StructuredFormatter().format(_record("Amélie"))


class TestSetupStructuredLogger:
    """Test logger configuration."""

    def test_rich_console(self, logger_name):
        logger = setup_structured_logger(logger_name, "debug")

        assert logger.level == logging.DEBUG
        assert not logger.propagate
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_json_console(self, logger_name):
        logger = setup_structured_logger(logger_name, use_rich_console=False)
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)

    def test_reconfiguration_replaces_handlers(self, logger_name):
        setup_structured_logger(logger_name)
        logger = setup_structured_logger(logger_name, "WARNING")

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_log_file_is_json(self, logger_name, tmp_path):
        log_file = tmp_path / "medialens.log"
        logger = setup_structured_logger(logger_name, "INFO", str(log_file), use_rich_console=False)

        logger.info("catalog loaded")
        for handler in logger.handlers:
            handler.flush()

        line = log_file.read_text(encoding="utf-8").splitlines()[0]
        assert json.loads(line)["message"] == "catalog loaded"


class TestOperationHelpers:
    """Test the log_operation_* helpers."""

    def test_log_operation_error(self, logger_name, caplog):
        logger = logging.getLogger(logger_name)
        cause = OSError("missing")
        error = InfrastructureError(
            ErrorCode.CATALOG_LOAD_FAILED,
            "Failed to read movie catalog",
            ErrorContext(file_path="moviedb.txt.xz", operation="load_catalog"),
            cause,
        )

        with caplog.at_level(logging.ERROR, logger=logger_name):
            log_operation_error(logger, error, context={"kind": "movie"})

        (record,) = caplog.records
        assert record.getMessage() == "Failed to read movie catalog"
        assert record.error_code == "CATALOG_LOAD_FAILED"
        assert record.operation == "load_catalog"
        assert record.context == {
            "file_path": "moviedb.txt.xz",
            "operation": "load_catalog",
            "additional_data": {},
            "kind": "movie",
        }
        assert record.exc_info[1] is cause

    def test_log_operation_error_explicit_operation(self, logger_name, caplog):
        error = InfrastructureError(ErrorCode.CATALOG_PARSE_FAILED, "bad record")

        with caplog.at_level(logging.ERROR, logger=logger_name):
            log_operation_error(logging.getLogger(logger_name), error, operation="group_files")

        assert caplog.records[0].operation == "group_files"

    def test_log_operation_success(self, logger_name, caplog):
        with caplog.at_level(logging.DEBUG, logger=logger_name):
            log_operation_success(
                logging.getLogger(logger_name),
                "load_catalog",
                12.5,
                {"entries": 3},
                ErrorContext(file_path="anidb.txt.xz"),
            )

        (record,) = caplog.records
        assert record.levelno == logging.DEBUG
        assert record.duration_ms == 12.5
        assert record.result_info == {"entries": 3}
        assert record.context == {"file_path": "anidb.txt.xz", "additional_data": {}}

    def test_log_operation_start(self, logger_name, caplog):
        with caplog.at_level(logging.DEBUG, logger=logger_name):
            log_operation_start(logging.getLogger(logger_name), "group_files", {"files": 2})

        assert caplog.records[0].getMessage() == "Starting operation 'group_files'"
        assert caplog.records[0].context == {"files": 2}
