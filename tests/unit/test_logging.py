"""
Unit tests for structured logging utilities.
"""

import json
import logging
import os
from io import StringIO
from unittest.mock import patch

import pytest

from helpers import make_node
from source_editor.config import get_settings
from source_editor.models.edit import Edit
from source_editor.utils.logging import (
    JSONFormatter,
    LogContext,
    get_logger,
    log_edit_applied,
    log_error_with_context,
    log_session_outcome,
    setup_logging,
)


@pytest.fixture
def captured():
    """Attach a JSON handler to a fresh logger and return (adapter, stream)."""
    logger = get_logger("test_capture")
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.logger.addHandler(handler)
    logger.logger.setLevel(logging.DEBUG)
    yield logger, stream
    logger.logger.removeHandler(handler)


def read_entries(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_json_formatter():
    """Test JSON formatter produces valid JSON output."""
    logger = logging.getLogger("test")
    logger.setLevel(logging.INFO)

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)

    try:
        logger.info("Test message", extra={"file_path": "MainView.java", "line": 12})
    finally:
        logger.removeHandler(handler)

    log_data = json.loads(stream.getvalue())

    assert "timestamp" in log_data
    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test"
    assert log_data["message"] == "Test message"
    assert log_data["file_path"] == "MainView.java"
    assert log_data["context"]["line"] == 12
    assert "source" in log_data


def test_get_logger_with_context():
    """Test getting logger with context."""
    logger = get_logger("test_module", file_path="MainView.java", session_id="abc")

    assert logger.extra["file_path"] == "MainView.java"
    assert logger.extra["session_id"] == "abc"


def test_with_context_does_not_modify_parent():
    logger = get_logger("test_module", file_path="A.java")
    child = logger.with_context(session_id="s1")

    assert child.extra == {"file_path": "A.java", "session_id": "s1"}
    assert "session_id" not in logger.extra


def test_log_context_restores_extra():
    logger = get_logger("test_module", file_path="A.java")

    with LogContext(logger, language="java") as scoped:
        assert scoped.extra["language"] == "java"

    assert "language" not in logger.extra


def test_log_edit_applied(captured):
    """Test applied edits are logged at debug level with the edit kind."""
    logger, stream = captured
    edit = Edit.insert_before(make_node(3, 5, 3, 9), "final ")

    log_edit_applied(logger, edit, offset=42)

    log_data = read_entries(stream)[0]
    assert log_data["level"] == "DEBUG"
    assert log_data["edit_kind"] == "insert_before"
    assert log_data["context"]["offset"] == 42


def test_log_edit_applied_skipped_above_debug(captured):
    logger, stream = captured
    logger.logger.setLevel(logging.INFO)

    log_edit_applied(logger, Edit.insert_before(make_node(1, 1, 1, 1), "x"), offset=0)

    assert stream.getvalue() == ""


def test_log_session_outcome_changed(captured):
    logger, stream = captured

    log_session_outcome(logger, "A.java", changed=True, edit_count=3, duration_ms=12.3456)

    log_data = read_entries(stream)[0]
    assert log_data["level"] == "INFO"
    assert log_data["file_path"] == "A.java"
    assert log_data["context"]["edit_count"] == 3
    assert log_data["context"]["duration_ms"] == 12.35


def test_log_session_outcome_unchanged_warns(captured):
    logger, stream = captured

    log_session_outcome(logger, "A.java", changed=False, edit_count=0)

    log_data = read_entries(stream)[0]
    assert log_data["level"] == "WARNING"
    assert "Unable to edit file A.java" in log_data["message"]


def test_log_error_with_context(captured):
    """Test error logging includes the exception and context."""
    logger, stream = captured

    try:
        raise ValueError("bad anchor")
    except ValueError as e:
        log_error_with_context(logger, "Transformation failed", e, status="failed")

    log_data = read_entries(stream)[0]
    assert log_data["level"] == "ERROR"
    assert log_data["error"]["type"] == "ValueError"
    assert log_data["error"]["message"] == "bad anchor"
    assert log_data["context"]["error_type"] == "ValueError"
    assert log_data["context"]["status"] == "failed"


def test_setup_logging_plain_text():
    root = logging.getLogger()
    old_handlers, old_level = root.handlers[:], root.level

    try:
        setup_logging(log_level="WARNING", json_format=False)

        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)
    finally:
        root.handlers[:] = old_handlers
        root.setLevel(old_level)


def test_setup_logging_uses_settings():
    root = logging.getLogger()
    old_handlers, old_level = root.handlers[:], root.level
    get_settings.cache_clear()

    try:
        with patch.dict(os.environ, {"SOURCE_EDITOR_LOG_LEVEL": "ERROR", "SOURCE_EDITOR_LOG_JSON": "true"}):
            setup_logging()

        assert root.level == logging.ERROR
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
    finally:
        get_settings.cache_clear()
        root.handlers[:] = old_handlers
        root.setLevel(old_level)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
