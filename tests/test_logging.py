"""Tests for logging setup and session-tagged loggers."""

import json
import logging

from dialect_shell.utils.logging import (
    StandardFormatter,
    StructuredFormatter,
    get_session_logger,
    setup_logging,
)


class RecordingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def _session_logger(name, context):
    handler = RecordingHandler()
    base = logging.getLogger(name)
    base.handlers = [handler]
    base.setLevel(logging.DEBUG)
    base.propagate = False
    return get_session_logger(name, context), handler


def test_session_logger_prefixes_and_tags_records():
    """Messages carry the session context as a prefix and as a record field."""
    context = {"dialect": "pg", "database": "shop"}
    logger, handler = _session_logger("test.session.prefix", context)

    logger.info("Executing: SELECT 1")

    record = handler.records[0]
    assert record.getMessage() == "[database=shop dialect=pg] Executing: SELECT 1"
    assert record.session == {"dialect": "pg", "database": "shop"}


def test_session_logger_follows_context_changes():
    """Updating the context mapping is reflected in later records."""
    context = {"dialect": "pg", "database": "postgres"}
    logger, handler = _session_logger("test.session.follow", context)

    logger.info("before")
    context["database"] = "shop"
    logger.info("after")

    assert handler.records[0].session["database"] == "postgres"
    assert handler.records[1].session["database"] == "shop"


def test_structured_formatter_includes_session_fields():
    """JSON output merges the session fields into the log document."""
    context = {"dialect": "mysql", "database": "app"}
    logger, handler = _session_logger("test.session.json", context)

    logger.warning("slow query")
    payload = json.loads(StructuredFormatter().format(handler.records[0]))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "test.session.json"
    assert payload["dialect"] == "mysql"
    assert payload["database"] == "app"
    assert payload["message"].endswith("slow query")


def test_structured_formatter_includes_exception():
    """Exceptions are rendered into the JSON document."""
    logger, handler = _session_logger("test.session.exc", {})

    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logger.exception("failed")
    payload = json.loads(StructuredFormatter().format(handler.records[0]))

    assert "RuntimeError: boom" in payload["exception"]


def test_setup_logging_selects_formatter(tmp_path):
    """The structured flag picks the formatter for console and file handlers."""
    log_file = tmp_path / "dshell.log"

    setup_logging(level="debug", structured=True, log_file=str(log_file))
    root = logging.getLogger()
    try:
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        for handler in root.handlers:
            assert isinstance(handler.formatter, StructuredFormatter)
        assert logging.getLogger("psycopg2").level == logging.WARNING

        setup_logging(level="nonsense")
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, StandardFormatter)
    finally:
        for handler in root.handlers:
            handler.close()
        logging.basicConfig(handlers=[logging.NullHandler()], force=True)
