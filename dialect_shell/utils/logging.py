"""Logging setup for the shell.

Diagnostics always go to stderr (and optionally a file) so they never
interleave with result tables printed on stdout. Records emitted through a
session logger carry the session's dialect and active database.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, MutableMapping, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Driver loggers that are chatty at DEBUG
QUIET_LOGGERS = ("psycopg2", "pymysql", "asyncio")


class StructuredFormatter(logging.Formatter):
    """Renders each record as one JSON document."""

    def format(self, record: logging.LogRecord) -> str:
        document: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        session = getattr(record, "session", None)
        if session:
            document.update(session)
        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)
        return json.dumps(document, default=str)


class StandardFormatter(logging.Formatter):
    """Plain text formatter used unless structured output is requested."""

    def __init__(self):
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    level: str = "WARNING",
    structured: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Configure the root logger for a shell process.

    Args:
        level: Level name; unknown names fall back to WARNING
        structured: Emit JSON documents instead of text lines
        log_file: Also append records to this file
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    formatter = StructuredFormatter() if structured else StandardFormatter()

    logging.basicConfig(
        level=log_level,
        handlers=_build_handlers(formatter, log_level, log_file),
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _build_handlers(
    formatter: logging.Formatter, log_level: int, log_file: Optional[str]
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
    return handlers


class SessionLoggerAdapter(logging.LoggerAdapter):
    """Tags records with the fields of a live session context.

    The context mapping is read on every call, so callers update it in place
    when the session moves to another database.
    """

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple:
        extra = kwargs.setdefault("extra", {})
        extra["session"] = dict(self.extra)
        return f"[{self._label()}] {msg}", kwargs

    def _label(self) -> str:
        return " ".join(f"{key}={self.extra[key]}" for key in sorted(self.extra))


def get_session_logger(name: str, context: Dict[str, Any]) -> SessionLoggerAdapter:
    """Get a logger that prefixes messages with session fields.

    Example:
        >>> logger = get_session_logger(__name__, {"dialect": "pg"})
        >>> logger.info("Command executed")  # "[dialect=pg] Command executed"
    """
    return SessionLoggerAdapter(logging.getLogger(name), context)
