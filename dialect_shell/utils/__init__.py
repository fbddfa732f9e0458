"""Utility helpers."""

from .logging import get_session_logger, setup_logging

__all__ = ["get_session_logger", "setup_logging"]
