"""Configuration management."""

from .config import (
    Config,
    ConnectionConfig,
    LoggingConfig,
    ShellConfig,
    load_config,
)

__all__ = [
    "Config",
    "ConnectionConfig",
    "LoggingConfig",
    "ShellConfig",
    "load_config",
]
