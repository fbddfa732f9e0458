"""Configuration management for the shell."""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional, get_args, get_type_hints
import yaml
from pathlib import Path

from ..dialect import Dialect

DEFAULT_PORTS = {
    Dialect.MYSQL: 3306,
    Dialect.POSTGRESQL: 5432,
}

DEFAULT_USERS = {
    Dialect.MYSQL: "root",
    Dialect.POSTGRESQL: "postgres",
}

DEFAULT_DATABASES = {
    Dialect.MYSQL: "mysql",
    Dialect.POSTGRESQL: "postgres",
}


@dataclass
class ConnectionConfig:
    """Connection settings for the target backend.

    An empty PostgreSQL host means "connect over the local Unix socket".
    """

    type: str = "mysql"  # "mysql", "pg" or "postgresql"
    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    password: str = ""
    database: Optional[str] = None
    sslmode: str = "disable"

    @property
    def dialect(self) -> Dialect:
        return Dialect.from_name(self.type)

    def merged(self, overrides: Dict[str, Any]) -> "ConnectionConfig":
        """Return a copy with every non-None override applied."""
        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if value is not None:
                changes[key] = value
        return replace(self, **changes)

    def with_defaults(self) -> "ConnectionConfig":
        """Fill unset fields with the per-backend defaults."""
        dialect = self.dialect
        host = self.host
        if not host and dialect is Dialect.MYSQL:
            host = "localhost"
        if host is None:
            host = ""
        return replace(
            self,
            host=host,
            port=self.port or DEFAULT_PORTS[dialect],
            user=self.user or DEFAULT_USERS[dialect],
            database=self.database or DEFAULT_DATABASES[dialect],
        )


@dataclass
class ShellConfig:
    """Configuration for the interactive loop."""

    history_file: str = "~/.dshell_history"


@dataclass
class LoggingConfig:
    """Configuration for log output."""

    level: str = "WARNING"
    structured: bool = False
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration class."""

    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    shell: ShellConfig = field(default_factory=ShellConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: str) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Parsed configuration

    Example YAML format:
        connection:
          type: pg
          host: localhost
          port: 5432
          user: postgres
          password: secret
          database: postgres
          sslmode: disable

        shell:
          history_file: ~/.dshell_history

        logging:
          level: INFO
          structured: false
          file: /tmp/dshell.log
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    connection = ConnectionConfig(**_known_fields(ConnectionConfig, data.get("connection", {})))
    # Unknown backend names fail here rather than at connect time.
    Dialect.from_name(connection.type)

    shell = ShellConfig(**_known_fields(ShellConfig, data.get("shell", {})))
    log_config = LoggingConfig(**_known_fields(LoggingConfig, data.get("logging", {})))

    return Config(connection=connection, shell=shell, logging=log_config)


def _known_fields(cls, section: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Check that ``section`` maps fields of dataclass ``cls`` to values of their type."""
    if not section:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"{cls.__name__} section must be a mapping, got {type(section).__name__}")
    names = set()
    for item in fields(cls):
        names.add(item.name)
    unknown = set(section) - names
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {', '.join(sorted(unknown))}")

    hints = get_type_hints(cls)
    for key, value in section.items():
        allowed = get_args(hints[key]) or (hints[key],)
        if value is None and type(None) in allowed:
            continue
        # bool is an int subclass; only accept it where declared
        if isinstance(value, bool) and bool not in allowed:
            allowed = ()
        if not isinstance(value, allowed):
            raise ValueError(
                f"{cls.__name__}.{key} has invalid value {value!r} ({type(value).__name__})"
            )
    return dict(section)
