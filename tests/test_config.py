"""Tests for configuration loading."""

import pytest
import tempfile
from pathlib import Path
from dialect_shell.config import load_config, Config, ConnectionConfig
from dialect_shell.dialect import Dialect


def _write_config(text: str) -> str:
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        f.write(text)
        return f.name


def test_load_full_config():
    """Test loading every section."""
    config_yaml = """
connection:
  type: pg
  host: db.internal
  port: 6432
  user: app
  password: secret
  database: shop
  sslmode: require

shell:
  history_file: /tmp/dshell_history

logging:
  level: DEBUG
  structured: true
  file: /tmp/dshell.log
"""
    config_path = _write_config(config_yaml)

    try:
        config = load_config(config_path)

        assert config.connection.dialect is Dialect.POSTGRESQL
        assert config.connection.host == "db.internal"
        assert config.connection.port == 6432
        assert config.connection.database == "shop"
        assert config.connection.sslmode == "require"
        assert config.shell.history_file == "/tmp/dshell_history"
        assert config.logging.level == "DEBUG"
        assert config.logging.structured is True
        assert config.logging.file == "/tmp/dshell.log"
    finally:
        Path(config_path).unlink()


def test_load_minimal_config():
    """Test loading minimal configuration with defaults."""
    config_path = _write_config("connection:\n  type: mysql\n")

    try:
        config = load_config(config_path)

        assert config.connection.dialect is Dialect.MYSQL
        assert config.connection.host is None
        assert config.shell.history_file == "~/.dshell_history"
        assert config.logging.level == "WARNING"
        assert config.logging.structured is False
    finally:
        Path(config_path).unlink()


def test_empty_config_file():
    """An empty file yields the default configuration."""
    config_path = _write_config("")

    try:
        config = load_config(config_path)

        assert config == Config()
    finally:
        Path(config_path).unlink()


def test_missing_config_file():
    """Test error handling for missing config file."""
    with pytest.raises(FileNotFoundError):
        load_config("nonexistent_config.yaml")


def test_unknown_database_type():
    """Unsupported backends are rejected at load time."""
    config_path = _write_config("connection:\n  type: duckdb\n")

    try:
        with pytest.raises(ValueError):
            load_config(config_path)
    finally:
        Path(config_path).unlink()


def test_unknown_keys_rejected():
    """Misspelled keys are reported instead of ignored."""
    config_path = _write_config("connection:\n  type: pg\n  hostname: localhost\n")

    try:
        with pytest.raises(ValueError) as excinfo:
            load_config(config_path)
        assert "hostname" in str(excinfo.value)
    finally:
        Path(config_path).unlink()


def test_mistyped_values_rejected():
    """Values of the wrong type are reported instead of reaching the driver."""
    config_path = _write_config("connection:\n  type: pg\n  port: abc\n")

    try:
        with pytest.raises(ValueError) as excinfo:
            load_config(config_path)
        assert "port" in str(excinfo.value)
    finally:
        Path(config_path).unlink()


def test_boolean_port_rejected():
    """A YAML boolean is not accepted as a port number."""
    config_path = _write_config("connection:\n  type: pg\n  port: yes\n")

    try:
        with pytest.raises(ValueError):
            load_config(config_path)
    finally:
        Path(config_path).unlink()


@pytest.mark.parametrize(
    "text",
    ["- connection\n- shell\n", "just a string\n", "connection: localhost\n", "logging:\n  - DEBUG\n"],
)
def test_non_mapping_sections_rejected(text):
    """A file or section that is not a mapping is a configuration error."""
    config_path = _write_config(text)

    try:
        with pytest.raises(ValueError):
            load_config(config_path)
    finally:
        Path(config_path).unlink()


def test_mysql_defaults():
    """MySQL falls back to localhost:3306, root and the mysql database."""
    connection = ConnectionConfig(type="mysql").with_defaults()

    assert connection.host == "localhost"
    assert connection.port == 3306
    assert connection.user == "root"
    assert connection.database == "mysql"


def test_postgresql_defaults():
    """PostgreSQL keeps an empty host for the Unix socket."""
    connection = ConnectionConfig(type="postgresql").with_defaults()

    assert connection.host == ""
    assert connection.port == 5432
    assert connection.user == "postgres"
    assert connection.database == "postgres"


def test_overrides_skip_unset_values():
    """Command-line overrides replace only the values actually given."""
    base = ConnectionConfig(type="pg", host="db.internal", user="app")

    merged = base.merged({"host": None, "user": "admin", "database": "shop"})

    assert merged.host == "db.internal"
    assert merged.user == "admin"
    assert merged.database == "shop"
    assert base.user == "app"


def test_dialect_names():
    """Backend names resolve case-insensitively."""
    assert Dialect.from_name("PG") is Dialect.POSTGRESQL
    assert Dialect.from_name("postgresql") is Dialect.POSTGRESQL
    assert Dialect.from_name("MySQL") is Dialect.MYSQL
    with pytest.raises(ValueError):
        Dialect.from_name("oracle")
