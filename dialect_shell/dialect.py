"""Supported target dialects."""

from enum import Enum


class Dialect(Enum):
    """Backend dialects a session can talk to.

    MySQL is the native dialect: the command vocabulary is MySQL's own, so
    nothing needs rewriting for it.
    """

    MYSQL = "mysql"
    POSTGRESQL = "pg"

    @classmethod
    def from_name(cls, name: str) -> "Dialect":
        """Resolve a user-supplied backend name such as 'pg' or 'postgresql'."""
        normalized = name.strip().lower()
        if normalized in ("pg", "postgres", "postgresql"):
            return cls.POSTGRESQL
        if normalized == "mysql":
            return cls.MYSQL
        raise ValueError(f"Unsupported database type: {name}")

    @property
    def is_native(self) -> bool:
        return self is Dialect.MYSQL

    @property
    def display_name(self) -> str:
        if self is Dialect.MYSQL:
            return "MySQL"
        return "PostgreSQL"

    @property
    def sqlglot_dialect(self) -> str:
        """Dialect name understood by sqlglot."""
        if self is Dialect.MYSQL:
            return "mysql"
        return "postgres"
