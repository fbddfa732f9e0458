"""Backend connectors."""

from .base import DataSource, affected_rows, build_arrow_table
from .mysql import MySQLDataSource
from .postgresql import PostgreSQLDataSource

__all__ = [
    "DataSource",
    "MySQLDataSource",
    "PostgreSQLDataSource",
    "affected_rows",
    "build_arrow_table",
]
