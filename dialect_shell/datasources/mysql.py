"""MySQL data source implementation."""

from typing import Any, Sequence
import pyarrow as pa
import pymysql
from pymysql.connections import Connection
import logging

from ..dialect import Dialect
from .base import DataSource, bind_params, build_arrow_table

logger = logging.getLogger(__name__)


class MySQLDataSource(DataSource):
    """MySQL data source using one PyMySQL connection in autocommit mode."""

    @property
    def dialect(self) -> Dialect:
        return Dialect.MYSQL

    def _open(self, database: str) -> Connection:
        """Connect to ``database`` and ping the server."""
        logger.info(
            f"Opening MySQL connection host={self.config.host} port={self.config.port} "
            f"user={self.config.user} database={database}"
        )
        try:
            conn = pymysql.connect(
                host=self.config.host or "localhost",
                port=self.config.port or 3306,
                user=self.config.user,
                password=self.config.password or "",
                database=database,
                charset="utf8mb4",
                autocommit=True,
            )
        except pymysql.MySQLError as e:
            logger.error(f"Failed to connect to MySQL {self.name}: {e}")
            raise ConnectionError(f"MySQL connection failed: {e}") from e

        try:
            conn.ping(reconnect=False)
        except pymysql.MySQLError as e:
            conn.close()
            logger.error(f"MySQL database '{database}' did not answer: {e}")
            raise ConnectionError(f"MySQL connection failed: {e}") from e
        return conn

    def _close(self, handle: Connection) -> None:
        handle.close()

    def execute_query(self, query: str, params: Sequence[Any] = ()) -> pa.Table:
        """Execute a statement on the open connection."""
        conn = self._require_connection()
        try:
            with conn.cursor() as cursor:
                logger.debug(f"Executing query on {self.name}: {query[:100]}...")
                cursor.execute(query, bind_params(params))
                if cursor.description is None:
                    return build_arrow_table(None, [], cursor.rowcount)
                rows = cursor.fetchall()
                return build_arrow_table(cursor.description, rows)
        except pymysql.MySQLError as e:
            logger.error(f"Query execution failed on {self.name}: {e}")
            raise
