"""PostgreSQL data source implementation."""

from typing import Any, Dict, Sequence
import pyarrow as pa
import psycopg2
from psycopg2 import pool
import logging

from ..dialect import Dialect
from .base import DataSource, bind_params, build_arrow_table

logger = logging.getLogger(__name__)

UNIX_SOCKET_DIR = "/var/run/postgresql"


class PostgreSQLDataSource(DataSource):
    """PostgreSQL data source backed by a single-connection pool.

    Each database gets its own pool; switching database builds a new pool
    and closes the old one once the new one answers.
    """

    @property
    def dialect(self) -> Dialect:
        return Dialect.POSTGRESQL

    def _connection_kwargs(self, database: str) -> Dict[str, Any]:
        """Keyword arguments for psycopg2; an empty host selects the Unix socket."""
        kwargs: Dict[str, Any] = {
            "host": self.config.host or UNIX_SOCKET_DIR,
            "user": self.config.user,
            "dbname": database,
            "sslmode": self.config.sslmode or "disable",
        }
        if self.config.host:
            kwargs["port"] = self.config.port or 5432
        if self.config.password:
            kwargs["password"] = self.config.password
        return kwargs

    def _open(self, database: str) -> pool.SimpleConnectionPool:
        """Create a connection pool for ``database`` and verify it answers."""
        kwargs = self._connection_kwargs(database)
        logger.info(
            f"Opening PostgreSQL connection host={kwargs['host']} "
            f"user={kwargs['user']} dbname={database} sslmode={kwargs['sslmode']}"
        )
        try:
            connection_pool = pool.SimpleConnectionPool(1, 1, **kwargs)
        except psycopg2.Error as e:
            logger.error(f"Failed to connect to PostgreSQL {self.name}: {e}")
            raise ConnectionError(f"PostgreSQL connection failed: {e}") from e

        try:
            conn = connection_pool.getconn()
            try:
                conn.autocommit = True
                with conn.cursor() as cursor:
                    cursor.execute("SELECT 1")
            finally:
                connection_pool.putconn(conn)
        except psycopg2.Error as e:
            connection_pool.closeall()
            logger.error(f"PostgreSQL database '{database}' did not answer: {e}")
            raise ConnectionError(f"PostgreSQL connection failed: {e}") from e
        return connection_pool

    def _close(self, handle: pool.SimpleConnectionPool) -> None:
        handle.closeall()

    def execute_query(self, query: str, params: Sequence[Any] = ()) -> pa.Table:
        """Execute a statement on a pooled connection."""
        connection_pool = self._require_connection()
        conn = connection_pool.getconn()
        try:
            conn.autocommit = True
            with conn.cursor() as cursor:
                logger.debug(f"Executing query on {self.name}: {query[:100]}...")
                cursor.execute(query, bind_params(params))
                if cursor.description is None:
                    return build_arrow_table(None, [], cursor.rowcount)
                rows = cursor.fetchall()
                return build_arrow_table(cursor.description, rows)
        except psycopg2.Error as e:
            logger.error(f"Query execution failed on {self.name}: {e}")
            raise
        finally:
            connection_pool.putconn(conn)
