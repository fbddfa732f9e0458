"""Base data source interface."""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, List, Optional, Sequence
import logging

import pyarrow as pa

from ..config import ConnectionConfig
from ..dialect import Dialect

logger = logging.getLogger(__name__)

ROWCOUNT_METADATA_KEY = b"rowcount"


class DataSource(ABC):
    """Abstract base class for the backend a session talks to.

    Subclasses provide ``_open`` and ``_close`` for their driver's
    connection handle. Switching database is done here so every backend
    follows the same order: open and verify the new handle, swap it in,
    then close the old one.
    """

    def __init__(self, name: str, config: ConnectionConfig):
        """Initialize data source.

        Args:
            name: Name shown in log messages
            config: Connection settings, defaults already applied
        """
        self.name = name
        self.config = config
        self.connection: Any = None
        self._connected = False

    @property
    @abstractmethod
    def dialect(self) -> Dialect:
        """Dialect spoken by this backend."""
        pass

    @abstractmethod
    def _open(self, database: str) -> Any:
        """Open and verify a connection handle for ``database``.

        Raises:
            ConnectionError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    def _close(self, handle: Any) -> None:
        """Release a handle returned by ``_open``."""
        pass

    @abstractmethod
    def execute_query(self, query: str, params: Sequence[Any] = ()) -> pa.Table:
        """Execute a SQL statement and return its rows as an Arrow table.

        Args:
            query: SQL text, with ``%s`` placeholders when ``params`` is given
            params: Values bound to the placeholders

        Returns:
            Arrow table; statements without a result set return a table with
            no columns and the affected row count in its schema metadata
        """
        pass

    def connect(self) -> None:
        """Establish connection to the configured database."""
        logger.info(f"Connecting to {self.dialect.display_name} database '{self.config.database}'")
        self.connection = self._open(self.config.database)
        self._connected = True
        logger.info(f"Successfully connected to {self.dialect.display_name}: {self.name}")

    def disconnect(self) -> None:
        """Close the connection."""
        if self.connection is not None:
            self._close(self.connection)
            logger.info(f"Disconnected from {self.dialect.display_name}: {self.name}")
        self.connection = None
        self._connected = False

    def switch_database(self, name: str) -> None:
        """Make ``name`` the active database.

        The replacement connection is opened before the current one is
        released, so a failed switch leaves the session connected to the
        previous database.

        Raises:
            ConnectionError: If the new database cannot be opened
        """
        replacement = self._open(name)
        previous = self.connection
        self.connection = replacement
        self.config = replace(self.config, database=name)
        self._connected = True
        if previous is not None:
            self._close(previous)
        logger.info(f"Switched {self.name} to database '{name}'")

    def current_database(self) -> Optional[str]:
        return self.config.database

    def is_connected(self) -> bool:
        """Check if data source is connected.

        Returns:
            True if connected, False otherwise
        """
        return self._connected

    def ensure_connected(self) -> None:
        """Ensure data source is connected.

        Raises:
            ConnectionError: If connection cannot be established
        """
        if not self.is_connected():
            self.connect()

    def _require_connection(self) -> Any:
        if self.connection is None:
            raise RuntimeError(f"Not connected to {self.name}")
        return self.connection

    def __enter__(self):
        """Context manager entry."""
        self.ensure_connected()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name})"


def bind_params(params: Sequence[Any]) -> Optional[tuple]:
    """Driver argument for ``params``.

    Both drivers only apply ``%`` formatting when arguments are passed, so
    parameterless statements must get None to keep literal percent signs.
    """
    if not params:
        return None
    return tuple(params)


def build_arrow_table(description, rows: Sequence[Sequence[Any]], rowcount: int = -1) -> pa.Table:
    """Build an Arrow table from a DB-API cursor description and rows."""
    if description is None:
        table = pa.table({})
        metadata = {ROWCOUNT_METADATA_KEY: str(rowcount).encode()}
        return table.replace_schema_metadata(metadata)

    columns = _extract_column_names(description)
    arrays = []
    for index in range(len(columns)):
        values = []
        for row in rows:
            values.append(row[index])
        arrays.append(_build_array(values))
    return pa.Table.from_arrays(arrays, names=columns)


def affected_rows(table: pa.Table) -> Optional[int]:
    """Row count recorded for a statement without a result set."""
    metadata = table.schema.metadata or {}
    value = metadata.get(ROWCOUNT_METADATA_KEY)
    if value is None:
        return None
    return int(value.decode())


def _extract_column_names(description) -> List[str]:
    """Extract column names from cursor description."""
    columns = []
    for desc in description:
        columns.append(desc[0])
    return columns


def _build_array(values: List[Any]) -> pa.Array:
    """Convert one column of driver values, falling back to text."""
    try:
        return pa.array(values)
    except (pa.ArrowInvalid, pa.ArrowTypeError, pa.ArrowNotImplementedError, OverflowError):
        text_values = []
        for value in values:
            if value is None:
                text_values.append(None)
            elif isinstance(value, (bytes, bytearray, memoryview)):
                text_values.append(bytes(value).decode("utf-8", errors="replace"))
            else:
                text_values.append(str(value))
        return pa.array(text_values, type=pa.string())
