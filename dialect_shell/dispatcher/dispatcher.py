"""Session-level handling of special actions produced by the translator."""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Sequence

import pyarrow as pa

from ..dialect import Dialect
from ..errors import MissingArgumentError, UnknownActionError
from ..session import SessionState
from ..translator.outcome import ActionKind, SpecialAction
from . import help_texts
from .ddl import CREATE_DATABASE_SQL, CREATE_TABLE_SQL, native_show_create

logger = logging.getLogger(__name__)


class QueryBackend(Protocol):
    """What the dispatcher needs from a connected data source."""

    def execute_query(self, query: str, params: Sequence[str] = ()) -> pa.Table:
        ...

    def switch_database(self, name: str) -> None:
        ...


@dataclass(frozen=True)
class DispatchResult:
    """State after an action, plus any rows it produced for display."""

    state: SessionState
    table: Optional[pa.Table] = None
    heading: Optional[str] = None


ActionHandler = Callable[[SpecialAction, SessionState], DispatchResult]


class Dispatcher:
    """Performs special actions against the session and its backend.

    The dispatcher keeps no state of its own. Each call receives the current
    session state and returns the next one.
    """

    def __init__(self, dialect: Dialect, backend: QueryBackend, emit: Callable[[str], None]):
        self.dialect = dialect
        self.backend = backend
        self.emit = emit
        self._handlers: Dict[ActionKind, ActionHandler] = {
            ActionKind.USE_DATABASE: self._use_database,
            ActionKind.SHOW_CREATE_TABLE: self._show_create_table,
            ActionKind.SHOW_CREATE_DATABASE: self._show_create_database,
            ActionKind.CROSS_DATABASE_QUERY: self._cross_database_query,
            ActionKind.QUIT: self._quit,
            ActionKind.HELP: self._static_text(help_texts.GENERAL_HELP),
            ActionKind.SHOW_HELP: self._static_text(help_texts.SHOW_HELP),
            ActionKind.SHOW_CREATE_HELP: self._static_text(help_texts.SHOW_CREATE_HELP),
            ActionKind.SHOW_TABLES_HELP: self._static_text(help_texts.SHOW_TABLES_HELP),
            ActionKind.SHOW_COLUMNS_HELP: self._static_text(help_texts.SHOW_COLUMNS_HELP),
            ActionKind.TOGGLE_EXPANDED: self._toggle_expanded,
        }

    def dispatch(self, action: SpecialAction, state: SessionState) -> DispatchResult:
        """Perform ``action`` and return the resulting session state.

        Raises:
            MissingArgumentError: If the action lacks its required argument
            UnknownActionError: If no handler exists for the action kind
        """
        handler = self._handlers.get(action.kind)
        if handler is None:
            raise UnknownActionError(action.kind)
        logger.debug(f"Dispatching {action.kind} with args {list(action.args)}")
        return handler(action, state)

    def _use_database(self, action: SpecialAction, state: SessionState) -> DispatchResult:
        if len(action.args) != 1:
            raise MissingArgumentError("USE database_name")
        name = action.args[0]
        self.backend.switch_database(name)
        self.emit(f"Database changed to '{name}'")
        return DispatchResult(state=state.with_database(name))

    def _show_create_table(self, action: SpecialAction, state: SessionState) -> DispatchResult:
        name = self._single_argument(action, "SHOW CREATE TABLE table_name")
        if self.dialect.is_native:
            table = self.backend.execute_query(native_show_create(self.dialect, "TABLE", name))
            return DispatchResult(state=state, table=table)
        table = self.backend.execute_query(CREATE_TABLE_SQL, (name,))
        return DispatchResult(state=state, table=table, heading=f"Table: {name}")

    def _show_create_database(self, action: SpecialAction, state: SessionState) -> DispatchResult:
        name = self._single_argument(action, "SHOW CREATE DATABASE database_name")
        if self.dialect.is_native:
            table = self.backend.execute_query(native_show_create(self.dialect, "DATABASE", name))
            return DispatchResult(state=state, table=table)
        table = self.backend.execute_query(CREATE_DATABASE_SQL, (name,))
        return DispatchResult(state=state, table=table, heading=f"Database: {name}")

    def _cross_database_query(self, action: SpecialAction, state: SessionState) -> DispatchResult:
        # Only the current database is listed; the requested name is ignored.
        if action.query is None:
            raise UnknownActionError(action.kind)
        if action.args and action.args[0] != state.active_database:
            logger.info(
                f"Listing tables of current database {state.database_label}, "
                f"not {action.args[0]}"
            )
        table = self.backend.execute_query(action.query.sql, action.query.params)
        return DispatchResult(state=state, table=table)

    def _quit(self, action: SpecialAction, state: SessionState) -> DispatchResult:
        self.emit("Bye!")
        raise SystemExit(0)

    def _toggle_expanded(self, action: SpecialAction, state: SessionState) -> DispatchResult:
        next_state = state.toggle_expanded()
        if next_state.expanded:
            self.emit("Expanded display is on.")
        else:
            self.emit("Expanded display is off.")
        return DispatchResult(state=next_state)

    def _static_text(self, text: str) -> ActionHandler:
        def handle(action: SpecialAction, state: SessionState) -> DispatchResult:
            self.emit(text)
            return DispatchResult(state=state)

        return handle

    def _single_argument(self, action: SpecialAction, usage: str) -> str:
        if len(action.args) != 1:
            raise MissingArgumentError(usage)
        return action.args[0]
