"""Tests for the special action dispatcher."""

from typing import List, Sequence, Tuple

import pyarrow as pa
import pytest

from dialect_shell.dialect import Dialect
from dialect_shell.dispatcher import Dispatcher
from dialect_shell.dispatcher import help_texts
from dialect_shell.dispatcher.ddl import CREATE_DATABASE_SQL, CREATE_TABLE_SQL
from dialect_shell.errors import MissingArgumentError, UnknownActionError
from dialect_shell.session import SessionState
from dialect_shell.translator import ActionKind, SpecialAction, Translator


class FakeBackend:
    """Records queries and database switches instead of talking to a server."""

    def __init__(self, fail_switch: bool = False):
        self.queries: List[Tuple[str, Tuple[str, ...]]] = []
        self.switched: List[str] = []
        self.fail_switch = fail_switch
        self.result = pa.table({"Create Table": ["CREATE TABLE users (\n  id INTEGER NOT NULL\n);"]})

    def execute_query(self, query: str, params: Sequence[str] = ()) -> pa.Table:
        self.queries.append((query, tuple(params)))
        return self.result

    def switch_database(self, name: str) -> None:
        if self.fail_switch:
            raise ConnectionError(f"PostgreSQL connection failed: database \"{name}\" does not exist")
        self.switched.append(name)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def emitted():
    return []


@pytest.fixture
def dispatcher(backend, emitted):
    return Dispatcher(Dialect.POSTGRESQL, backend, emitted.append)


@pytest.fixture
def state():
    return SessionState(active_database="postgres")


def test_use_database_switches_and_updates_state(dispatcher, backend, emitted, state):
    """A successful switch moves the session to the new database."""
    action = SpecialAction(ActionKind.USE_DATABASE, ("shop",))

    result = dispatcher.dispatch(action, state)

    assert backend.switched == ["shop"]
    assert backend.queries == []
    assert result.state.active_database == "shop"
    assert result.table is None
    assert emitted == ["Database changed to 'shop'"]
    assert state.active_database == "postgres"


def test_failed_switch_keeps_previous_database(emitted, state):
    """When the backend cannot switch, the error surfaces and state is untouched."""
    backend = FakeBackend(fail_switch=True)
    dispatcher = Dispatcher(Dialect.POSTGRESQL, backend, emitted.append)
    action = SpecialAction(ActionKind.USE_DATABASE, ("missing",))

    with pytest.raises(ConnectionError):
        dispatcher.dispatch(action, state)

    assert state.active_database == "postgres"
    assert emitted == []


@pytest.mark.parametrize("args", [(), ("a", "b")])
def test_use_database_requires_exactly_one_argument(dispatcher, backend, state, args):
    """USE without exactly one name is rejected before touching the backend."""
    with pytest.raises(MissingArgumentError):
        dispatcher.dispatch(SpecialAction(ActionKind.USE_DATABASE, args), state)

    assert backend.switched == []


def test_show_create_table_synthesizes_ddl(dispatcher, backend, state):
    """On PostgreSQL the DDL is built by one catalog query."""
    action = SpecialAction(ActionKind.SHOW_CREATE_TABLE, ("users",))

    result = dispatcher.dispatch(action, state)

    assert backend.queries == [(CREATE_TABLE_SQL, ("users",))]
    assert result.heading == "Table: users"
    assert result.table.column(0).to_pylist()[0].startswith("CREATE TABLE users")
    assert result.state == state


def test_create_table_query_renders_types_and_clauses():
    """The synthesis query covers the type mapping and column clauses."""
    assert "'VARCHAR(' || character_maximum_length || ')'" in CREATE_TABLE_SQL
    assert "'CHAR(' || character_maximum_length || ')'" in CREATE_TABLE_SQL
    assert "'NUMERIC(' || numeric_precision || ',' || COALESCE(numeric_scale, 0) || ')'" in CREATE_TABLE_SQL
    assert "UPPER(data_type)" in CREATE_TABLE_SQL
    assert "' NOT NULL'" in CREATE_TABLE_SQL
    assert "' DEFAULT ' || column_default" in CREATE_TABLE_SQL
    assert "ORDER BY ordinal_position" in CREATE_TABLE_SQL


def test_create_table_query_keeps_unconstrained_columns():
    """Columns without a length or precision fall back to the bare type name."""
    assert "data_type = 'character varying' AND character_maximum_length IS NOT NULL" in CREATE_TABLE_SQL
    assert "data_type = 'character' AND character_maximum_length IS NOT NULL" in CREATE_TABLE_SQL
    assert "data_type = 'numeric' AND numeric_precision IS NOT NULL" in CREATE_TABLE_SQL
    assert "ELSE UPPER(data_type)" in CREATE_TABLE_SQL


def test_show_create_database_synthesizes_ddl(dispatcher, backend, state):
    """Database DDL renders owner, encoding and locale clauses."""
    action = SpecialAction(ActionKind.SHOW_CREATE_DATABASE, ("shop",))

    result = dispatcher.dispatch(action, state)

    assert backend.queries == [(CREATE_DATABASE_SQL, ("shop",))]
    assert result.heading == "Database: shop"
    assert "WITH OWNER" in CREATE_DATABASE_SQL
    assert "ENCODING" in CREATE_DATABASE_SQL
    assert "LC_COLLATE" in CREATE_DATABASE_SQL
    assert "LC_CTYPE" in CREATE_DATABASE_SQL


def test_show_create_missing_object_is_empty_result(dispatcher, backend, state):
    """No catalog rows means an empty table, not an error."""
    backend.result = pa.table({"Create Table": pa.array([], type=pa.string())})

    result = dispatcher.dispatch(SpecialAction(ActionKind.SHOW_CREATE_TABLE, ("nope",)), state)

    assert result.table.num_rows == 0


def test_show_create_native_uses_backend_statement(backend, emitted, state):
    """On MySQL the server's own SHOW CREATE runs with a quoted name."""
    dispatcher = Dispatcher(Dialect.MYSQL, backend, emitted.append)

    table_result = dispatcher.dispatch(SpecialAction(ActionKind.SHOW_CREATE_TABLE, ("users",)), state)
    dispatcher.dispatch(SpecialAction(ActionKind.SHOW_CREATE_DATABASE, ("shop",)), state)

    assert backend.queries == [
        ("SHOW CREATE TABLE `users`", ()),
        ("SHOW CREATE DATABASE `shop`", ()),
    ]
    assert table_result.heading is None


@pytest.mark.parametrize("kind", [ActionKind.SHOW_CREATE_TABLE, ActionKind.SHOW_CREATE_DATABASE])
def test_show_create_requires_name(dispatcher, backend, state, kind):
    """Synthesis without a name is a missing argument."""
    with pytest.raises(MissingArgumentError):
        dispatcher.dispatch(SpecialAction(kind), state)

    assert backend.queries == []


def test_quit_exits(dispatcher, emitted, state):
    """QUIT says goodbye and ends the process."""
    with pytest.raises(SystemExit) as excinfo:
        dispatcher.dispatch(SpecialAction(ActionKind.QUIT), state)

    assert excinfo.value.code == 0
    assert emitted == ["Bye!"]


@pytest.mark.parametrize(
    "kind,text",
    [
        (ActionKind.HELP, help_texts.GENERAL_HELP),
        (ActionKind.SHOW_HELP, help_texts.SHOW_HELP),
        (ActionKind.SHOW_CREATE_HELP, help_texts.SHOW_CREATE_HELP),
        (ActionKind.SHOW_TABLES_HELP, help_texts.SHOW_TABLES_HELP),
        (ActionKind.SHOW_COLUMNS_HELP, help_texts.SHOW_COLUMNS_HELP),
    ],
)
def test_help_actions_print_static_text(dispatcher, backend, emitted, state, kind, text):
    """Help actions print their text and run no query."""
    result = dispatcher.dispatch(SpecialAction(kind), state)

    assert emitted == [text]
    assert backend.queries == []
    assert result.state == state


def test_toggle_expanded_flips_display_mode(dispatcher, emitted, state):
    """\\x alternates the expanded flag."""
    first = dispatcher.dispatch(SpecialAction(ActionKind.TOGGLE_EXPANDED), state)
    second = dispatcher.dispatch(SpecialAction(ActionKind.TOGGLE_EXPANDED), first.state)

    assert first.state.expanded is True
    assert second.state.expanded is False
    assert state.expanded is False
    assert emitted == ["Expanded display is on.", "Expanded display is off."]


def test_cross_database_query_runs_on_current_database(dispatcher, backend, state):
    """The named database is not honored; the fallback query runs as is."""
    action = Translator(Dialect.POSTGRESQL).translate("SHOW TABLES FROM shop;")

    result = dispatcher.dispatch(action, state)

    assert backend.queries == [(action.query.sql, ())]
    assert backend.switched == []
    assert result.state.active_database == "postgres"
    assert result.table is backend.result


def test_unknown_action_kind(dispatcher, state):
    """A kind without a handler is an internal inconsistency."""
    with pytest.raises(UnknownActionError):
        dispatcher.dispatch(SpecialAction("bogus"), state)
