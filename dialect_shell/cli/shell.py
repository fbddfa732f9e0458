"""Interactive MySQL-style shell for MySQL and PostgreSQL."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import click
import psycopg2
import pyarrow as pa
import pymysql
from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.history import FileHistory

from ..config import Config, ConnectionConfig, load_config
from ..datasources import DataSource, MySQLDataSource, PostgreSQLDataSource, affected_rows
from ..dialect import Dialect
from ..dispatcher import DispatchResult, Dispatcher
from ..dispatcher.help_texts import GENERAL_HELP
from ..errors import ShellError
from ..session import SessionState
from ..translator import SpecialAction, Translator
from ..utils.logging import get_session_logger, setup_logging

EXIT_COMMANDS = ("quit", "exit", "\\q", "\\quit")
HELP_COMMANDS = ("help", "\\?", "\\help")


class ShellRuntime:
    """Wraps the translate → dispatch/execute pipeline for one session."""

    def __init__(self, datasource: DataSource, emit: Callable[[str], None]):
        self.datasource = datasource
        self.translator = Translator(datasource.dialect)
        self.dispatcher = Dispatcher(datasource.dialect, datasource, emit)
        self.state = SessionState(active_database=datasource.current_database())
        self.log_context: Dict[str, Any] = {
            "dialect": datasource.dialect.value,
            "database": self.state.database_label,
        }
        self.logger = get_session_logger(__name__, self.log_context)

    def execute(self, command: str) -> DispatchResult:
        """Translate one complete command and carry it out."""
        outcome = self.translator.translate(command)
        if isinstance(outcome, SpecialAction):
            self.logger.debug(f"Special action {outcome.kind.value} for: {command}")
            result = self.dispatcher.dispatch(outcome, self.state)
            self._update_state(result.state)
            return result
        self.logger.debug(f"Executing: {outcome.sql}")
        table = self.datasource.execute_query(outcome.sql, outcome.params)
        return DispatchResult(state=self.state, table=table)

    def _update_state(self, state: SessionState) -> None:
        self.state = state
        self.log_context["database"] = state.database_label


def _is_numeric(data_type: pa.DataType) -> bool:
    return (
        pa.types.is_integer(data_type)
        or pa.types.is_floating(data_type)
        or pa.types.is_decimal(data_type)
    )


def _cell_text(value: object) -> str:
    if value is None:
        return "NULL"
    return str(value)


class ResultPrinter:
    """Renders Arrow tables in the mysql client's layouts.

    Numeric columns are right-aligned in the bordered layout; headers are
    always left-aligned. The expanded layout (toggled by ``\\x``) prints one
    ``label: value`` line per column for each row.
    """

    def __init__(self, emit: Callable[[str], None]):
        self.emit = emit

    def display(self, table: pa.Table, elapsed_ms: float, expanded: bool = False) -> None:
        if table.num_columns == 0:
            self._display_status(table, elapsed_ms)
            return
        if table.num_rows == 0:
            self.emit("Empty set")
            return
        headers = list(table.schema.names)
        rows = self._text_rows(table)
        if expanded:
            lines = self._expanded_lines(headers, rows)
        else:
            right_aligned = [_is_numeric(field.type) for field in table.schema]
            lines = self._bordered_lines(headers, rows, right_aligned)
        for line in lines:
            self.emit(line)
        self.emit(f"{table.num_rows} row(s) in set ({elapsed_ms:.2f} ms)")

    def _display_status(self, table: pa.Table, elapsed_ms: float) -> None:
        count = affected_rows(table)
        if count is None or count < 0:
            self.emit(f"Query OK ({elapsed_ms:.2f} ms)")
            return
        self.emit(f"Query OK, {count} row(s) affected ({elapsed_ms:.2f} ms)")

    def _text_rows(self, table: pa.Table) -> List[List[str]]:
        columns: List[List[str]] = []
        for column in table.columns:
            columns.append([_cell_text(value) for value in column.to_pylist()])
        rows: List[List[str]] = []
        for row_index in range(table.num_rows):
            rows.append([column[row_index] for column in columns])
        return rows

    def _bordered_lines(
        self, headers: List[str], rows: List[List[str]], right_aligned: List[bool]
    ) -> List[str]:
        widths = [len(header) for header in headers]
        for row in rows:
            for index, text in enumerate(row):
                widths[index] = max(widths[index], len(text))

        border = "+" + "+".join("-" * (width + 2) for width in widths) + "+"
        lines = [border, self._bordered_row(headers, widths, [False] * len(headers)), border]
        for row in rows:
            lines.append(self._bordered_row(row, widths, right_aligned))
        lines.append(border)
        return lines

    def _bordered_row(self, values: List[str], widths: List[int], right_aligned: List[bool]) -> str:
        cells = []
        for value, width, right in zip(values, widths, right_aligned):
            cells.append(value.rjust(width) if right else value.ljust(width))
        return "| " + " | ".join(cells) + " |"

    def _expanded_lines(self, headers: List[str], rows: List[List[str]]) -> List[str]:
        label_width = max(len(header) for header in headers)
        lines: List[str] = []
        for number, row in enumerate(rows, start=1):
            lines.append(f"*************************** {number}. row ***************************")
            for header, text in zip(headers, row):
                lines.append(f"{header.rjust(label_width)}: {text}")
        return lines


def _ends_command(line: str) -> bool:
    """A line ending in ';' or a backslash directive completes a command."""
    return line.endswith(";") or line.startswith("\\")


class ShellRepl:
    """Reads lines from the terminal and runs each complete command."""

    def __init__(
        self,
        runtime: ShellRuntime,
        printer: ResultPrinter,
        history_file: str,
        session: Optional[PromptSession] = None,
    ):
        self.runtime = runtime
        self.printer = printer
        self.history_file = history_file
        self.session = session or self._create_session()

    def _create_session(self) -> PromptSession:
        history_path = Path(self.history_file).expanduser()
        history_path.parent.mkdir(parents=True, exist_ok=True)
        history_path.touch(exist_ok=True)
        return PromptSession(
            history=FileHistory(str(history_path)),
            auto_suggest=AutoSuggestFromHistory(),
        )

    def prompt_text(self, pending: List[str]) -> str:
        if pending:
            return "    -> "
        return f"dshell [{self.runtime.state.database_label}]> "

    def run(self) -> None:
        """Loop until end of input or an exit command.

        Lines accumulate until one completes a command. Exit and help words
        are only recognized at the start of a command; Ctrl-C discards the
        lines collected so far.
        """
        pending: List[str] = []
        while True:
            try:
                line = self.session.prompt(self.prompt_text(pending)).strip()
            except KeyboardInterrupt:
                if pending:
                    click.echo("")
                pending.clear()
                continue
            except EOFError:
                click.echo("")
                break

            if not line:
                continue
            if not pending and line.lower() in EXIT_COMMANDS:
                break
            if not pending and line.lower() in HELP_COMMANDS:
                click.echo(GENERAL_HELP)
                continue

            pending.append(line)
            if _ends_command(line):
                command = "\n".join(pending)
                pending.clear()
                self.execute_command(command)
        click.echo("Bye!")

    def execute_command(self, command: str) -> None:
        """Run one complete command and print its outcome or error."""
        try:
            started = time.perf_counter()
            result = self.runtime.execute(command)
            elapsed_ms = (time.perf_counter() - started) * 1000
            if result.heading:
                click.echo(result.heading)
            if result.table is not None:
                self.printer.display(result.table, elapsed_ms, expanded=result.state.expanded)
        except (
            ShellError,
            ConnectionError,
            psycopg2.Error,
            pymysql.MySQLError,
            pa.ArrowException,
        ) as exc:
            click.echo(f"ERROR: {exc}", err=True)
        except Exception as exc:
            self.runtime.logger.exception("Unexpected failure while running command")
            click.echo(f"unexpected error: {exc}", err=True)


def _build_config(config_path: Optional[str], overrides: Dict[str, Any]) -> Config:
    if config_path:
        config = load_config(config_path)
    else:
        config = Config()
    config.connection = config.connection.merged(overrides).with_defaults()
    return config


def _create_datasource(connection: ConnectionConfig) -> DataSource:
    dialect = connection.dialect
    if dialect is Dialect.POSTGRESQL:
        return PostgreSQLDataSource("postgresql", connection)
    if dialect is Dialect.MYSQL:
        return MySQLDataSource("mysql", connection)
    raise ValueError(f"Unsupported database type: {connection.type}")


def _print_banner(datasource: DataSource) -> None:
    connection = datasource.config
    location = connection.host or "local socket"
    click.echo("Welcome to dshell, the unified database shell.")
    click.echo(f"Connected to {datasource.dialect.display_name} at {location}:{connection.port}")
    click.echo(f"Database: {connection.database}")
    click.echo("Type 'help' or '\\?' for help. Type 'quit' or '\\q' to exit.\n")


@click.command()
@click.option("-H", "--host", default=None, help="Database server host (empty for PostgreSQL Unix socket).")
@click.option("-P", "--port", type=int, default=None, help="Database server port (default: 3306 for MySQL, 5432 for PostgreSQL).")
@click.option("-u", "--user", default=None, help="Database user.")
@click.option("-p", "--password", default=None, help="Database password.")
@click.option("-d", "--database", default=None, help="Database name.")
@click.option(
    "-t",
    "--type",
    "db_type",
    type=click.Choice(["mysql", "pg", "postgresql"], case_sensitive=False),
    default=None,
    help="Database type: mysql or pg/postgresql.",
)
@click.option("--sslmode", default=None, help="PostgreSQL SSL mode: disable, require, verify-ca, verify-full.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    help="Path to YAML config file. Command-line flags take precedence.",
)
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR).")
def cli(
    host: Optional[str],
    port: Optional[int],
    user: Optional[str],
    password: Optional[str],
    database: Optional[str],
    db_type: Optional[str],
    sslmode: Optional[str],
    config_path: Optional[str],
    log_level: Optional[str],
) -> None:
    """A unified MySQL-style shell for MySQL and PostgreSQL.

    When connected to PostgreSQL, MySQL commands such as SHOW DATABASES,
    SHOW TABLES or DESC table_name are translated automatically.
    """
    overrides = {
        "type": db_type,
        "host": host,
        "port": port,
        "user": user,
        "password": password,
        "database": database,
        "sslmode": sslmode,
    }
    try:
        config = _build_config(config_path, overrides)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    setup_logging(
        level=log_level or config.logging.level,
        structured=config.logging.structured,
        log_file=config.logging.file,
    )

    datasource = _create_datasource(config.connection)
    try:
        datasource.connect()
    except ConnectionError as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        _print_banner(datasource)
        runtime = ShellRuntime(datasource, click.echo)
        printer = ResultPrinter(click.echo)
        repl = ShellRepl(runtime, printer, config.shell.history_file)
        repl.run()
    finally:
        datasource.disconnect()


if __name__ == "__main__":
    cli()
