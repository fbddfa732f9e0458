"""Result types produced by the translator."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class ActionKind(Enum):
    """Special actions the session performs instead of running a query."""

    USE_DATABASE = "use_database"
    SHOW_CREATE_TABLE = "show_create_table"
    SHOW_CREATE_DATABASE = "show_create_database"
    CROSS_DATABASE_QUERY = "cross_db_query"
    QUIT = "quit"
    HELP = "help"
    TOGGLE_EXPANDED = "toggle_expanded"
    SHOW_HELP = "show_help"
    SHOW_CREATE_HELP = "show_create_help"
    SHOW_TABLES_HELP = "show_tables_help"
    SHOW_COLUMNS_HELP = "show_columns_help"


@dataclass(frozen=True)
class RewrittenQuery:
    """Query text ready to run on the target backend.

    ``params`` holds values bound by the driver for each ``%s`` placeholder.
    An untranslated command is returned as a RewrittenQuery of its own text.
    """

    sql: str
    params: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SpecialAction:
    """A command that needs session-level handling by the dispatcher.

    ``query`` is only set for CROSS_DATABASE_QUERY, where it is the fallback
    run against the current database.
    """

    kind: ActionKind
    args: Tuple[str, ...] = ()
    query: Optional[RewrittenQuery] = None


TranslationOutcome = Union[RewrittenQuery, SpecialAction]


def is_special(outcome: TranslationOutcome) -> bool:
    """Check whether an outcome must go through the dispatcher."""
    return isinstance(outcome, SpecialAction)
