"""Rewriting of psql-style backslash directives such as ``\\dt`` or ``\\c``."""

from typing import Callable, Dict, List

from ..errors import CommandSyntaxError, MissingArgumentError
from .outcome import ActionKind, RewrittenQuery, SpecialAction, TranslationOutcome
from .rules import LIST_DATABASES_SQL

DIRECTIVE_PREFIX = "\\"

LIST_TABLES_SQL = (
    'SELECT tablename AS "Tables" FROM pg_tables '
    "WHERE schemaname = 'public' ORDER BY tablename"
)

LIST_TABLES_WITH_SIZE_SQL = """SELECT
    tablename AS "Name",
    pg_size_pretty(pg_total_relation_size(quote_ident(schemaname) || '.' || quote_ident(tablename))) AS "Size"
FROM pg_tables
WHERE schemaname = 'public'
ORDER BY tablename"""

DESCRIBE_RELATION_SQL = """SELECT
    column_name AS "Column",
    data_type AS "Type",
    CASE WHEN is_nullable = 'YES' THEN 'YES' ELSE 'NO' END AS "Nullable"
FROM information_schema.columns
WHERE table_schema = 'public' AND table_name = %s
ORDER BY ordinal_position"""

LIST_RELATIONS_SQL = (
    "SELECT tablename AS \"Name\", 'table' AS \"Type\" "
    "FROM pg_tables WHERE schemaname = 'public'\n"
    "UNION ALL\n"
    "SELECT viewname AS \"Name\", 'view' AS \"Type\" "
    "FROM pg_views WHERE schemaname = 'public'\n"
    'ORDER BY "Name"'
)

LIST_INDEXES_SQL = (
    'SELECT indexname AS "Index", tablename AS "Table" FROM pg_indexes '
    "WHERE schemaname = 'public' ORDER BY indexname"
)

LIST_VIEWS_SQL = (
    'SELECT viewname AS "View" FROM pg_views '
    "WHERE schemaname = 'public' ORDER BY viewname"
)

LIST_FUNCTIONS_SQL = """SELECT routine_name AS "Function", data_type AS "Return Type"
FROM information_schema.routines
WHERE routine_schema = 'public' AND routine_type = 'FUNCTION'"""

LIST_ROLES_SQL = """SELECT rolname AS "Role",
    CASE WHEN rolsuper THEN 'Superuser' ELSE '' END AS "Attributes"
FROM pg_roles
ORDER BY rolname"""

LIST_SCHEMAS_SQL = (
    'SELECT schema_name AS "Schema" FROM information_schema.schemata '
    "ORDER BY schema_name"
)

DirectiveHandler = Callable[[List[str]], TranslationOutcome]


def is_directive(command: str) -> bool:
    """Check whether ``command`` is a backslash directive."""
    return command.startswith(DIRECTIVE_PREFIX)


class DirectiveRewriter:
    """Maps the first token of a backslash directive to an outcome."""

    def __init__(self):
        self._handlers: Dict[str, DirectiveHandler] = {}
        self._register_handlers()

    def _register_handlers(self) -> None:
        self._register(["\\l", "\\list"], self._static(LIST_DATABASES_SQL))
        self._register(["\\dt"], self._static(LIST_TABLES_SQL))
        self._register(["\\dt+"], self._static(LIST_TABLES_WITH_SIZE_SQL))
        self._register(["\\d"], self._describe)
        self._register(["\\di"], self._static(LIST_INDEXES_SQL))
        self._register(["\\dv"], self._static(LIST_VIEWS_SQL))
        self._register(["\\df"], self._static(LIST_FUNCTIONS_SQL))
        self._register(["\\du"], self._static(LIST_ROLES_SQL))
        self._register(["\\dn"], self._static(LIST_SCHEMAS_SQL))
        self._register(["\\c", "\\connect"], self._connect)
        self._register(["\\q", "\\quit"], self._action(ActionKind.QUIT))
        self._register(["\\?", "\\help"], self._action(ActionKind.HELP))
        self._register(["\\x"], self._action(ActionKind.TOGGLE_EXPANDED))

    def _register(self, names: List[str], handler: DirectiveHandler) -> None:
        for name in names:
            self._handlers[name] = handler

    def rewrite(self, command: str) -> TranslationOutcome:
        """Rewrite one directive.

        Raises:
            CommandSyntaxError: If the first token is not a known directive
            MissingArgumentError: If ``\\c`` is given without a database
        """
        tokens = command.split()
        name = tokens[0]
        handler = self._handlers.get(name)
        if handler is None:
            raise CommandSyntaxError(name)
        return handler(tokens)

    def _static(self, sql: str) -> DirectiveHandler:
        def handle(tokens: List[str]) -> TranslationOutcome:
            return RewrittenQuery(sql)

        return handle

    def _action(self, kind: ActionKind) -> DirectiveHandler:
        def handle(tokens: List[str]) -> TranslationOutcome:
            return SpecialAction(kind)

        return handle

    def _describe(self, tokens: List[str]) -> TranslationOutcome:
        if len(tokens) > 1:
            return RewrittenQuery(DESCRIBE_RELATION_SQL, (tokens[1],))
        return RewrittenQuery(LIST_RELATIONS_SQL)

    def _connect(self, tokens: List[str]) -> TranslationOutcome:
        if len(tokens) < 2:
            raise MissingArgumentError("\\c database_name")
        return SpecialAction(ActionKind.USE_DATABASE, (tokens[1],))
