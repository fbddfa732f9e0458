"""Ordered rewrite rules mapping MySQL commands to PostgreSQL queries.

Each rule pairs a command shape with a builder. Rules are tried top to bottom
and the first match wins, so a shape must come before any rule that would
shadow it.

Captured identifiers are restricted to ``[A-Za-z0-9_]``. Captures used as
values are bound as driver parameters; the only capture placed in identifier
position (the ``Tables_in_<db>`` column alias) is quoted with sqlglot.
Queries that take parameters spell a literal percent sign as ``%%``.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern, Tuple

from sqlglot import exp

from .outcome import ActionKind, RewrittenQuery, SpecialAction, TranslationOutcome

IDENTIFIER = r"([A-Za-z0-9_]+)"
QUOTED_LITERAL = r"'([^']+)'"

Builder = Callable[[Tuple[str, ...]], TranslationOutcome]


@dataclass(frozen=True)
class RewriteRule:
    """One recognized command shape and the outcome it produces."""

    name: str
    pattern: Pattern[str]
    build: Builder

    def apply(self, command: str) -> Optional[TranslationOutcome]:
        """Return the outcome for ``command`` or None when the shape differs."""
        match = self.pattern.fullmatch(command)
        if match is None:
            return None
        return self.build(match.groups())


def _shape(regex: str) -> Pattern[str]:
    return re.compile(regex, re.IGNORECASE | re.ASCII)


def _static(sql: str) -> Builder:
    def build(captures: Tuple[str, ...]) -> TranslationOutcome:
        return RewrittenQuery(sql)

    return build


def _bound(sql: str) -> Builder:
    """Bind every capture, in order, to the ``%s`` placeholders of ``sql``."""

    def build(captures: Tuple[str, ...]) -> TranslationOutcome:
        return RewrittenQuery(sql, tuple(captures))

    return build


def _action(kind: ActionKind) -> Builder:
    def build(captures: Tuple[str, ...]) -> TranslationOutcome:
        return SpecialAction(kind, tuple(captures))

    return build


def quote_identifier(name: str, dialect: str = "postgres") -> str:
    """Quote an identifier for the given sqlglot dialect."""
    return exp.to_identifier(name, quoted=True).sql(dialect=dialect)


_REGEX_METACHARACTERS = set(".^$*+?()[]{}|\\")


def like_to_regex(pattern: str) -> str:
    """Translate a MySQL LIKE pattern into an anchored POSIX regex.

    ``%`` becomes ``.*`` and ``_`` becomes ``.``; a backslash makes the next
    character literal. Everything else is matched literally.
    """
    parts: List[str] = ["^"]
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "\\" and index + 1 < len(pattern):
            parts.append(_literal_regex(pattern[index + 1]))
            index += 2
            continue
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(_literal_regex(char))
        index += 1
    parts.append("$")
    return "".join(parts)


def _literal_regex(char: str) -> str:
    if char in _REGEX_METACHARACTERS:
        return "\\" + char
    return char


LIST_DATABASES_SQL = (
    'SELECT datname AS "Database" FROM pg_database '
    "WHERE datistemplate = false ORDER BY datname"
)

LIST_TABLES_SQL = """SELECT tablename AS "Tables_in_database"
FROM pg_tables
WHERE schemaname = 'public'
ORDER BY tablename"""

LIST_FULL_TABLES_SQL = """SELECT tablename AS "Tables_in_database",
    'BASE TABLE' AS "Table_type"
FROM pg_tables
WHERE schemaname = 'public'
ORDER BY tablename"""

LIST_TABLES_IN_SQL = """SELECT tablename AS {alias}
FROM pg_tables
WHERE schemaname = 'public'
ORDER BY tablename"""

DESCRIBE_COLUMNS_SQL = """SELECT
    c.column_name AS "Field",
    c.data_type AS "Type",
    CASE WHEN c.is_nullable = 'YES' THEN 'YES' ELSE 'NO' END AS "Null",
    CASE WHEN EXISTS (
        SELECT 1
        FROM information_schema.table_constraints tc
        JOIN information_schema.key_column_usage kcu
          ON kcu.constraint_name = tc.constraint_name
         AND kcu.table_schema = tc.table_schema
        WHERE tc.constraint_type = 'PRIMARY KEY'
          AND tc.table_schema = c.table_schema
          AND tc.table_name = c.table_name
          AND kcu.column_name = c.column_name
    ) THEN 'PRI' ELSE '' END AS "Key",
    c.column_default AS "Default",
    CASE WHEN c.column_default LIKE 'nextval%%' THEN 'auto_increment' ELSE '' END AS "Extra"
FROM information_schema.columns c
WHERE c.table_schema = 'public' AND c.table_name = %s
ORDER BY c.ordinal_position"""

DESCRIBE_FULL_COLUMNS_SQL = """SELECT
    column_name AS "Field",
    data_type AS "Type",
    collation_name AS "Collation",
    CASE WHEN is_nullable = 'YES' THEN 'YES' ELSE 'NO' END AS "Null",
    '' AS "Key",
    column_default AS "Default",
    '' AS "Extra",
    'select,insert,update,references' AS "Privileges",
    '' AS "Comment"
FROM information_schema.columns
WHERE table_schema = 'public' AND table_name = %s
ORDER BY ordinal_position"""

LIST_INDEXES_SQL = """SELECT
    tablename AS "Table",
    indexname AS "Key_name",
    indexdef AS "Index_definition"
FROM pg_indexes
WHERE schemaname = 'public' AND tablename = %s
ORDER BY indexname"""

SERVER_STATUS_SQL = """SELECT name AS "Variable_name", setting AS "Value"
FROM pg_settings
ORDER BY name
LIMIT 50"""

SERVER_VARIABLES_SQL = """SELECT name AS "Variable_name", setting AS "Value"
FROM pg_settings
ORDER BY name"""

SERVER_VARIABLES_LIKE_SQL = """SELECT name AS "Variable_name", setting AS "Value"
FROM pg_settings
WHERE name ~* %s
ORDER BY name"""

PROCESSLIST_SQL = """SELECT
    pid AS "Id",
    usename AS "User",
    client_addr AS "Host",
    datname AS "db",
    state AS "Command",
    EXTRACT(EPOCH FROM (now() - query_start))::int AS "Time",
    state AS "State",
    query AS "Info"
FROM pg_stat_activity
WHERE pid <> pg_backend_pid()"""

GRANTS_SQL = """SELECT
    grantee AS "User",
    privilege_type AS "Privilege",
    table_schema || '.' || table_name AS "On"
FROM information_schema.role_table_grants
WHERE grantee = current_user"""

GRANTS_FOR_SQL = """SELECT
    grantee AS "User",
    privilege_type AS "Privilege",
    table_schema || '.' || table_name AS "On"
FROM information_schema.role_table_grants
WHERE grantee = %s"""

TABLE_STATUS_SQL = """SELECT
    s.relname AS "Name",
    CASE c.relkind WHEN 'r' THEN 'BASE TABLE' WHEN 'p' THEN 'PARTITIONED' END AS "Engine",
    pg_size_pretty(pg_total_relation_size(c.oid)) AS "Data_length",
    s.n_live_tup AS "Rows"
FROM pg_stat_user_tables s
JOIN pg_class c ON c.oid = s.relid
WHERE s.schemaname = 'public'
ORDER BY s.relname"""

LIST_SCHEMAS_SQL = """SELECT schema_name AS "Database"
FROM information_schema.schemata
ORDER BY schema_name"""

LIST_TRIGGERS_SQL = """SELECT
    trigger_name AS "Trigger",
    event_manipulation AS "Event",
    event_object_table AS "Table",
    action_statement AS "Statement",
    action_timing AS "Timing"
FROM information_schema.triggers
WHERE trigger_schema = 'public'"""

LIST_ROUTINES_SQL = """SELECT
    routine_name AS "Name",
    routine_type AS "Type",
    routine_schema AS "Db",
    external_language AS "Language"
FROM information_schema.routines
WHERE routine_schema = 'public'"""

ENGINES_SQL = (
    "SELECT 'PostgreSQL' AS \"Engine\", 'DEFAULT' AS \"Support\", "
    "'PostgreSQL native storage' AS \"Comment\""
)

CHARSET_SQL = """SELECT
    pg_encoding_to_char(encoding) AS "Charset",
    pg_encoding_to_char(encoding) AS "Description",
    datcollate AS "Default collation"
FROM pg_database
WHERE datname = current_database()"""

COLLATION_SQL = """SELECT
    collname AS "Collation",
    pg_encoding_to_char(collencoding) AS "Charset"
FROM pg_collation
ORDER BY collname
LIMIT 50"""

WARNINGS_SQL = (
    "SELECT 'Note' AS \"Level\", 0 AS \"Code\", "
    "'PostgreSQL does not store warnings/errors like MySQL' AS \"Message\""
)


def _tables_in_database(captures: Tuple[str, ...]) -> TranslationOutcome:
    database = captures[0]
    alias = quote_identifier(f"Tables_in_{database}")
    fallback = RewrittenQuery(LIST_TABLES_IN_SQL.format(alias=alias))
    return SpecialAction(ActionKind.CROSS_DATABASE_QUERY, (database,), fallback)


def _variables_like(captures: Tuple[str, ...]) -> TranslationOutcome:
    return RewrittenQuery(SERVER_VARIABLES_LIKE_SQL, (like_to_regex(captures[0]),))


HELP_RULES: List[RewriteRule] = [
    RewriteRule("show_help", _shape(r"SHOW\s+--help"), _action(ActionKind.SHOW_HELP)),
    RewriteRule(
        "show_create_help",
        _shape(r"SHOW\s+CREATE\s+--help"),
        _action(ActionKind.SHOW_CREATE_HELP),
    ),
    RewriteRule(
        "show_tables_help",
        _shape(r"SHOW\s+TABLES\s+--help"),
        _action(ActionKind.SHOW_TABLES_HELP),
    ),
    RewriteRule(
        "show_columns_help",
        _shape(r"(?:SHOW\s+COLUMNS|DESC|DESCRIBE)\s+--help"),
        _action(ActionKind.SHOW_COLUMNS_HELP),
    ),
]

REWRITE_RULES: List[RewriteRule] = [
    RewriteRule("show_databases", _shape(r"SHOW\s+DATABASES"), _static(LIST_DATABASES_SQL)),
    RewriteRule("show_tables", _shape(r"SHOW\s+TABLES"), _static(LIST_TABLES_SQL)),
    RewriteRule("show_full_tables", _shape(r"SHOW\s+FULL\s+TABLES"), _static(LIST_FULL_TABLES_SQL)),
    RewriteRule(
        "show_tables_from",
        _shape(r"SHOW\s+TABLES\s+(?:FROM|IN)\s+" + IDENTIFIER),
        _tables_in_database,
    ),
    RewriteRule(
        "show_columns",
        _shape(r"(?:SHOW\s+COLUMNS\s+FROM|DESC|DESCRIBE)\s+" + IDENTIFIER),
        _bound(DESCRIBE_COLUMNS_SQL),
    ),
    RewriteRule(
        "show_full_columns",
        _shape(r"SHOW\s+FULL\s+COLUMNS\s+FROM\s+" + IDENTIFIER),
        _bound(DESCRIBE_FULL_COLUMNS_SQL),
    ),
    RewriteRule(
        "show_create_table",
        _shape(r"SHOW\s+CREATE\s+TABLE\s+" + IDENTIFIER),
        _action(ActionKind.SHOW_CREATE_TABLE),
    ),
    RewriteRule(
        "show_create_database",
        _shape(r"SHOW\s+CREATE\s+DATABASE\s+" + IDENTIFIER),
        _action(ActionKind.SHOW_CREATE_DATABASE),
    ),
    RewriteRule(
        "show_index",
        _shape(r"SHOW\s+(?:INDEX|INDEXES|KEYS)\s+FROM\s+" + IDENTIFIER),
        _bound(LIST_INDEXES_SQL),
    ),
    RewriteRule("show_status", _shape(r"SHOW\s+STATUS"), _static(SERVER_STATUS_SQL)),
    RewriteRule(
        "show_variables",
        _shape(r"SHOW\s+(?:GLOBAL\s+)?VARIABLES"),
        _static(SERVER_VARIABLES_SQL),
    ),
    RewriteRule(
        "show_variables_like",
        _shape(r"SHOW\s+(?:GLOBAL\s+)?VARIABLES\s+LIKE\s+" + QUOTED_LITERAL),
        _variables_like,
    ),
    RewriteRule(
        "show_processlist",
        _shape(r"SHOW\s+(?:FULL\s+)?PROCESSLIST"),
        _static(PROCESSLIST_SQL),
    ),
    RewriteRule("show_grants", _shape(r"SHOW\s+GRANTS"), _static(GRANTS_SQL)),
    RewriteRule(
        "show_grants_for",
        _shape(r"SHOW\s+GRANTS\s+FOR\s+'?" + IDENTIFIER + r"'?(?:@'?[^']*'?)?"),
        _bound(GRANTS_FOR_SQL),
    ),
    RewriteRule("show_table_status", _shape(r"SHOW\s+TABLE\s+STATUS"), _static(TABLE_STATUS_SQL)),
    RewriteRule("show_schemas", _shape(r"SHOW\s+SCHEMAS"), _static(LIST_SCHEMAS_SQL)),
    RewriteRule("show_triggers", _shape(r"SHOW\s+TRIGGERS"), _static(LIST_TRIGGERS_SQL)),
    RewriteRule(
        "show_routine_status",
        _shape(r"SHOW\s+(?:FUNCTION|PROCEDURE)\s+STATUS"),
        _static(LIST_ROUTINES_SQL),
    ),
    RewriteRule("use_database", _shape(r"USE\s+" + IDENTIFIER), _action(ActionKind.USE_DATABASE)),
    RewriteRule("show_engines", _shape(r"SHOW\s+ENGINES"), _static(ENGINES_SQL)),
    RewriteRule(
        "show_charset",
        _shape(r"SHOW\s+(?:CHARSET|CHARACTER\s+SET)"),
        _static(CHARSET_SQL),
    ),
    RewriteRule("show_collation", _shape(r"SHOW\s+COLLATION"), _static(COLLATION_SQL)),
    RewriteRule(
        "show_warnings",
        _shape(r"SHOW\s+(?:WARNINGS|ERRORS)"),
        _static(WARNINGS_SQL),
    ),
    RewriteRule(
        "select_database",
        _shape(r"SELECT\s+DATABASE\(\)"),
        _static('SELECT current_database() AS "database()"'),
    ),
    RewriteRule(
        "select_version",
        _shape(r"SELECT\s+VERSION\(\)"),
        _static('SELECT version() AS "version()"'),
    ),
    RewriteRule(
        "select_user",
        _shape(r"SELECT\s+(?:CURRENT_)?USER\(\)"),
        _static('SELECT current_user AS "user()"'),
    ),
    RewriteRule(
        "select_now",
        _shape(r"SELECT\s+NOW\(\)"),
        _static('SELECT now() AS "now()"'),
    ),
]


def match_rules(rules: List[RewriteRule], command: str) -> Optional[TranslationOutcome]:
    """Apply ``rules`` in order and return the first outcome produced."""
    for rule in rules:
        outcome = rule.apply(command)
        if outcome is not None:
            return outcome
    return None
