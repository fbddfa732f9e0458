"""Catalog queries that synthesize CREATE statements on PostgreSQL.

PostgreSQL has no SHOW CREATE, so each query assembles the DDL text itself
and returns it as a single string column.
"""

from ..dialect import Dialect
from ..translator.rules import quote_identifier

CREATE_TABLE_SQL = """SELECT
    'CREATE TABLE ' || table_name || ' (' || E'\\n' ||
    string_agg(
        '  ' || column_name || ' ' ||
        CASE
            WHEN data_type = 'character varying' AND character_maximum_length IS NOT NULL
                THEN 'VARCHAR(' || character_maximum_length || ')'
            WHEN data_type = 'character' AND character_maximum_length IS NOT NULL
                THEN 'CHAR(' || character_maximum_length || ')'
            WHEN data_type = 'numeric' AND numeric_precision IS NOT NULL
                THEN 'NUMERIC(' || numeric_precision || ',' || COALESCE(numeric_scale, 0) || ')'
            ELSE UPPER(data_type)
        END ||
        CASE WHEN is_nullable = 'NO' THEN ' NOT NULL' ELSE '' END ||
        CASE WHEN column_default IS NOT NULL THEN ' DEFAULT ' || column_default ELSE '' END,
        ',' || E'\\n'
        ORDER BY ordinal_position
    ) || E'\\n);' AS "Create Table"
FROM information_schema.columns
WHERE table_schema = 'public' AND table_name = %s
GROUP BY table_name"""

CREATE_DATABASE_SQL = """SELECT
    'CREATE DATABASE ' || datname ||
    ' WITH OWNER = ' || pg_catalog.pg_get_userbyid(datdba) ||
    ' ENCODING = ''' || pg_encoding_to_char(encoding) || '''' ||
    CASE WHEN datcollate IS NOT NULL THEN ' LC_COLLATE = ''' || datcollate || '''' ELSE '' END ||
    CASE WHEN datctype IS NOT NULL THEN ' LC_CTYPE = ''' || datctype || '''' ELSE '' END ||
    ';' AS "Create Database"
FROM pg_database
WHERE datname = %s"""


def native_show_create(dialect: Dialect, object_type: str, name: str) -> str:
    """Build the backend's own SHOW CREATE statement for ``name``."""
    quoted = quote_identifier(name, dialect=dialect.sqlglot_dialect)
    return f"SHOW CREATE {object_type} {quoted}"
