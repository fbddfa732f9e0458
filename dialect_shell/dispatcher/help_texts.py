"""Static help screens printed by the shell."""

GENERAL_HELP = r"""
dshell - MySQL-style shell for MySQL and PostgreSQL
===================================================

General Commands:
  help, \?          Show this help message
  quit, exit, \q    Exit the shell
  \x                Toggle expanded output mode

MySQL-style Commands (work on both MySQL and PostgreSQL):
  SHOW DATABASES;                   List all databases
  SHOW TABLES;                      List tables in current database
  SHOW TABLES FROM db;              List tables in specified database
  SHOW FULL TABLES;                 List tables with type
  SHOW COLUMNS FROM table;          Show table columns
  DESC table;                       Describe table structure
  DESCRIBE table;                   Same as DESC
  SHOW CREATE TABLE table;          Show CREATE TABLE statement
  SHOW INDEX FROM table;            Show table indexes
  SHOW PROCESSLIST;                 Show active connections
  SHOW STATUS;                      Show server status
  SHOW VARIABLES;                   Show server variables
  SHOW VARIABLES LIKE 'pattern';    Show matching variables
  SHOW GRANTS;                      Show current user grants
  SHOW GRANTS FOR user;             Show grants for user
  SHOW TABLE STATUS;                Show table status info
  SHOW TRIGGERS;                    Show triggers
  SHOW FUNCTION STATUS;             Show functions
  SHOW ENGINES;                     Show storage engines
  SHOW CHARSET;                     Show character sets
  SHOW COLLATION;                   Show collations
  USE database;                     Switch to database

PostgreSQL Backslash Commands (also supported):
  \l, \list         List databases
  \dt               List tables
  \dt+              List tables with size
  \d                List all relations
  \d table          Describe table
  \di               List indexes
  \dv               List views
  \df               List functions
  \du               List users/roles
  \dn               List schemas
  \c database       Connect to database

Standard SQL:
  SELECT, INSERT, UPDATE, DELETE, CREATE, DROP, ALTER, etc.

When connected to PostgreSQL, MySQL-style commands are translated
to their PostgreSQL equivalents.
"""

SHOW_HELP = """
SHOW Command Help
=================

Database and Schema:
  SHOW DATABASES;                   List all databases
  SHOW SCHEMAS;                     List all schemas

Tables and Structure:
  SHOW TABLES;                      List tables in current database
  SHOW TABLES FROM db;              List tables in specified database
  SHOW FULL TABLES;                 List tables with type
  SHOW TABLE STATUS;                Show table status info

Column and Index Information:
  SHOW COLUMNS FROM table;          Show table columns
  SHOW FULL COLUMNS FROM table;     Show detailed column info
  SHOW INDEX FROM table;            Show table indexes
  SHOW CREATE TABLE table;          Show CREATE TABLE statement

Server Information:
  SHOW STATUS;                      Show server status
  SHOW VARIABLES;                   Show server variables
  SHOW VARIABLES LIKE 'pattern';    Show matching variables
  SHOW PROCESSLIST;                 Show active connections

User and Security:
  SHOW GRANTS;                      Show current user grants
  SHOW GRANTS FOR user;             Show grants for user

Other:
  SHOW TRIGGERS;                    Show triggers
  SHOW FUNCTION STATUS;             Show functions
  SHOW ENGINES;                     Show storage engines
  SHOW CHARSET;                     Show character sets
  SHOW COLLATION;                   Show collations

Use 'SHOW <command> --help' for help on one command,
for example SHOW CREATE --help or SHOW TABLES --help.
"""

SHOW_CREATE_HELP = """
SHOW CREATE Command Help
========================

SHOW CREATE TABLE table_name;
SHOW CREATE DATABASE database_name;

  SHOW CREATE TABLE prints the CREATE TABLE statement for a table.
  SHOW CREATE DATABASE prints the CREATE DATABASE statement for a database.

Examples:
  SHOW CREATE TABLE users;
  SHOW CREATE DATABASE mydb;

On PostgreSQL the statement is generated from the system catalogs.
"""

SHOW_TABLES_HELP = """
SHOW TABLES Command Help
========================

SHOW TABLES;                      List tables in current database
SHOW TABLES FROM database_name;   List tables in specified database
SHOW FULL TABLES;                 List tables with type information

Examples:
  SHOW TABLES;
  SHOW TABLES FROM mydb;
  SHOW FULL TABLES;

On PostgreSQL, SHOW TABLES FROM lists the current database.
"""

SHOW_COLUMNS_HELP = """
SHOW COLUMNS Command Help
=========================

SHOW COLUMNS FROM table_name;
SHOW FULL COLUMNS FROM table_name;
DESC table_name;
DESCRIBE table_name;

  SHOW COLUMNS FROM shows name, type, null, key, default and extra.
  SHOW FULL COLUMNS FROM adds collation, privileges and comment.
  DESC and DESCRIBE are shorthand for SHOW COLUMNS FROM.

Examples:
  SHOW COLUMNS FROM users;
  SHOW FULL COLUMNS FROM products;
  DESC categories;
"""
