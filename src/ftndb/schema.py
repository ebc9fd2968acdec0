"""Nodelist table definition and the DDL/DML built from it.

Statement builders are pure functions returning SQL text; the operations at
the bottom run them on an open connection:

    ensure_fresh_table(conn, table, engine)   # drop-then-create
    create_index(conn, table, engine)         # composite ftnnode index
    remove_domain(conn, table, domain, engine)

Table names cannot be bound as parameters, so every name goes through
normalize_table_name() before it is interpolated.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from ftndb.db import Engine, execute

if TYPE_CHECKING:
    from ftndb.db import Connection

logger = logging.getLogger("ftndb.schema")

DEFAULT_TABLE = "Nodelist"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Primary key column per engine; the rest of the table is engine-neutral.
_ID_COLUMN = {
    Engine.SQLITE: "id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL",
    Engine.PG: "id SERIAL PRIMARY KEY NOT NULL",
}

COLUMNS: tuple[tuple[str, str], ...] = (
    ("type",     "VARCHAR(6) DEFAULT '' NOT NULL"),
    ("zone",     "SMALLINT DEFAULT 1 NOT NULL"),
    ("net",      "SMALLINT DEFAULT 1 NOT NULL"),
    ("node",     "SMALLINT DEFAULT 1 NOT NULL"),
    ("point",    "SMALLINT DEFAULT 0 NOT NULL"),
    ("region",   "SMALLINT DEFAULT 0 NOT NULL"),
    ("name",     "VARCHAR(48) DEFAULT '' NOT NULL"),
    ("location", "VARCHAR(48) DEFAULT '' NOT NULL"),
    ("sysop",    "VARCHAR(48) DEFAULT '' NOT NULL"),
    ("phone",    "VARCHAR(32) DEFAULT '000-000-000-000' NOT NULL"),
    ("baud",     "CHAR(6) DEFAULT '300' NOT NULL"),
    ("flags",    "VARCHAR(128) DEFAULT ' ' NOT NULL"),
    ("domain",   "VARCHAR(8) DEFAULT 'fidonet' NOT NULL"),
    ("ftnyear",  "SMALLINT DEFAULT 0 NOT NULL"),
    ("yearday",  "SMALLINT DEFAULT 0 NOT NULL"),
    ("source",   "VARCHAR(16) DEFAULT 'local' NOT NULL"),
    ("updated",  "TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL"),
)

# Columns bound on INSERT: id and updated are assigned by the store.
INSERT_COLUMNS: tuple[str, ...] = tuple(name for name, _ in COLUMNS if name != "updated")

SELECT_COLUMNS: tuple[str, ...] = tuple(name for name, _ in COLUMNS)

# Shared by the loader and the admin commands; its (zone, net) prefix serves list queries.
INDEX_COLUMNS: tuple[str, ...] = ("zone", "net", "node", "point", "domain")


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


def normalize_table_name(name: str) -> str:
    """Replace '.' with '_' (engines reject dots in bare table names)."""
    normalized = name.replace(".", "_")
    if normalized != name:
        logger.info("table name %r changed to %r", name, normalized)
    if not _IDENTIFIER_RE.match(normalized):
        msg = f"invalid table name: {name!r}"
        raise ValueError(msg)
    return normalized


def index_name(table: str) -> str:
    return f"{table}_ftnnode"


# ---------------------------------------------------------------------------
# Statement builders
# ---------------------------------------------------------------------------


def create_table_statement(table: str, engine: Engine = Engine.SQLITE) -> str:
    cols = [_ID_COLUMN[engine]] + [f"{name} {ddl}" for name, ddl in COLUMNS]
    return f"CREATE TABLE {table} ({', '.join(cols)})"


def create_index_statement(table: str, columns: tuple[str, ...] = INDEX_COLUMNS) -> str:
    return f"CREATE INDEX {index_name(table)} ON {table} ({','.join(columns)})"


def drop_table_statement(table: str) -> str:
    return f"DROP TABLE IF EXISTS {table}"


def drop_index_statement(table: str) -> str:
    return f"DROP INDEX IF EXISTS {index_name(table)}"


def insert_statement(table: str, engine: Engine = Engine.SQLITE) -> str:
    marks = ", ".join(engine.placeholder for _ in INSERT_COLUMNS)
    return f"INSERT INTO {table} ({', '.join(INSERT_COLUMNS)}) VALUES ({marks})"


def delete_domain_statement(table: str, engine: Engine = Engine.SQLITE) -> str:
    return f"DELETE FROM {table} WHERE domain = {engine.placeholder}"


def select_net_statement(table: str, engine: Engine = Engine.SQLITE) -> str:
    p = engine.placeholder
    return (
        f"SELECT {', '.join(SELECT_COLUMNS)} FROM {table} "
        f"WHERE zone = {p} AND net = {p} ORDER BY node ASC"
    )


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def ensure_fresh_table(conn: Connection, table: str, engine: Engine = Engine.SQLITE) -> None:
    """Drop the table if present, then create it empty with the current schema."""
    execute(conn, engine, drop_table_statement(table))
    execute(conn, engine, create_table_statement(table, engine))
    conn.commit()
    logger.info("created table %s (%s)", table, engine.value)


def drop_table(conn: Connection, table: str, engine: Engine = Engine.SQLITE) -> None:
    execute(conn, engine, drop_table_statement(table))
    conn.commit()
    logger.info("dropped table %s", table)


def create_index(conn: Connection, table: str, engine: Engine = Engine.SQLITE) -> None:
    """(Re)build the composite ftnnode index on table."""
    execute(conn, engine, drop_index_statement(table))
    execute(conn, engine, create_index_statement(table))
    conn.commit()
    logger.info("created index %s on %s", index_name(table), table)


def drop_index(conn: Connection, table: str, engine: Engine = Engine.SQLITE) -> None:
    execute(conn, engine, drop_index_statement(table))
    conn.commit()


def remove_domain(conn: Connection, table: str, domain: str, engine: Engine = Engine.SQLITE) -> int:
    """Delete every row of an FTN domain. Returns the number of rows removed."""
    cur = execute(conn, engine, delete_domain_statement(table, engine), (domain,))
    conn.commit()
    removed = cur.rowcount if cur.rowcount is not None and cur.rowcount >= 0 else 0
    logger.info("removed %d %s rows from %s", removed, domain, table)
    return removed
