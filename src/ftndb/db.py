"""DB connection: sqlite3 (default) or PostgreSQL via psycopg."""

from __future__ import annotations

import enum
import logging
import sqlite3
from typing import TYPE_CHECKING, Any

from ftndb.errors import ConfigUnavailable, StatementExecutionError, StoreConnectionError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ftndb.config import FTNDBConfig

logger = logging.getLogger("ftndb.db")

# psycopg connections are driven through the same subset: execute/commit/close.
Connection = sqlite3.Connection


class Engine(enum.Enum):
    """Supported database engine families."""

    SQLITE = "SQLite"
    PG = "Pg"

    @classmethod
    def parse(cls, text: str) -> Engine:
        """Map a configured database type (case-insensitive) to an Engine."""
        engine = _ENGINE_ALIASES.get(text.strip().lower())
        if engine is None:
            msg = f"unsupported database type: {text!r} (expected SQLite or Pg)"
            raise ConfigUnavailable(msg)
        return engine

    @property
    def placeholder(self) -> str:
        return _PLACEHOLDER[self]


_ENGINE_ALIASES = {
    "sqlite": Engine.SQLITE,
    "sqlite3": Engine.SQLITE,
    "pg": Engine.PG,
    "postgres": Engine.PG,
    "postgresql": Engine.PG,
}

_PLACEHOLDER = {
    Engine.SQLITE: "?",
    Engine.PG: "%s",
}


def driver_errors(engine: Engine) -> tuple[type[Exception], ...]:
    if engine is Engine.PG:
        import psycopg
        return (psycopg.Error,)
    return (sqlite3.Error,)


def connect(cfg: FTNDBConfig) -> Connection:
    """Return an open connection for the configured database.

    SQLite opens (creating if needed) the file at cfg.database.path.
    Pg connects with psycopg (install with: pip install 'ftndb[pg]').
    """
    db = cfg.database
    if db.engine is Engine.PG:
        return _connect_pg(cfg)

    target = db.name
    if target != ":memory:":
        db.path.parent.mkdir(parents=True, exist_ok=True)
        target = str(db.path)
    try:
        conn = sqlite3.connect(target)
    except sqlite3.Error as exc:
        msg = f"cannot open SQLite database {db.path}: {exc}"
        raise StoreConnectionError(msg) from exc
    logger.debug("opened SQLite database %s", db.path)
    return conn


def _connect_pg(cfg: FTNDBConfig) -> Connection:
    db = cfg.database
    try:
        import psycopg  # type: ignore[import-not-found]
    except ImportError as exc:
        msg = "database type Pg needs psycopg (pip install 'ftndb[pg]')"
        raise StoreConnectionError(msg) from exc

    params: dict[str, Any] = {"dbname": db.name}
    if db.host:
        params["host"] = db.host
        params["port"] = db.port
    if db.user:
        params["user"] = db.user
    if db.password:
        params["password"] = db.password
    try:
        conn: Connection = psycopg.connect(**params)
    except psycopg.Error as exc:
        msg = f"cannot connect to PostgreSQL database {db.name!r}: {exc}"
        raise StoreConnectionError(msg) from exc
    logger.debug("connected to PostgreSQL database %s", db.name)
    return conn


def execute(
    conn: Connection,
    engine: Engine,
    statement: str,
    params: Sequence[Any] = (),
) -> sqlite3.Cursor:
    """Run one statement, turning driver errors into StatementExecutionError."""
    try:
        return conn.execute(statement, tuple(params))
    except driver_errors(engine) as exc:
        raise StatementExecutionError(statement, exc) from exc
