"""Load a nodelist file into the nodelist table.

    select file -> drop index -> parse + insert each entry -> rebuild index

The loader appends rows; clearing old data is done beforehand with
schema.ensure_fresh_table() or schema.remove_domain(). A failed insert aborts
the load. SQLite keeps the rows inserted so far; on Pg the aborted
transaction is rolled back, so the table is left as it was before the load.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ftndb import schema
from ftndb.db import Engine, driver_errors, execute
from ftndb.errors import FileOpenError, MalformedLineError, StatementExecutionError
from ftndb.models import DEFAULT_DOMAIN
from ftndb.parser import NodelistParser
from ftndb.selector import nodelist_descriptor

if TYPE_CHECKING:
    from ftndb.db import Connection
    from ftndb.models import NodelistFile

logger = logging.getLogger("ftndb.loader")

# Nodelists are 7-bit text; latin-1 decodes any stray high byte without failing.
_ENCODING = "latin-1"


@dataclass
class LoadResult:
    source: str
    loaded: int = 0         # rows inserted
    filtered: int = 0       # entries outside the requested zone
    malformed: int = 0      # lines rejected by the parser
    skipped: int = 0        # comments, blank lines, EOF marker


def load_nodelist(
    conn: Connection,
    table: str,
    path: Path | str,
    domain: str = DEFAULT_DOMAIN,
    zone: int | None = None,
    *,
    engine: Engine = Engine.SQLITE,
    descriptor: NodelistFile | None = None,
    strict: bool = False,
) -> LoadResult:
    """Parse the nodelist at path and insert its entries into table.

    zone: when set, only entries of that zone are inserted.
    strict: abort on the first malformed line instead of skipping it.
    """
    path = Path(path)
    desc = descriptor or nodelist_descriptor(path)
    try:
        fh = path.open(encoding=_ENCODING, newline="")
    except OSError as exc:
        msg = f"cannot open nodelist {path}: {exc}"
        raise FileOpenError(msg) from exc

    parser = NodelistParser(
        domain=domain,
        ftnyear=desc.year,
        yearday=desc.yearday,
        source=path.name,
    )
    result = LoadResult(source=path.name)

    with fh:
        logger.info("loading %s into %s (domain=%s zone=%s)", path, table, domain, zone if zone is not None else "all")
        try:
            insert_sql = schema.insert_statement(table, engine)
            execute(conn, engine, schema.drop_index_statement(table))
            for line in fh:
                try:
                    record = parser.parse(line)
                except MalformedLineError as exc:
                    if strict:
                        raise
                    logger.warning("%s: %s", path.name, exc)
                    result.malformed += 1
                    continue
                if record is None:
                    result.skipped += 1
                    continue
                if zone is not None and record.zone != zone:
                    result.filtered += 1
                    continue
                execute(conn, engine, insert_sql, record.insert_values())
                logger.debug("inserted %s %s", record.address, record.name)
                result.loaded += 1
        except Exception as exc:
            _end_failed_load(conn, engine, exc)
            raise
        conn.commit()

    schema.create_index(conn, table, engine)
    logger.info(
        "loaded %d rows from %s (%d filtered, %d malformed, %d skipped)",
        result.loaded, path.name, result.filtered, result.malformed, result.skipped,
    )
    return result


def _end_failed_load(conn: Connection, engine: Engine, exc: Exception) -> None:
    """Settle the transaction of a failed load; exc is re-raised by the caller.

    SQLite keeps the rows inserted before the failure. A failed statement
    leaves a PostgreSQL transaction aborted, so on Pg the whole load is
    rolled back and the index drop is undone with it.
    """
    try:
        if engine is Engine.PG and isinstance(exc, StatementExecutionError):
            conn.rollback()
            logger.warning("load rolled back after failed statement")
        else:
            conn.commit()
    except driver_errors(engine) as end_exc:
        logger.error("could not finish failed load: %s", end_exc)
