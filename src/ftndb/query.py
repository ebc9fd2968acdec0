"""Read nodes back out of the nodelist table and format them as a report."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from ftndb import schema
from ftndb.db import Engine, execute
from ftndb.errors import NoOutputTarget
from ftndb.models import NodeRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from ftndb.db import Connection

_LABEL_WIDTH = 10
_RULE = "-" * 60


def list_nodes(
    conn: Connection,
    table: str,
    zone: int,
    net: int,
    *,
    engine: Engine = Engine.SQLITE,
) -> Iterator[NodeRecord]:
    """Yield the entries of zone:net ordered by node number.

    The statement runs on the first next(); rows are fetched as they are consumed.
    """
    cur = execute(conn, engine, schema.select_net_statement(table, engine), (zone, net))
    try:
        columns = [d[0] for d in cur.description]
        for row in cur:
            yield NodeRecord.from_row(dict(zip(columns, row, strict=True)))
    finally:
        cur.close()


def count_by_domain(
    conn: Connection,
    table: str,
    *,
    engine: Engine = Engine.SQLITE,
) -> list[tuple[str, int, int]]:
    """(domain, zone, rows) for every domain/zone present in table."""
    cur = execute(
        conn, engine,
        f"SELECT domain, zone, COUNT(*) FROM {table} GROUP BY domain, zone ORDER BY domain, zone",
    )
    try:
        return [(str(d), int(z), int(n)) for d, z, n in cur.fetchall()]
    finally:
        cur.close()


def render_node(record: NodeRecord) -> str:
    """One labeled block per node, fields in a fixed order."""
    fields = (
        ("Node", str(record.node)),
        ("Name", record.name),
        ("Sysop", record.sysop),
        ("Location", record.location),
        ("Phone", record.phone),
        ("Baud", record.baud),
        ("Flags", record.flags.strip()),
    )
    return "\n".join(f"{label + ':':<{_LABEL_WIDTH}}{value}" for label, value in fields) + "\n"


def render_header(zone: int, net: int) -> str:
    return f"Zone {zone} Net {net}\n{_RULE}\n"


def write_report(records: Iterable[NodeRecord], out: TextIO | None, zone: int, net: int) -> int:
    """Write the zone/net header and one block per record to out. Returns the count.

    out is checked before records is touched, so a lazy list_nodes() never
    reaches the database when there is nowhere to write.
    """
    if out is None:
        msg = "no output target for nodelist report"
        raise NoOutputTarget(msg)

    out.write(render_header(zone, net))
    count = 0
    for record in records:
        if count:
            out.write("\n")
        out.write(render_node(record))
        count += 1
    return count
