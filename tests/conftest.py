"""Shared fixtures: an in-memory SQLite nodelist table and sample nodelists."""

from __future__ import annotations

import sqlite3

import pytest

from ftndb import schema
from ftndb.db import Engine

TABLE = "Nodelist"

SAMPLE_NODELIST = (
    ";A FidoNet Nodelist for Friday, October 17, 2025 -- Day number 290 : 04113\r\n"
    ";S\r\n"
    "Zone,1,North_America,Ottawa_ON,Joe_Sysop,1-613-555-1212,9600,CM,XA,IBN\r\n"
    "Region,10,California,Los_Angeles_CA,Bob_Smith,-Unpublished-,300,CM,INA:example.org,IBN\r\n"
    "Host,103,LA_Net,Los_Angeles_CA,Al_Host,-Unpublished-,300,CM,IBN\r\n"
    ",705,Some_BBS,Pasadena_CA,Carol_Jones,-Unpublished-,300,CM,IBN\r\n"
    "Hub,200,Hub_BBS,Los_Angeles_CA,Dan_Hub,-Unpublished-,300,CM\r\n"
    "Pvt,3,Private_BBS,Los_Angeles_CA,Eve_Pvt,-Unpublished-,300,\r\n"
    "Zone,2,Europe,Amsterdam,Zed_Coord,-Unpublished-,300,CM,IBN\r\n"
    "Host,280,Netherlands,Amsterdam,Henk,-Unpublished-,300,CM\r\n"
    ",5,Dutch_BBS,Utrecht,Piet,31-30-5551234,33600,CM,V34\r\n"
    "Down,1,Old_BBS,Utrecht,Klaas,-Unpublished-,300,\r\n"
    "\x1a"
)


@pytest.fixture
def conn():
    c = sqlite3.connect(":memory:")
    schema.ensure_fresh_table(c, TABLE, Engine.SQLITE)
    yield c
    c.close()


@pytest.fixture
def nodelist_dir(tmp_path):
    d = tmp_path / "nodelist"
    d.mkdir()
    return d


@pytest.fixture
def sample_nodelist(nodelist_dir):
    path = nodelist_dir / "nodelist.290"
    path.write_bytes(SAMPLE_NODELIST.encode("ascii"))
    return path


def fetch_rows(c: sqlite3.Connection, table: str = TABLE) -> list[dict]:
    cur = c.execute(f"SELECT * FROM {table} ORDER BY id")
    cols = [d[0] for d in cur.description]
    return [dict(zip(cols, row)) for row in cur.fetchall()]
