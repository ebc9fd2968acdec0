import logging
import sqlite3

import pytest

from ftndb import schema
from ftndb.db import Engine
from ftndb.errors import ConfigUnavailable, StatementExecutionError
from ftndb.models import NodeRecord


def test_engine_parse_aliases():
    assert Engine.parse("SQLite") is Engine.SQLITE
    assert Engine.parse("pg") is Engine.PG
    assert Engine.parse(" PostgreSQL ") is Engine.PG
    with pytest.raises(ConfigUnavailable):
        Engine.parse("Oracle")


def test_primary_key_per_engine():
    assert "id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL" in schema.create_table_statement("T", Engine.SQLITE)
    pg = schema.create_table_statement("T", Engine.PG)
    assert "id SERIAL PRIMARY KEY NOT NULL" in pg
    assert "AUTOINCREMENT" not in pg


def test_statements_use_engine_placeholders():
    assert schema.select_net_statement("T", Engine.SQLITE).endswith(
        "FROM T WHERE zone = ? AND net = ? ORDER BY node ASC"
    )
    assert "domain = %s" in schema.delete_domain_statement("T", Engine.PG)
    assert schema.insert_statement("T", Engine.PG).count("%s") == len(schema.INSERT_COLUMNS)


def test_index_statement():
    assert schema.create_index_statement("Nodelist") == (
        "CREATE INDEX Nodelist_ftnnode ON Nodelist (zone,net,node,point,domain)"
    )
    assert schema.drop_index_statement("Nodelist") == "DROP INDEX IF EXISTS Nodelist_ftnnode"


def test_insert_values_match_columns():
    values = NodeRecord(type="Hub", zone=1, net=2, node=3).insert_values()
    assert len(values) == len(schema.INSERT_COLUMNS)
    assert dict(zip(schema.INSERT_COLUMNS, values))["node"] == 3


def test_normalize_table_name_replaces_dots_and_logs(caplog):
    with caplog.at_level(logging.INFO, logger="ftndb.schema"):
        assert schema.normalize_table_name("fido.nodes") == "fido_nodes"
    assert "fido_nodes" in caplog.text


def test_normalize_table_name_unchanged_is_silent(caplog):
    with caplog.at_level(logging.INFO, logger="ftndb.schema"):
        assert schema.normalize_table_name("Nodelist") == "Nodelist"
    assert caplog.text == ""


def test_normalize_table_name_rejects_garbage():
    with pytest.raises(ValueError):
        schema.normalize_table_name("nodes; DROP TABLE x")


def test_ensure_fresh_table_twice_leaves_one_empty_table():
    c = sqlite3.connect(":memory:")
    schema.ensure_fresh_table(c, "Nodelist")
    c.execute(schema.insert_statement("Nodelist"), NodeRecord(type="", zone=1, net=1, node=1).insert_values())
    c.commit()
    schema.ensure_fresh_table(c, "Nodelist")
    tables = c.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='Nodelist'").fetchall()
    assert tables == [("Nodelist",)]
    assert c.execute("SELECT COUNT(*) FROM Nodelist").fetchone() == (0,)
    cols = [row[1] for row in c.execute("PRAGMA table_info(Nodelist)")]
    assert cols == ["id"] + [name for name, _ in schema.COLUMNS]


def test_defaults_filled_by_store(conn):
    conn.execute("INSERT INTO Nodelist (zone, net, node) VALUES (1, 2, 3)")
    row = conn.execute("SELECT type, point, phone, baud, flags, domain, source, updated FROM Nodelist").fetchone()
    assert row[:7] == ("", 0, "000-000-000-000", "300", " ", "fidonet", "local")
    assert row[7]


def test_index_create_and_drop(conn):
    schema.create_index(conn, "Nodelist")
    schema.create_index(conn, "Nodelist")
    names = [r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='index'")]
    assert "Nodelist_ftnnode" in names
    schema.drop_index(conn, "Nodelist")
    schema.drop_index(conn, "Nodelist")
    names = [r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='index'")]
    assert "Nodelist_ftnnode" not in names


def test_remove_domain(conn):
    stmt = schema.insert_statement("Nodelist")
    for domain, node in (("fidonet", 1), ("fidonet", 2), ("othernet", 1)):
        conn.execute(stmt, NodeRecord(type="", zone=1, net=1, node=node, domain=domain).insert_values())
    conn.commit()
    assert schema.remove_domain(conn, "Nodelist", "fidonet") == 2
    assert conn.execute("SELECT domain FROM Nodelist").fetchall() == [("othernet",)]


def test_driver_error_wrapped(conn):
    with pytest.raises(StatementExecutionError) as excinfo:
        schema.remove_domain(conn, "NoSuchTable", "fidonet")
    assert "NoSuchTable" in excinfo.value.statement
