"""Fidonet/FTN nodelist database: nodelist files loaded into an SQL table.

Load:
    path = select_nodelist(directory, "nodelist")        # newest nodelist.###
    ensure_fresh_table(conn, "Nodelist", Engine.SQLITE)  # drop-then-create
    load_nodelist(conn, "Nodelist", path, domain="fidonet")

Query:
    write_report(list_nodes(conn, "Nodelist", zone=2, net=280), sys.stdout, 2, 280)

Table layout (one row per nodelist entry):
    id, type, zone, net, node, point, region, name, location, sysop,
    phone, baud, flags, domain, ftnyear, yearday, source, updated
    index <table>_ftnnode on (zone, net, node, point, domain)
"""

from ftndb.config import FTNDBConfig, init_config, load_config
from ftndb.db import Engine, connect
from ftndb.loader import LoadResult, load_nodelist
from ftndb.models import NodelistFile, NodeRecord
from ftndb.parser import NodelistParser, ParserState
from ftndb.query import list_nodes, render_node, write_report
from ftndb.schema import ensure_fresh_table
from ftndb.selector import nodelist_descriptor, select_nodelist

__all__ = [
    "Engine",
    "FTNDBConfig",
    "LoadResult",
    "NodeRecord",
    "NodelistFile",
    "NodelistParser",
    "ParserState",
    "connect",
    "ensure_fresh_table",
    "init_config",
    "list_nodes",
    "load_config",
    "load_nodelist",
    "nodelist_descriptor",
    "render_node",
    "select_nodelist",
    "write_report",
]
