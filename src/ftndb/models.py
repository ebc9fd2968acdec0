"""Data models for nodelist rows and nodelist files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

# Line types that define the hierarchy rather than a leaf node
ZONE = "Zone"
REGION = "Region"
HOST = "Host"

DEFAULT_DOMAIN = "fidonet"


@dataclass
class NodeRecord:
    """One parsed nodelist entry / one row of the nodelist table."""

    type: str
    zone: int
    net: int
    node: int
    point: int = 0
    region: int = 0
    name: str = ""
    location: str = ""
    sysop: str = ""
    phone: str = "000-000-000-000"
    baud: str = "300"
    flags: str = " "
    domain: str = DEFAULT_DOMAIN
    ftnyear: int = 0
    yearday: int = 0
    source: str = "local"
    updated: str | None = None      # set by the store on insert

    @property
    def address(self) -> str:
        """FTN address: zone:net/node, with .point when non-zero."""
        addr = f"{self.zone}:{self.net}/{self.node}"
        return f"{addr}.{self.point}" if self.point else addr

    def insert_values(self) -> tuple[Any, ...]:
        """Bound values in schema.INSERT_COLUMNS order."""
        return (
            self.type, self.zone, self.net, self.node, self.point, self.region,
            self.name, self.location, self.sysop, self.phone, self.baud,
            self.flags, self.domain, self.ftnyear, self.yearday, self.source,
        )

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> NodeRecord:
        return cls(
            type=row.get("type", ""),
            zone=int(row["zone"]),
            net=int(row["net"]),
            node=int(row["node"]),
            point=int(row.get("point", 0)),
            region=int(row.get("region", 0)),
            name=row.get("name", ""),
            location=row.get("location", ""),
            sysop=row.get("sysop", ""),
            phone=row.get("phone", ""),
            baud=str(row.get("baud", "")).strip(),
            flags=row.get("flags", " "),
            domain=row.get("domain", DEFAULT_DOMAIN),
            ftnyear=int(row.get("ftnyear", 0)),
            yearday=int(row.get("yearday", 0)),
            source=row.get("source", ""),
            updated=None if row.get("updated") is None else str(row["updated"]),
        )


@dataclass(frozen=True)
class NodelistFile:
    """A nodelist file and the publication date stamped on its rows."""

    path: Path
    year: int
    yearday: int

    @property
    def name(self) -> str:
        return self.path.name
