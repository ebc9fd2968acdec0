"""Nodelist line parser.

A nodelist line has eight comma separated fields:

    type,number,name,location,sysop,phone,baud,flags

where flags is everything after the seventh comma (it contains commas
itself). Zone, Region and Host lines open a new part of the hierarchy; every
other line is a node inside the most recent one:

    Zone,1,North_America,...        -> 1:1/0
    Region,10,California,...        -> 1:10/0   region 10
    Host,103,Los_Angeles,...        -> 1:103/0  region 10
    ,705,Some_BBS,...               -> 1:103/705
    Hub,200,Hub_Name,...            -> 1:103/200

Comment lines (;) and the SUB end-of-file marker are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass

from ftndb.errors import MalformedLineError
from ftndb.models import DEFAULT_DOMAIN, HOST, REGION, ZONE, NodeRecord

_EOF_MARKER = "\x1a"   # ^Z
# A SUB may end the last line when no newline precedes it
_LINE_END = "\r\n" + _EOF_MARKER
_FIELD_COUNT = 8


@dataclass
class ParserState:
    """Hierarchy carried from line to line."""

    zone: int = 1
    net: int = 1
    region: int = 0


class NodelistParser:
    """Stateful parser: each line is read in the context of the lines before it."""

    def __init__(
        self,
        state: ParserState | None = None,
        *,
        domain: str = DEFAULT_DOMAIN,
        ftnyear: int = 0,
        yearday: int = 0,
        source: str = "local",
    ) -> None:
        self.state = state if state is not None else ParserState()
        self.domain = domain
        self.ftnyear = ftnyear
        self.yearday = yearday
        self.source = source
        self.line_number = 0

    @staticmethod
    def is_skip(line: str) -> bool:
        return not line.strip() or line.startswith(";") or line.startswith(_EOF_MARKER)

    def parse(self, raw_line: str) -> NodeRecord | None:
        """Parse one line. Returns None for lines that carry no entry.

        Raises MalformedLineError when the number field is not a
        non-negative integer; the carried state is left as it was.
        """
        self.line_number += 1
        if self.is_skip(raw_line):
            return None

        line = raw_line.rstrip(_LINE_END)
        fields = line.split(",", _FIELD_COUNT - 1)
        fields += [""] * (_FIELD_COUNT - len(fields))
        kind, number_text, name, location, sysop, phone, baud, flags = fields

        kind = kind.strip()
        number_text = number_text.strip()
        if not (number_text.isascii() and number_text.isdigit()):
            raise MalformedLineError(self.line_number, line)
        number = int(number_text)

        st = self.state
        if kind == ZONE:
            st.zone = number
            st.net = number
            node = 0
        elif kind == REGION:
            st.region = number
            st.net = number
            node = 0
        elif kind == HOST:
            st.net = number
            node = 0
        else:
            node = number

        return NodeRecord(
            type=kind,
            zone=st.zone,
            net=st.net,
            node=node,
            point=0,
            region=st.region,
            name=name,
            location=location,
            sysop=sysop,
            phone=phone,
            baud=baud,
            flags=flags or " ",
            domain=self.domain,
            ftnyear=self.ftnyear,
            yearday=self.yearday,
            source=self.source,
        )
