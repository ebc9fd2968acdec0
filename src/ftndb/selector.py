"""Pick the nodelist file to load.

Nodelists are published as <basename>.<ddd>, where ddd is the day of the
year of publication (nodelist.290). The newest one has the largest suffix.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path

from ftndb.errors import NodelistFileNotFound
from ftndb.models import NodelistFile

logger = logging.getLogger("ftndb.selector")

_SUFFIX_RE = re.compile(r"\.(\d{3})$")


def _candidate_re(basename: str) -> re.Pattern[str]:
    return re.compile(rf"^{re.escape(basename)}\.\d{{3}}$", re.IGNORECASE)


def find_nodelists(directory: Path | str, basename: str) -> list[Path]:
    """All <basename>.<ddd> files in directory, newest (highest suffix) first."""
    pattern = _candidate_re(basename)
    try:
        entries = list(Path(directory).iterdir())
    except OSError as exc:
        msg = f"cannot list nodelist directory {directory}: {exc}"
        raise NodelistFileNotFound(msg) from exc
    names = [p.name for p in entries if p.is_file() and pattern.match(p.name)]
    names.sort(reverse=True)
    return [Path(directory) / n for n in names]


def select_nodelist(directory: Path | str, basename: str, *, exact: bool = False) -> Path:
    """Return the nodelist file to load.

    exact=True returns directory/basename as given; a missing file is reported
    when the loader opens it. Otherwise the newest <basename>.<ddd> is chosen.
    """
    if exact:
        return Path(directory) / basename

    candidates = find_nodelists(directory, basename)
    if not candidates:
        msg = f"no {basename}.### file found in {directory}"
        raise NodelistFileNotFound(msg)
    if len(candidates) > 1:
        logger.info(
            "%d nodelist files match %s.###; using %s (also found: %s)",
            len(candidates), basename, candidates[0].name,
            ", ".join(p.name for p in candidates[1:]),
        )
    return candidates[0]


def nodelist_descriptor(path: Path | str) -> NodelistFile:
    """Publication stamp for a nodelist file.

    yearday comes from the three-digit suffix (0 when there is none); year is
    the calendar year of the file's modification time.
    """
    path = Path(path)
    m = _SUFFIX_RE.search(path.name)
    yearday = int(m.group(1)) if m else 0
    try:
        year = datetime.fromtimestamp(path.stat().st_mtime).year
    except OSError:
        year = 0
    return NodelistFile(path=path, year=year, yearday=yearday)
