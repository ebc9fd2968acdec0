"""Logging setup shared by the ftndb commands.

Modules log through logging.getLogger("ftndb.<module>"); this only decides
where records go.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ftndb.config import LogConfig

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(log_cfg: LogConfig, *, verbose: bool = False) -> None:
    """Send ftndb log records to the configured file, or stderr."""
    level = logging.DEBUG if verbose else logging.getLevelName(log_cfg.level)
    if not isinstance(level, int):
        level = logging.INFO
    if log_cfg.file is not None:
        log_cfg.file.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(level=level, format=_FORMAT, filename=str(log_cfg.file), force=True)
    else:
        logging.basicConfig(level=level, format=_FORMAT, force=True)
