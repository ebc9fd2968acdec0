"""FTNDBConfig: settings for the nodelist database tools.

Default layout (all relative to the directory holding ftndb.toml):

    ftndb.toml            # settings
    .env                  # optional: FTNDB_DB_USER, FTNDB_DB_PASSWORD (gitignore this)
    ftndb.sqlite          # default SQLite database

ftndb.toml example:

    [database]
    type = "SQLite"         # or "Pg"
    name = "ftndb.sqlite"   # SQLite file, or PostgreSQL database name
    host = ""
    port = 5432
    user = ""
    password = ""

    [nodelist]
    directory = "."
    basename = "nodelist"
    domain = "fidonet"
    table = "Nodelist"

    [log]
    file = ""               # empty = stderr
    level = "INFO"
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ftndb.db import Engine
from ftndb.errors import ConfigUnavailable

_CONFIG_FILENAME = "ftndb.toml"
_DEFAULT_DB_NAME = "ftndb.sqlite"
_DEFAULT_BASENAME = "nodelist"
_DEFAULT_DOMAIN = "fidonet"
_DEFAULT_TABLE = "Nodelist"


@dataclass
class DatabaseConfig:
    engine: Engine = Engine.SQLITE
    name: str = _DEFAULT_DB_NAME
    host: str = ""
    port: int = 5432
    user: str = ""
    password: str = ""
    path: Path = field(default_factory=lambda: Path(_DEFAULT_DB_NAME))   # SQLite file


@dataclass
class NodelistConfig:
    directory: Path = field(default_factory=Path)
    basename: str = _DEFAULT_BASENAME
    domain: str = _DEFAULT_DOMAIN
    table: str = _DEFAULT_TABLE


@dataclass
class LogConfig:
    file: Path | None = None    # None = stderr
    level: str = "INFO"


@dataclass
class FTNDBConfig:
    """Resolved configuration."""

    root: Path                  # directory that contains ftndb.toml
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    nodelist: NodelistConfig = field(default_factory=NodelistConfig)
    log: LogConfig = field(default_factory=LogConfig)

    @property
    def config_path(self) -> Path:
        return self.root / _CONFIG_FILENAME


def _load_env(root: Path) -> dict[str, str]:
    """Parse a simple KEY=VALUE .env file."""
    env_file = root / ".env"
    if not env_file.exists():
        return {}
    env: dict[str, str] = {}
    for line in env_file.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            k, _, v = line.partition("=")
            env[k.strip()] = v.strip().strip('"').strip("'")
    return env


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"cannot read {path}: {exc}"
        raise ConfigUnavailable(msg) from exc


def load_config(path: Path | str | None = None) -> FTNDBConfig:
    """Load ftndb.toml.

    With an explicit path (file or directory) the file must exist; otherwise
    search upward from cwd and fall back to defaults rooted at cwd.
    """
    if path is not None:
        config_path = Path(path)
        if config_path.is_dir():
            config_path = config_path / _CONFIG_FILENAME
        if not config_path.is_file():
            msg = f"config file not found: {config_path}"
            raise ConfigUnavailable(msg)
        root_path = config_path.parent.resolve()
    else:
        root_path = _find_root(Path.cwd())
        config_path = root_path / _CONFIG_FILENAME

    raw: dict[str, Any] = _read_toml(config_path) if config_path.is_file() else {}

    # Credentials: .env overrides ftndb.toml
    env = _load_env(root_path)

    db_section = raw.get("database", {})
    nl_section = raw.get("nodelist", {})
    log_section = raw.get("log", {})

    try:
        db_name = str(db_section.get("name", _DEFAULT_DB_NAME))
        database = DatabaseConfig(
            engine=Engine.parse(str(db_section.get("type", Engine.SQLITE.value))),
            name=db_name,
            host=str(db_section.get("host", "")),
            port=int(db_section.get("port", 5432)),
            user=env.get("FTNDB_DB_USER") or str(db_section.get("user", "")),
            password=env.get("FTNDB_DB_PASSWORD") or str(db_section.get("password", "")),
            path=root_path / db_name,
        )
    except (TypeError, ValueError) as exc:
        msg = f"invalid [database] settings in {config_path}: {exc}"
        raise ConfigUnavailable(msg) from exc

    log_file = str(log_section.get("file", ""))

    return FTNDBConfig(
        root=root_path,
        database=database,
        nodelist=NodelistConfig(
            directory=root_path / str(nl_section.get("directory", ".")),
            basename=str(nl_section.get("basename", _DEFAULT_BASENAME)),
            domain=str(nl_section.get("domain", _DEFAULT_DOMAIN)),
            table=str(nl_section.get("table", _DEFAULT_TABLE)),
        ),
        log=LogConfig(
            file=root_path / log_file if log_file else None,
            level=str(log_section.get("level", "INFO")).upper(),
        ),
    )


def _find_root(start: Path) -> Path:
    """Walk upward from start looking for ftndb.toml."""
    for directory in (start, *start.parents):
        if (directory / _CONFIG_FILENAME).exists():
            return directory
    return start


def init_config(root: Path, db_type: str = "SQLite") -> Path:
    """Write a default ftndb.toml at root. Raises if already exists."""
    config_path = root / _CONFIG_FILENAME
    if config_path.exists():
        msg = f"ftndb.toml already exists at {config_path}"
        raise FileExistsError(msg)

    engine = Engine.parse(db_type)
    content = f"""\
[database]
type = "{engine.value}"
name = "{_DEFAULT_DB_NAME if engine is Engine.SQLITE else "ftndb"}"
# host = ""
# port = 5432
# user = ""       # or set FTNDB_DB_USER in .env
# password = ""   # or set FTNDB_DB_PASSWORD in .env

[nodelist]
directory = "."
basename = "{_DEFAULT_BASENAME}"
domain = "{_DEFAULT_DOMAIN}"
table = "{_DEFAULT_TABLE}"

[log]
# file = "ftndb.log"   # default: stderr
level = "INFO"
"""
    config_path.write_text(content)
    return config_path
