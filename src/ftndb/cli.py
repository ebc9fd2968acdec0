"""ftndb CLI — load Fidonet/FTN nodelists into an SQL table and list them.

Commands:
    ftndb init                     create ftndb.toml
    ftndb create                   drop + create the nodelist table and its index
    ftndb drop                     drop the nodelist table
    ftndb index [--drop]           rebuild (or drop) the ftnnode index
    ftndb load                     load the newest nodelist file
    ftndb remove-domain DOMAIN     delete all rows of an FTN domain
    ftndb list ZONE NET            report the nodes of one net
    ftndb status                   row counts per domain and zone
"""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click

from ftndb import schema
from ftndb.config import FTNDBConfig, init_config, load_config
from ftndb.db import connect
from ftndb.errors import FtndbError
from ftndb.loader import load_nodelist
from ftndb.log import setup_logging
from ftndb.query import count_by_domain, list_nodes, write_report
from ftndb.selector import select_nodelist

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ftndb.db import Connection

logger = logging.getLogger("ftndb.cli")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _cfg(ctx: click.Context) -> FTNDBConfig:
    return ctx.obj["cfg"]


@contextlib.contextmanager
def _connection(cfg: FTNDBConfig) -> Iterator[Connection]:
    """Open the configured database, close it on every exit path."""
    try:
        conn = connect(cfg)
    except FtndbError as exc:
        raise click.ClickException(str(exc)) from exc
    try:
        yield conn
    except FtndbError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        conn.close()


def _table(cfg: FTNDBConfig, table: str | None) -> str:
    try:
        return schema.normalize_table_name(table or cfg.nodelist.table)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--table") from exc


table_option = click.option("--table", default=None, help="Table name (default: [nodelist] table)")


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="ftndb")
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Path to ftndb.toml (default: search upward from cwd)")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """ftndb — Fidonet/FTN nodelist database."""
    ctx.ensure_object(dict)
    if ctx.invoked_subcommand == "init":
        return
    try:
        cfg = load_config(config_path)
    except FtndbError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(cfg.log, verbose=verbose)
    ctx.obj["cfg"] = cfg


# ---------------------------------------------------------------------------
# ftndb init
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--dir", "root", default=".", show_default=True, help="Directory for ftndb.toml")
@click.option("--db-type", default="SQLite", show_default=True, help="SQLite or Pg")
def init(root: str, db_type: str) -> None:
    """Create a default ftndb.toml."""
    try:
        config_path = init_config(Path(root).resolve(), db_type=db_type)
    except FileExistsError:
        click.echo("ftndb.toml already exists — skipping init")
        return
    except FtndbError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Created {config_path}")


# ---------------------------------------------------------------------------
# ftndb create / drop / index / remove-domain
# ---------------------------------------------------------------------------


@cli.command()
@table_option
@click.pass_context
def create(ctx: click.Context, table: str | None) -> None:
    """Drop and recreate the nodelist table, then index it."""
    cfg = _cfg(ctx)
    name = _table(cfg, table)
    engine = cfg.database.engine
    with _connection(cfg) as conn:
        schema.ensure_fresh_table(conn, name, engine)
        schema.create_index(conn, name, engine)
    click.echo(f"Created table {name}")


@cli.command()
@table_option
@click.pass_context
def drop(ctx: click.Context, table: str | None) -> None:
    """Drop the nodelist table."""
    cfg = _cfg(ctx)
    name = _table(cfg, table)
    with _connection(cfg) as conn:
        schema.drop_table(conn, name, cfg.database.engine)
    click.echo(f"Dropped table {name}")


@cli.command()
@table_option
@click.option("--drop", "drop_only", is_flag=True, help="Only drop the index")
@click.pass_context
def index(ctx: click.Context, table: str | None, drop_only: bool) -> None:
    """Rebuild the ftnnode index on the nodelist table."""
    cfg = _cfg(ctx)
    name = _table(cfg, table)
    with _connection(cfg) as conn:
        if drop_only:
            schema.drop_index(conn, name, cfg.database.engine)
            click.echo(f"Dropped index {schema.index_name(name)}")
        else:
            schema.create_index(conn, name, cfg.database.engine)
            click.echo(f"Created index {schema.index_name(name)}")


@cli.command("remove-domain")
@click.argument("domain")
@table_option
@click.pass_context
def remove_domain(ctx: click.Context, domain: str, table: str | None) -> None:
    """Delete every row of an FTN domain."""
    cfg = _cfg(ctx)
    name = _table(cfg, table)
    with _connection(cfg) as conn:
        n = schema.remove_domain(conn, name, domain, cfg.database.engine)
    click.echo(f"Removed {n} {domain} rows from {name}")


# ---------------------------------------------------------------------------
# ftndb load
# ---------------------------------------------------------------------------


@cli.command()
@table_option
@click.option("--directory", type=click.Path(path_type=Path), default=None,
              help="Nodelist directory (default: [nodelist] directory)")
@click.option("--basename", default=None, help="Nodelist basename (default: [nodelist] basename)")
@click.option("--exact", is_flag=True, help="Load BASENAME as given instead of the newest BASENAME.###")
@click.option("--domain", default=None, help="FTN domain of the entries (default: [nodelist] domain)")
@click.option("--zone", type=click.IntRange(min=0), default=None, help="Only load entries of this zone")
@click.option("--replace", is_flag=True, help="Remove existing rows of the domain first")
@click.option("--strict", is_flag=True, help="Abort on malformed lines instead of skipping them")
@click.pass_context
def load(
    ctx: click.Context,
    table: str | None,
    directory: Path | None,
    basename: str | None,
    exact: bool,
    domain: str | None,
    zone: int | None,
    replace: bool,
    strict: bool,
) -> None:
    """Load the newest nodelist file into the nodelist table."""
    cfg = _cfg(ctx)
    name = _table(cfg, table)
    engine = cfg.database.engine
    domain = domain or cfg.nodelist.domain
    try:
        path = select_nodelist(directory or cfg.nodelist.directory, basename or cfg.nodelist.basename, exact=exact)
    except FtndbError as exc:
        raise click.ClickException(str(exc)) from exc

    with _connection(cfg) as conn:
        if replace:
            schema.remove_domain(conn, name, domain, engine)
        result = load_nodelist(conn, name, path, domain, zone, engine=engine, strict=strict)

    click.echo(f"Loaded {result.loaded} entries from {result.source} into {name}")
    if result.filtered:
        click.echo(f"  {result.filtered} entries outside zone {zone} ignored")
    if result.malformed:
        click.echo(f"  {result.malformed} malformed lines skipped", err=True)


# ---------------------------------------------------------------------------
# ftndb list / status
# ---------------------------------------------------------------------------


@cli.command("list")
@click.argument("zone", type=click.IntRange(min=0))
@click.argument("net", type=click.IntRange(min=0))
@table_option
@click.option("-o", "--output", type=click.File("w"), default="-", show_default=True,
              help="Report file ('-' for stdout)")
@click.pass_context
def list_cmd(ctx: click.Context, zone: int, net: int, table: str | None, output) -> None:
    """Report the nodes of ZONE:NET ordered by node number."""
    cfg = _cfg(ctx)
    name = _table(cfg, table)
    with _connection(cfg) as conn:
        n = write_report(list_nodes(conn, name, zone, net, engine=cfg.database.engine), output, zone, net)
    logger.info("listed %d nodes of %d:%d", n, zone, net)


@cli.command()
@table_option
@click.pass_context
def status(ctx: click.Context, table: str | None) -> None:
    """Show configuration and row counts per domain and zone."""
    from rich.console import Console
    from rich.table import Table

    cfg = _cfg(ctx)
    name = _table(cfg, table)
    console = Console()

    info = Table(title=f"ftndb — {name}", show_header=True, header_style="bold")
    info.add_column("Setting", style="dim", no_wrap=True)
    info.add_column("Value")
    info.add_row("Config", str(cfg.config_path) if cfg.config_path.exists() else "[yellow]defaults[/yellow]")
    info.add_row("Database", f"{cfg.database.engine.value}: {cfg.database.name}")
    info.add_row("Nodelists", f"{cfg.nodelist.directory} ({cfg.nodelist.basename}.###)")
    console.print(info)

    with _connection(cfg) as conn:
        try:
            counts = count_by_domain(conn, name, engine=cfg.database.engine)
        except FtndbError:
            console.print(f"[red]table {name} missing — run `ftndb create`[/red]")
            return

    rows = Table(show_header=True, header_style="bold")
    rows.add_column("Domain")
    rows.add_column("Zone", justify="right")
    rows.add_column("Rows", justify="right")
    for domain, zone, n in counts:
        rows.add_row(domain, str(zone), str(n))
    rows.add_row("[bold]total[/bold]", "", str(sum(n for _, _, n in counts)))
    console.print(rows)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
