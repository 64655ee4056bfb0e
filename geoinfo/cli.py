"""Click CLI with Rich output."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import DEFAULT_LANGUAGE, MMDB_DIR_ENVVAR, default_mmdb_dir
from .database import GeoDatabase
from .errors import GeoinfoError
from .lookup import lookup_address
from .models import DatabaseConfig, LookupOptions
from .render import render_json, render_table

console = Console()
err_console = Console(stderr=True)


def _fail(exc: GeoinfoError):
    err_console.print(f"[red bold]Error:[/red bold] {escape(str(exc))}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "-m",
    "--mmdb-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=MMDB_DIR_ENVVAR,
    default=default_mmdb_dir,
    show_default="/var/lib/GeoIP",
    help="Directory containing the City and ASN .mmdb files.",
)
@click.option(
    "--city-db",
    type=click.Path(dir_okay=False, path_type=Path),
    help="City database file (overrides --mmdb-dir).",
)
@click.option(
    "--asn-db",
    type=click.Path(dir_okay=False, path_type=Path),
    help="ASN database file (overrides --mmdb-dir).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to stderr.")
@click.pass_context
def cli(ctx, mmdb_dir: Path, city_db: Path | None, asn_db: Path | None, verbose: bool):
    """geoinfo — ipinfo.io-style answers from local MaxMind databases."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    ctx.obj = DatabaseConfig.from_directory(mmdb_dir, city_db=city_db, asn_db=asn_db)


@cli.command()
@click.argument("address")
@click.option(
    "--lang",
    "language",
    default=DEFAULT_LANGUAGE,
    show_default=True,
    help="IETF language code used for place names.",
)
@click.option(
    "--last",
    "last_subdivision",
    is_flag=True,
    help="Report the most specific subdivision as region instead of the first.",
)
@click.option("--no-hostname", is_flag=True, help="Skip the reverse DNS lookup.")
@click.option("--table", "as_table", is_flag=True, help="Output as a table.")
@click.pass_obj
def lookup(
    config: DatabaseConfig,
    address: str,
    language: str,
    last_subdivision: bool,
    no_hostname: bool,
    as_table: bool,
):
    """Look up an IP address or hostname (defanged input like 8[.]8[.]8[.]8 works)."""
    options = LookupOptions(
        last_subdivision=last_subdivision,
        reverse_dns=not no_hostname,
    )
    try:
        with GeoDatabase(config, language=language) as db:
            result = lookup_address(address, db, options)
    except GeoinfoError as exc:
        _fail(exc)

    if as_table:
        console.print(render_table(result))
        return
    click.echo(render_json(result))


@cli.command()
@click.pass_obj
def languages(config: DatabaseConfig):
    """List the language codes the City database has names for."""
    try:
        with GeoDatabase(config) as db:
            codes = db.languages()
    except GeoinfoError as exc:
        _fail(exc)

    click.echo(", ".join(codes))


@cli.command()
@click.pass_obj
def info(config: DatabaseConfig):
    """Show database metadata."""
    try:
        with GeoDatabase(config) as db:
            entries = db.metadata()
    except GeoinfoError as exc:
        _fail(exc)

    table = Table(title="GeoIP Databases", show_header=True, header_style="bold")
    table.add_column("Type")
    table.add_column("Built")
    table.add_column("IP")
    table.add_column("Nodes", justify="right")
    table.add_column("Path")

    for entry in entries:
        table.add_row(
            entry["type"],
            entry["built"].strftime("%Y-%m-%d"),
            f"v{entry['ip_version']}",
            str(entry["node_count"]),
            entry["path"],
        )

    console.print(table)
