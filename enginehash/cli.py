"""
enginehash.cli
==============
Command-line entry point.

``enginehash`` with no arguments updates ``output/enginehash.csv`` in the
current directory.  ``enginehash scan PATH`` prints the snapshot hash of a
local binary.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from enginehash import __version__
from enginehash.config import DEFAULT_CLONE_PATH, DEFAULT_LEDGER_PATH, RELEASES_URL, Settings
from enginehash.extractor import get_snapshot_hash_from_path
from enginehash.pipeline import update_ledger

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="enginehash",
    help="Flutter engine snapshot hash ledger",
    add_completion=False,
)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback(invoke_without_command=True)
def update(
    ctx: typer.Context,
    output: Path = typer.Option(
        DEFAULT_LEDGER_PATH,
        "--output",
        "-o",
        help="Ledger CSV to update",
    ),
    clone_path: Path = typer.Option(
        DEFAULT_CLONE_PATH,
        "--clone-path",
        help="Temporary location of the Flutter repository clone",
    ),
    releases_url: str = typer.Option(
        RELEASES_URL,
        "--releases-url",
        help="Flutter release list JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Debug logging",
    ),
):
    """Add snapshot hashes for all releases newer than the ledger's newest entry."""
    configure_logging(verbose)
    if ctx.invoked_subcommand is not None:
        return

    logger.info("enginehash %s", __version__)
    settings = Settings(
        ledger_path=output,
        clone_path=clone_path,
        releases_url=releases_url,
    )
    update_ledger(settings)


@app.command()
def scan(
    path: Path = typer.Argument(..., help="Binary to scan (usually gen_snapshot)"),
):
    """Print the snapshot hash embedded in a local binary."""
    value = get_snapshot_hash_from_path(path)
    if not value:
        logger.error("No snapshot hash found in %s", path)
        raise typer.Exit(code=1)
    typer.echo(value)


def main() -> None:
    app()
