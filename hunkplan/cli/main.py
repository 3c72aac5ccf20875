"""Main CLI callback: global options shared by every command."""

import typer

from hunkplan import __version__
from hunkplan.logging_utils import configure_logging


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hunkplan {__version__}")
        raise typer.Exit(0)


def main_command(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log output (-v for info, -vv for debug)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Turn outstanding working-tree changes into a planned series of commits."""
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
