"""CLI commands for truncate pattern management."""

import typer

from hunkplan.git import GitError, get_repo_root
from hunkplan.user_config import (
    add_truncate_pattern,
    get_truncate_patterns,
    remove_truncate_pattern,
)

# Subcommand group for truncate pattern management
truncate_app = typer.Typer(
    name="truncate",
    help="Manage truncate patterns in .hunkplan/config.yaml",
    add_completion=False,
)


@truncate_app.command("list")
def truncate_list() -> None:
    """Show all truncate patterns in .hunkplan/config.yaml."""
    try:
        repo_root = get_repo_root()
        patterns = get_truncate_patterns(repo_root)

        typer.echo("Truncate patterns in .hunkplan/config.yaml:")
        typer.echo()
        if patterns:
            for pattern in patterns:
                typer.echo(f"  - {pattern}")
            typer.echo()
            typer.echo(f"Total: {len(patterns)} pattern(s)")
        else:
            typer.echo("  (no patterns configured)")
        typer.echo()
        typer.echo("Matching files are shown as 'Truncated File' and get no hunk tokens.")

    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@truncate_app.command("add")
def truncate_add(
    pattern: str = typer.Argument(
        ...,
        help="File pattern to add (e.g., *.lock, dist/*, package-lock.json)",
    ),
) -> None:
    """Add a pattern to the truncate list."""
    try:
        repo_root = get_repo_root()

        if pattern in get_truncate_patterns(repo_root):
            typer.echo(f"Pattern already exists: {pattern}")
            raise typer.Exit(0)

        add_truncate_pattern(repo_root, pattern)
        typer.echo(f"Added truncate pattern: {pattern}")

    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@truncate_app.command("remove")
def truncate_remove(
    pattern: str = typer.Argument(
        ...,
        help="File pattern to remove from the truncate list",
    ),
) -> None:
    """Remove a pattern from the truncate list."""
    try:
        repo_root = get_repo_root()

        if remove_truncate_pattern(repo_root, pattern):
            typer.echo(f"Removed truncate pattern: {pattern}")
        else:
            typer.echo(f"Pattern not found: {pattern}", err=True)
            raise typer.Exit(1)

    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
