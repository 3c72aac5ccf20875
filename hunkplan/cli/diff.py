"""CLI command for rendering the outstanding diff with hunk tokens."""

import json

import typer

from hunkplan.compose import extract_changes, render_files
from hunkplan.git import GitError, get_repo_root
from hunkplan.git.runner import GIT_ENCODING, GIT_ERRORS
from hunkplan.user_config import get_truncate_patterns


def _displayable(text: str) -> str:
    """Replace bytes that were not valid UTF-8 so the text can be printed."""
    return text.encode(GIT_ENCODING, GIT_ERRORS).decode(GIT_ENCODING, "replace")


def diff_command(
    show_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Print a JSON object mapping each path to its rendered diff",
    ),
) -> None:
    """Render every changed file against HEAD, one Hunk_id token per hunk.

    This is the text a planner sees; the tokens it prints are the ones a plan
    file refers to in `hunk_refs`.
    """
    try:
        repo_root = get_repo_root()
        files = extract_changes(repo_root, get_truncate_patterns(repo_root))
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    rendered = render_files(files)

    if show_json:
        typer.echo(json.dumps(rendered, indent=2))
        return

    if not rendered:
        typer.echo("No outstanding changes.", err=True)
        raise typer.Exit(0)

    for path, text in rendered.items():
        typer.echo(f"=== {_displayable(path)} ===")
        typer.echo(_displayable(text.rstrip("\n")))
        typer.echo()
