"""CLI command for showing classified repository status."""

import typer

from hunkplan.git import GitError, classify_status, get_repo_root


def status_command() -> None:
    """Show outstanding changes bucketed as staged/unstaged and new/modified/deleted/renamed."""
    try:
        repo_root = get_repo_root()
        summary = classify_status(repo_root)
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if summary.is_clean():
        typer.echo("Nothing to commit, working tree clean.")
        return

    typer.echo(summary.to_text())
    for bucket, count in summary.counts().items():
        if count:
            typer.echo(f"  {bucket}: {count}")
    typer.echo()
    typer.echo(f"Total: {summary.staged_count} staged, {summary.unstaged_count} unstaged")
