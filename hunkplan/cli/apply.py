"""CLI command for applying a commit plan file."""

import json
from pathlib import Path

import typer

from hunkplan.compose import PlanParseError, StagingEngine, load_plan_file
from hunkplan.git import GitError, get_repo_root
from hunkplan.user_config import get_commit_options, get_truncate_patterns


def apply_command(
    plan_file: Path = typer.Argument(
        ...,
        help="JSON plan file with the commit units to create",
    ),
    show_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Print the apply report as JSON",
    ),
) -> None:
    """Create one commit per plan unit from the outstanding changes.

    Commits already created stay in place if a later unit fails.
    """
    if not plan_file.exists():
        typer.echo(f"Plan file not found: {plan_file}", err=True)
        raise typer.Exit(1)

    try:
        plan = load_plan_file(plan_file)
    except PlanParseError as e:
        typer.echo(f"Failed to load plan: {e}", err=True)
        raise typer.Exit(1)

    try:
        repo_root = get_repo_root()
        engine = StagingEngine(
            repo_root,
            truncate_patterns=get_truncate_patterns(repo_root),
            commit_options=get_commit_options(repo_root),
        )
    except GitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Applying {len(plan.units)} unit(s)...", err=True)
    report = engine.apply(plan)

    if show_json:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        for commit in report.commits:
            typer.echo(f"  created {commit[:12]}")
        for index in report.skipped_units:
            typer.echo(f"  skipped unit {index + 1}: nothing to commit")
        for warning in report.warnings:
            typer.echo(f"  warning (unit {warning.unit_index + 1}) {warning.kind.value}: {warning.detail}")
        typer.echo()
        typer.echo(f"Created {report.committed_units} commit(s).")
        if report.cancelled:
            typer.echo("Stopped before all units were applied.")

    if report.aborted:
        typer.echo("", err=True)
        typer.echo(f"Error: {report.fatal_error}", err=True)
        typer.echo(f"{report.committed_units} commit(s) were created before the failure.", err=True)
        if report.committed_units:
            if report.original_head:
                typer.echo(f"To undo them run: git reset --soft {report.original_head}", err=True)
            else:
                typer.echo("To undo them run: git update-ref -d HEAD", err=True)
        raise typer.Exit(1)
