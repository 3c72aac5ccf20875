"""CLI entry point for hunkplan.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from hunkplan.cli.truncate import truncate_app
from hunkplan.cli.status import status_command
from hunkplan.cli.diff import diff_command
from hunkplan.cli.apply import apply_command
from hunkplan.cli.main import main_command

# Main application
app = typer.Typer(
    name="hunkplan",
    help="hunkplan: split outstanding changes into planned commits",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(truncate_app, name="truncate")

# Add individual commands
app.command("status")(status_command)
app.command("diff")(diff_command)
app.command("apply")(apply_command)

# Global options (-v, --version) for every command
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "truncate_app",
    "status_command",
    "diff_command",
    "apply_command",
    "main_command",
]
