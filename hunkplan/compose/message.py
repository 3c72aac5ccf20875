"""Commit message rendering for hunkplan compose module.

Contains:
- CommitOptions: How planned messages are turned into commit messages
- format_commit_prefix: Build "type!(scope)" from a CommitMessage
- format_commit_message: Build the full commit message
"""

from typing import Optional

from pydantic import BaseModel

from hunkplan.compose.models import CommitMessage


class CommitOptions(BaseModel):
    """Commit message settings (the `commit` section of .hunkplan/config.yaml)."""

    capitalize_prefix: bool = False
    include_scope: bool = True
    include_breaking: bool = True
    breaking_symbol: Optional[str] = None


def format_commit_prefix(message: CommitMessage, options: Optional[CommitOptions] = None) -> str:
    """Build the prefix of the subject line: type, breaking marker, scope.

    Args:
        message: The structured message.
        options: Rendering options (defaults if None).

    Returns:
        Prefix such as "feat", "fix!" or "refactor(api)".
    """
    options = options or CommitOptions()

    prefix = message.type.value
    if options.capitalize_prefix:
        prefix = prefix.capitalize()

    breaking = ""
    if options.include_breaking and message.breaking:
        breaking = options.breaking_symbol or "!"

    scope = ""
    if options.include_scope and message.scope.strip():
        # Scopes are always lowercase; planners tend to echo file names
        scope = f"({message.scope.strip().lower()})"

    return f"{prefix}{breaking}{scope}"


def format_commit_message(message: CommitMessage, options: Optional[CommitOptions] = None) -> str:
    """Build the full commit message.

    Args:
        message: The structured message.
        options: Rendering options (defaults if None).

    Returns:
        "<prefix>: <description>", followed by the body after a blank line
        when one is given.
    """
    subject = f"{format_commit_prefix(message, options)}: {message.description.strip()}"
    if message.body and message.body.strip():
        return f"{subject}\n\n{message.body.strip()}\n"
    return subject + "\n"
