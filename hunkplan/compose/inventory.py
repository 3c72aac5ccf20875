"""Hunk inventory utilities for hunkplan compose module.

Contains functions for addressing and rendering hunks:
- format_hunk_token / parse_hunk_token: The "path:ordinal" token of a hunk
- build_hunk_inventory: Build a mapping of hunk tokens to Hunk objects
- render_file: Render one file's hunks as canonical diff text
- render_files: Render every file, keyed by path

Tokens are valid only for the extraction pass that produced the files. They
must not be cached across a plan application.
"""

from hunkplan.compose.models import Hunk, WorkingTreeFile


TRUNCATED_PLACEHOLDER = "Truncated File"


def format_hunk_token(path: str, ordinal: int) -> str:
    """Build the token addressing a hunk within one extraction pass."""
    return f"{path}:{ordinal}"


def parse_hunk_token(token: str) -> tuple[str, int]:
    """Split a "path:ordinal" token.

    The ordinal follows the last colon, so paths may contain colons.

    Args:
        token: The hunk token.

    Returns:
        Tuple of (path, ordinal).

    Raises:
        ValueError: If the token is malformed.
    """
    path, sep, ordinal = token.strip().rpartition(":")
    if not sep or not path:
        raise ValueError(f"not a valid hunk token: {token!r}")
    if not ordinal.isdigit():
        raise ValueError(f"not a valid hunk ordinal in {token!r}")
    return path, int(ordinal)


def build_hunk_inventory(files: list[WorkingTreeFile]) -> dict[str, Hunk]:
    """Build a mapping of hunk tokens to Hunk objects.

    Truncated files never contribute tokens.

    Args:
        files: List of WorkingTreeFile objects from one extraction pass

    Returns:
        Dictionary mapping token to Hunk
    """
    inventory: dict[str, Hunk] = {}
    for working_file in files:
        if working_file.truncated:
            continue
        for hunk in working_file.hunks:
            inventory[format_hunk_token(working_file.path, hunk.ordinal)] = hunk
    return inventory


def render_file(working_file: WorkingTreeFile) -> str:
    """Render a file's hunks as diff text for prompts and UI.

    Each hunk is introduced by its `Hunk_id[path:ordinal]` token. Truncated
    files render as a fixed placeholder with no tokens.

    Args:
        working_file: The file to render.

    Returns:
        The rendered text (empty for files without hunks).
    """
    if working_file.truncated:
        return TRUNCATED_PLACEHOLDER

    parts: list[str] = []
    for hunk in working_file.hunks:
        parts.append(f"Hunk_id[{format_hunk_token(working_file.path, hunk.ordinal)}]\n")
        parts.append(hunk.header + "\n")
        for line in hunk.lines:
            parts.append(line.kind.prefix + line.text)
            if not line.has_newline:
                parts.append("\n")
        parts.append("\n")
    return "".join(parts)


def render_files(files: list[WorkingTreeFile]) -> dict[str, str]:
    """Render every file of an extraction pass, keyed by path.

    Files whose rendering is blank (binary, mode-only) are left out.

    Args:
        files: List of WorkingTreeFile objects

    Returns:
        Dictionary mapping path to rendered text, in extraction order
    """
    rendered: dict[str, str] = {}
    for working_file in files:
        text = render_file(working_file)
        if text.strip():
            rendered[working_file.path] = text
    return rendered
