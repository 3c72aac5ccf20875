"""Diff parser for hunkplan compose module.

Contains functions for parsing unified diff output:
- parse_unified_diff: Parse unified diff output from git diff
- parse_hunk_header: Parse the line ranges of an @@ header
- _parse_file_block: Parse a single file block from the diff
- _parse_hunks: Parse hunks from the hunk portion of a file diff
"""

import re
from typing import Optional

from hunkplan.compose.models import Hunk, Line, LineKind, WorkingTreeFile


_HEADER_RE = re.compile(r"@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

_NO_NEWLINE_MARKER = "\\ No newline at end of file"

_PREFIX_KINDS = {
    " ": LineKind.CONTEXT,
    "+": LineKind.ADDITION,
    "-": LineKind.DELETION,
}


def parse_unified_diff(diff_output: str) -> tuple[list[WorkingTreeFile], list[str]]:
    """Parse unified diff output from 'git diff <tree> --patch'.

    The diff must be produced without rename detection, so both sides of
    every `diff --git` line name the same path.

    Args:
        diff_output: Raw output from git diff

    Returns:
        Tuple of (list of WorkingTreeFile objects in emission order, list of warning messages)
    """
    files: list[WorkingTreeFile] = []
    warnings: list[str] = []

    if not diff_output.strip():
        return files, warnings

    # Each file starts with 'diff --git a/... b/...'
    file_blocks = re.split(r"(?=^diff --git )", diff_output, flags=re.MULTILINE)

    for block in file_blocks:
        if not block.startswith("diff --git"):
            continue

        lines = block.split("\n")
        working_file = _parse_file_block(lines, warnings)
        if working_file:
            files.append(working_file)

    return files, warnings


def parse_hunk_header(header: str) -> Optional[tuple[int, int, int, int]]:
    """Parse `@@ -a,b +c,d @@` into (old_start, old_len, new_start, new_len).

    Omitted lengths default to 1, as in the unified diff format.

    Returns:
        The four numbers, or None if the header is malformed.
    """
    match = _HEADER_RE.match(header)
    if not match:
        return None
    old_start = int(match.group(1))
    old_len = int(match.group(2)) if match.group(2) is not None else 1
    new_start = int(match.group(3))
    new_len = int(match.group(4)) if match.group(4) is not None else 1
    return old_start, old_len, new_start, new_len


def _path_from_diff_line(line: str) -> Optional[str]:
    """Extract the path from a `diff --git a/<p> b/<p>` line."""
    rest = line[len("diff --git "):]
    # Without renames both sides are equal, which resolves paths containing " b/"
    if (len(rest) - 5) % 2 == 0:
        half = (len(rest) - 5) // 2
        old, new = rest[2:2 + half], rest[half + 5:]
        if rest.startswith("a/") and rest[half + 2:half + 5] == " b/" and old == new:
            return new
    match = re.match(r"a/(.*) b/(.*)", rest)
    if not match:
        return None
    return match.group(2)


def _parse_file_block(lines: list[str], warnings: list[str]) -> Optional[WorkingTreeFile]:
    """Parse a single file block from the diff.

    Args:
        lines: Lines of the file block
        warnings: List to append warnings to

    Returns:
        WorkingTreeFile object or None if the block is invalid
    """
    if not lines or not lines[0].startswith("diff --git"):
        return None

    file_path = _path_from_diff_line(lines[0])
    if file_path is None:
        warnings.append(f"Unparseable diff header skipped: {lines[0]}")
        return None

    working_file = WorkingTreeFile(path=file_path)
    hunk_start_idx = None

    for i, line in enumerate(lines[1:], start=1):
        if line.startswith("@@"):
            hunk_start_idx = i
            break

        if line.startswith("new file mode "):
            working_file.is_new = True
            working_file.new_mode = line[len("new file mode "):].strip()
        elif line.startswith("deleted file mode "):
            working_file.is_deleted = True
            working_file.old_mode = line[len("deleted file mode "):].strip()
        elif line.startswith("old mode "):
            working_file.old_mode = line[len("old mode "):].strip()
        elif line.startswith("new mode "):
            working_file.new_mode = line[len("new mode "):].strip()
        elif line.startswith("index ") and " " in line[len("index "):]:
            # "index abc..def 100644" carries the unchanged mode
            mode = line.rsplit(" ", 1)[1]
            working_file.old_mode = working_file.old_mode or mode
            working_file.new_mode = working_file.new_mode or mode
        elif "GIT binary patch" in line or line.startswith("Binary files"):
            working_file.is_binary = True
            warnings.append(f"Binary file has no hunks: {file_path}")
            return working_file

    if hunk_start_idx is None:
        # No hunks (mode change only, empty new file)
        return working_file

    working_file.hunks = _parse_hunks(lines[hunk_start_idx:])
    return working_file


def _parse_hunks(lines: list[str]) -> list[Hunk]:
    """Parse hunks from the hunk portion of a file diff.

    Args:
        lines: Lines starting from first @@

    Returns:
        List of Hunk objects, ordinals assigned in emission order
    """
    hunks: list[Hunk] = []
    current: Optional[Hunk] = None

    for line in lines:
        if line.startswith("@@"):
            ranges = parse_hunk_header(line)
            if ranges is None:
                current = None
                continue
            old_start, old_len, new_start, new_len = ranges
            current = Hunk(
                header=line,
                ordinal=len(hunks),
                old_start=old_start,
                old_len=old_len,
                new_start=new_start,
                new_len=new_len,
            )
            hunks.append(current)
        elif current is None:
            continue
        elif line == _NO_NEWLINE_MARKER:
            if current.lines:
                last = current.lines[-1]
                current.lines[-1] = Line(kind=last.kind, text=last.text[:-1])
        elif line and line[0] in _PREFIX_KINDS:
            current.lines.append(Line(kind=_PREFIX_KINDS[line[0]], text=line[1:] + "\n"))

    return hunks
