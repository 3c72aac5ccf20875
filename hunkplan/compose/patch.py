"""Patch builder for hunkplan compose module.

Contains:
- build_file_patch: Build a patch applying a subset of one file's hunks
- _format_hunk: Render a hunk with (possibly shifted) header ranges
"""

from hunkplan.compose.models import Hunk, WorkingTreeFile


_NO_NEWLINE_MARKER = "\\ No newline at end of file\n"


def _section_text(header: str) -> str:
    """Return what follows the closing @@ of a header, with its leading space."""
    closing = header.find("@@", 2)
    if closing == -1:
        return ""
    return header[closing + 2:]


def _format_hunk(hunk: Hunk, new_start: int) -> str:
    """Render a hunk for `git apply` with the given new-side start line."""
    parts = [
        f"@@ -{hunk.old_start},{hunk.old_len} +{new_start},{hunk.new_len} @@"
        f"{_section_text(hunk.header)}\n"
    ]
    for line in hunk.lines:
        parts.append(line.kind.prefix + line.text)
        if not line.has_newline:
            parts.append("\n" + _NO_NEWLINE_MARKER)
    return "".join(parts)


def build_file_patch(working_file: WorkingTreeFile, selected: list[Hunk]) -> str:
    """Build a patch for a single tracked file containing only selected hunks.

    Hunks keep their old-side ranges; new-side start lines are shifted back
    by the line delta of every unselected hunk that precedes them, so the
    patch is self-consistent.

    Args:
        working_file: The file the hunks belong to (from the same extraction).
        selected: Hunks of that file to include.

    Returns:
        Patch content as string (empty if nothing is selected)
    """
    chosen = {hunk.ordinal for hunk in selected}
    if not chosen:
        return ""

    path = working_file.path
    patch_lines = [f"diff --git a/{path} b/{path}\n"]

    if working_file.is_deleted:
        patch_lines.append(f"deleted file mode {working_file.old_mode or '100644'}\n")
        patch_lines.append(f"--- a/{path}\n")
        patch_lines.append("+++ /dev/null\n")
    elif working_file.is_new:
        patch_lines.append(f"new file mode {working_file.new_mode or '100644'}\n")
        patch_lines.append("--- /dev/null\n")
        patch_lines.append(f"+++ b/{path}\n")
    else:
        if working_file.old_mode and working_file.new_mode and working_file.old_mode != working_file.new_mode:
            patch_lines.append(f"old mode {working_file.old_mode}\n")
            patch_lines.append(f"new mode {working_file.new_mode}\n")
        patch_lines.append(f"--- a/{path}\n")
        patch_lines.append(f"+++ b/{path}\n")

    skipped_delta = 0
    for hunk in working_file.hunks:
        if hunk.ordinal not in chosen:
            skipped_delta += hunk.new_len - hunk.old_len
            continue
        patch_lines.append(_format_hunk(hunk, hunk.new_start - skipped_delta))

    return "".join(patch_lines)
