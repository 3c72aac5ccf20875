"""Diff extraction for hunkplan compose module.

Contains:
- DEFAULT_TRUNCATE_PATTERNS: Files rendered as a placeholder by default
- should_truncate: Check if a file matches any truncate pattern
- extract: Build the ordered WorkingTreeFile list for a baseline tree
- extract_changes: Resolve the baseline and extract in one call
"""

import fnmatch
import logging
import os
from pathlib import Path
from typing import Optional

from hunkplan.compose.models import Hunk, Line, LineKind, WorkingTreeFile
from hunkplan.compose.parser import parse_unified_diff
from hunkplan.git.exceptions import GitError, RepositoryStateError
from hunkplan.git.objects import resolve_baseline_tree
from hunkplan.git.runner import GIT_ENCODING, GIT_ERRORS, _run_git_command
from hunkplan.git.status import StatusSummary, classify_status

LOG = logging.getLogger(__name__)


# Files whose content is rarely worth showing to a planner
# Note: This list is used as fallback; actual patterns come from .hunkplan/config.yaml
DEFAULT_TRUNCATE_PATTERNS = [
    "poetry.lock",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "Cargo.lock",
    "Gemfile.lock",
    "composer.lock",
    "go.sum",
]

# Bytes inspected when deciding whether an untracked file is binary
_BINARY_SNIFF_SIZE = 8000

_DIFF_ARGS = [
    "-c", "core.quotepath=false",
    "--literal-pathspecs",
    "diff",
    "--no-color",
    "--no-ext-diff",
    "--no-textconv",
    "--no-renames",
    "--ignore-submodules",
    "--unified=3",
    "--src-prefix=a/",
    "--dst-prefix=b/",
]


def should_truncate(path: str, patterns: list[str]) -> bool:
    """Check if a file should be truncated based on patterns.

    A pattern matches when the path ends with it, or when it matches the path
    or its basename as a glob (e.g. *.log, build/*).

    Args:
        path: The file path to check.
        patterns: List of patterns to match against.

    Returns:
        True if the file should be truncated.
    """
    for pattern in patterns:
        if path.endswith(pattern):
            return True
        if fnmatch.fnmatch(path, pattern):
            return True
        if fnmatch.fnmatch(Path(path).name, pattern):
            return True
    return False


def _path_selected(path: str, paths: Optional[list[str]]) -> bool:
    """Check if path equals, or lies under, one of the selected paths."""
    if paths is None:
        return True
    for selected in paths:
        selected = selected.rstrip("/")
        if path == selected or path.startswith(selected + "/"):
            return True
    return False


def _diff_tracked(
    repo_root: Path, baseline_tree: str, paths: Optional[list[str]]
) -> list[WorkingTreeFile]:
    """Diff the baseline tree against the working tree for tracked paths."""
    args = _DIFF_ARGS + [baseline_tree]
    if paths is not None:
        args += ["--"] + paths
    try:
        output = _run_git_command(args, cwd=repo_root, strip=False)
    except GitError as e:
        raise RepositoryStateError(f"Cannot diff against baseline {baseline_tree}: {e}")

    files, warnings = parse_unified_diff(output)
    for warning in warnings:
        LOG.debug(warning)
    return files


def _list_untracked_files(repo_root: Path, roots: list[str]) -> list[str]:
    """Walk untracked paths recursively, skipping ignored entries."""
    if not roots:
        return []
    try:
        output = _run_git_command(
            ["--literal-pathspecs", "ls-files", "--others", "--exclude-standard", "-z", "--"] + roots,
            cwd=repo_root,
            strip=False,
        )
    except GitError as e:
        raise RepositoryStateError(f"Cannot list untracked files: {e}")
    return sorted(p for p in output.split("\0") if p)


def _split_lines(content: str) -> list[str]:
    """Split content at LF only, keeping line endings (a CR stays in its line, as in git diff)."""
    lines = [text + "\n" for text in content.split("\n")]
    lines[-1] = lines[-1][:-1]
    if not lines[-1]:
        lines.pop()
    return lines


def _synthesize_new_file(repo_root: Path, path: str) -> Optional[WorkingTreeFile]:
    """Build a single all-additions hunk for an untracked file."""
    full_path = repo_root / path
    if not full_path.is_file():
        return None

    mode = "100755" if os.access(full_path, os.X_OK) else "100644"
    working_file = WorkingTreeFile(path=path, is_new=True, is_untracked=True, new_mode=mode)

    try:
        data = full_path.read_bytes()
    except OSError as e:
        LOG.warning("Cannot read untracked file %s: %s", path, e)
        return None

    # Same heuristic git uses: a NUL byte near the start means binary
    if b"\0" in data[:_BINARY_SNIFF_SIZE]:
        working_file.is_binary = True
        return working_file

    lines = [
        Line(kind=LineKind.ADDITION, text=text)
        for text in _split_lines(data.decode(GIT_ENCODING, GIT_ERRORS))
    ]
    working_file.hunks = [
        Hunk(
            header=f"New File {len(lines)}",
            ordinal=0,
            lines=lines,
            old_start=0,
            old_len=0,
            new_start=1 if lines else 0,
            new_len=len(lines),
        )
    ]
    return working_file


def extract(
    repo_root: Path,
    baseline_tree: str,
    truncate_patterns: list[str],
    status: Optional[StatusSummary] = None,
    paths: Optional[list[str]] = None,
) -> list[WorkingTreeFile]:
    """Extract the outstanding changes of the working tree against a baseline.

    Tracked paths are diffed against the baseline tree; untracked paths are
    walked and turned into one "New File" hunk each. Files matching a
    truncate pattern keep their hunks but are flagged and sorted last.

    Args:
        repo_root: The root directory of the git repository (the working tree).
        baseline_tree: Tree id to diff against.
        truncate_patterns: Patterns of files to flag as truncated.
        status: Classification to take untracked paths from (computed if None).
        paths: Optional list of paths to restrict extraction to.

    Returns:
        Ordered list of WorkingTreeFile objects.

    Raises:
        RepositoryStateError: If the baseline cannot be diffed or status fails.
    """
    if paths is not None and not paths:
        return []
    if status is None:
        status = classify_status(repo_root)

    files = _diff_tracked(repo_root, baseline_tree, paths)
    seen = {f.path for f in files}

    for path in _list_untracked_files(repo_root, status.unstaged_new):
        if path in seen or not _path_selected(path, paths):
            continue
        working_file = _synthesize_new_file(repo_root, path)
        if working_file is not None:
            files.append(working_file)
            seen.add(path)

    for working_file in files:
        working_file.truncated = should_truncate(working_file.path, truncate_patterns)

    # Stable sort keeps emission order within each group
    files.sort(key=lambda f: f.truncated)

    LOG.debug(
        "Extracted %d file(s), %d hunk(s) against %s",
        len(files),
        sum(len(f.hunks) for f in files),
        baseline_tree,
    )
    return files


def extract_changes(
    repo_root: Path,
    truncate_patterns: Optional[list[str]] = None,
    status: Optional[StatusSummary] = None,
) -> list[WorkingTreeFile]:
    """Extract outstanding changes against HEAD (or the empty tree if unborn).

    Args:
        repo_root: The root directory of the git repository.
        truncate_patterns: Patterns of files to flag as truncated.
        status: Optional precomputed classification.

    Returns:
        Ordered list of WorkingTreeFile objects.
    """
    if truncate_patterns is None:
        truncate_patterns = DEFAULT_TRUNCATE_PATTERNS
    baseline_tree = resolve_baseline_tree(repo_root)
    return extract(repo_root, baseline_tree, truncate_patterns, status=status)
