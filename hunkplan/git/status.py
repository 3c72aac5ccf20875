"""Git status utilities.

Contains:
- StatusSummary: Changed paths bucketed by index/worktree and change kind
- parse_porcelain_status: Parse `git status --porcelain=v1 -z` output
- classify_status: Classify every non-ignored changed path in a repository
- get_worktree_changes: Worktree status codes for paths against the current index
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from hunkplan.git.exceptions import GitError, RepositoryStateError
from hunkplan.git.runner import _run_git_command


# Two-letter codes git uses for unmerged entries; these are neither staged nor unstaged
_UNMERGED_CODES = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}


@dataclass
class StatusSummary:
    """Changed paths in eight buckets: {new, modified, deleted, renamed} x {staged, unstaged}."""

    staged_new: list[str] = field(default_factory=list)
    staged_modified: list[str] = field(default_factory=list)
    staged_deleted: list[str] = field(default_factory=list)
    staged_renamed: list[tuple[str, str]] = field(default_factory=list)  # (old, new)
    unstaged_new: list[str] = field(default_factory=list)
    unstaged_modified: list[str] = field(default_factory=list)
    unstaged_deleted: list[str] = field(default_factory=list)
    unstaged_renamed: list[tuple[str, str]] = field(default_factory=list)  # (old, new)

    @property
    def staged_count(self) -> int:
        return (
            len(self.staged_new)
            + len(self.staged_modified)
            + len(self.staged_deleted)
            + len(self.staged_renamed)
        )

    @property
    def unstaged_count(self) -> int:
        return (
            len(self.unstaged_new)
            + len(self.unstaged_modified)
            + len(self.unstaged_deleted)
            + len(self.unstaged_renamed)
        )

    def is_clean(self) -> bool:
        """Return True when no bucket holds a path."""
        return self.staged_count == 0 and self.unstaged_count == 0

    def counts(self) -> dict[str, int]:
        """Bucket sizes keyed by bucket name, for display."""
        return {
            "staged_new": len(self.staged_new),
            "staged_modified": len(self.staged_modified),
            "staged_deleted": len(self.staged_deleted),
            "staged_renamed": len(self.staged_renamed),
            "unstaged_new": len(self.unstaged_new),
            "unstaged_modified": len(self.unstaged_modified),
            "unstaged_deleted": len(self.unstaged_deleted),
            "unstaged_renamed": len(self.unstaged_renamed),
        }

    def changed_paths(self) -> set[str]:
        """Union of every path mentioned in any bucket (both sides of renames)."""
        paths: set[str] = set()
        for bucket in (
            self.staged_new,
            self.staged_modified,
            self.staged_deleted,
            self.unstaged_new,
            self.unstaged_modified,
            self.unstaged_deleted,
        ):
            paths.update(bucket)
        for old, new in self.staged_renamed + self.unstaged_renamed:
            paths.add(old)
            paths.add(new)
        return paths

    def to_text(self) -> str:
        """Render the summary the way it is shown to users and planners."""
        staged = []
        staged.extend(f"A  {p}" for p in self.staged_new)
        staged.extend(f"M  {p}" for p in self.staged_modified)
        staged.extend(f"D  {p}" for p in self.staged_deleted)
        staged.extend(f"R  {old} -> {new}" for old, new in self.staged_renamed)

        unstaged = []
        unstaged.extend(f"? {p}" for p in self.unstaged_new)
        unstaged.extend(f"M {p}" for p in self.unstaged_modified)
        unstaged.extend(f"D {p}" for p in self.unstaged_deleted)
        unstaged.extend(f"R {old} -> {new}" for old, new in self.unstaged_renamed)

        sections = []
        if staged:
            sections.append("Staged:\n" + "\n".join(staged) + "\n")
        if unstaged:
            sections.append("Unstaged:\n" + "\n".join(unstaged) + "\n")
        return "\n".join(sections)


def _iter_porcelain_entries(output: str):
    """Yield (code, path, orig_path) tuples from NUL separated porcelain v1 output."""
    tokens = output.split("\0")
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if len(token) < 4:
            continue
        code, path = token[:2], token[3:]
        orig_path = None
        # Renames and copies carry the original path as the next token
        if code[0] in "RC" or code[1] in "RC":
            if i < len(tokens):
                orig_path = tokens[i]
                i += 1
        yield code, path, orig_path


def parse_porcelain_status(output: str) -> StatusSummary:
    """Parse `git status --porcelain=v1 -z` output into a StatusSummary.

    The first column is the index (staged) state and the second the worktree
    (unstaged) state. Renames are kept as (old, new) pairs. Type changes count
    as modifications. Ignored and unmerged entries are left out.

    Args:
        output: Raw NUL separated status output.

    Returns:
        The classified StatusSummary.
    """
    summary = StatusSummary()

    for code, path, orig_path in _iter_porcelain_entries(output):
        if code == "!!" or code in _UNMERGED_CODES:
            continue
        if code == "??":
            summary.unstaged_new.append(path)
            continue

        index_code, worktree_code = code[0], code[1]

        if index_code == "A" or index_code == "C":
            summary.staged_new.append(path)
        elif index_code in "MT":
            summary.staged_modified.append(path)
        elif index_code == "D":
            summary.staged_deleted.append(path)
        elif index_code == "R":
            summary.staged_renamed.append((orig_path or path, path))

        if worktree_code == "A":
            # Intent-to-add entries show up as new in the worktree
            summary.unstaged_new.append(path)
        elif worktree_code in "MT":
            summary.unstaged_modified.append(path)
        elif worktree_code == "D":
            summary.unstaged_deleted.append(path)
        elif worktree_code == "R":
            summary.unstaged_renamed.append((orig_path or path, path))

    return summary


def classify_status(repo_root: Path) -> StatusSummary:
    """Classify every non-ignored changed path in the repository.

    Untracked directories are reported collapsed (as `dir/`), the way git
    shows them by default.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        StatusSummary with all eight buckets filled.

    Raises:
        RepositoryStateError: If status enumeration fails (e.g. corrupt index).
    """
    try:
        output = _run_git_command(
            ["status", "--porcelain=v1", "-z", "--untracked-files=normal", "--renames"],
            cwd=repo_root,
            strip=False,
        )
    except GitError as e:
        raise RepositoryStateError(f"Cannot enumerate repository status: {e}")
    return parse_porcelain_status(output)


def get_worktree_changes(
    repo_root: Path, paths: Optional[list[str]] = None
) -> dict[str, str]:
    """Get the worktree status code of every changed file under the given paths.

    Untracked directories are expanded to individual files. Codes are the
    second porcelain column: `?` untracked, `M` modified, `D` deleted,
    `T` type changed.

    Args:
        repo_root: The root directory of the git repository.
        paths: Optional pathspecs to restrict the query to.

    Returns:
        Dictionary mapping file path to its worktree status code.

    Raises:
        RepositoryStateError: If status enumeration fails.
    """
    args = ["--literal-pathspecs", "status", "--porcelain=v1", "-z", "--untracked-files=all", "--no-renames"]
    if paths:
        args += ["--"] + paths
    try:
        output = _run_git_command(args, cwd=repo_root, strip=False)
    except GitError as e:
        raise RepositoryStateError(f"Cannot read status for {paths or 'repository'}: {e}")

    changes: dict[str, str] = {}
    for code, path, _ in _iter_porcelain_entries(output):
        if code in _UNMERGED_CODES or code == "!!":
            continue
        worktree_code = "?" if code == "??" else code[1]
        if worktree_code != " ":
            changes[path] = worktree_code
    return changes
