"""Index (staging area) utilities.

Contains:
- reset_index: Repopulate the index from a tree, or empty it
- add_to_index: Stage a worktree file
- remove_from_index: Drop a path from the index
- apply_patch_to_index: Apply a patch to the index only
"""

from pathlib import Path
from typing import Optional

from hunkplan.git.exceptions import GitError, RepositoryStateError
from hunkplan.git.runner import _run_git_command


def reset_index(repo_root: Path, tree: Optional[str]) -> None:
    """Discard all staging and repopulate the index from a tree.

    Args:
        repo_root: The root directory of the git repository.
        tree: Tree to read, or None to empty the index (unborn HEAD).

    Raises:
        RepositoryStateError: If the index cannot be rewritten.
    """
    args = ["read-tree", tree] if tree else ["read-tree", "--empty"]
    try:
        _run_git_command(args, cwd=repo_root)
    except GitError as e:
        raise RepositoryStateError(f"Failed to reset index: {e}")


def add_to_index(repo_root: Path, path: str) -> None:
    """Stage the worktree content of a file (new or modified).

    Raises:
        RepositoryStateError: If the path cannot be added.
    """
    try:
        _run_git_command(["update-index", "--add", "--", path], cwd=repo_root)
    except GitError as e:
        raise RepositoryStateError(f"Failed to add {path} to index: {e}")


def remove_from_index(repo_root: Path, path: str) -> None:
    """Remove a path from the index, whether or not it still exists on disk.

    Raises:
        RepositoryStateError: If the path cannot be removed.
    """
    try:
        _run_git_command(["update-index", "--force-remove", "--", path], cwd=repo_root)
    except GitError as e:
        raise RepositoryStateError(f"Failed to remove {path} from index: {e}")


def apply_patch_to_index(repo_root: Path, patch: str) -> None:
    """Apply a patch to the index without touching the working tree.

    Args:
        repo_root: The root directory of the git repository.
        patch: Patch text, fed to git on stdin.

    Raises:
        GitError: If git rejects the patch.
    """
    _run_git_command(["apply", "--cached", "--whitespace=nowarn", "-"], cwd=repo_root, input_text=patch)
