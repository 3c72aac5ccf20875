"""Object database and ref utilities.

Contains:
- get_head_commit: Resolve HEAD to a commit, None when HEAD is unborn
- get_empty_tree: Object id of the empty tree
- resolve_baseline_tree: Tree to diff against (HEAD tree or the empty tree)
- resolve_signature: Author/committer identity from repository configuration
- write_tree: Write the index to a tree object
- signature_env: Identity variables for a resolved signature
- commit_tree: Create a commit object
- update_head: Advance HEAD (or the branch it points at) to a new commit
"""

import re
from pathlib import Path
from typing import Optional

from hunkplan.git.exceptions import GitError, ObjectWriteError, RepositoryStateError
from hunkplan.git.runner import _git_succeeds, _run_git_command

# "Name <email> 1700000000 +0000" as printed by git var
_IDENT_RE = re.compile(r"^(.*) <(.*)> \d+ [+-]\d{4}$")


def get_head_commit(repo_root: Path) -> Optional[str]:
    """Resolve HEAD to a commit id.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        The commit id, or None if HEAD points at a branch with no commits yet.

    Raises:
        RepositoryStateError: If HEAD cannot be resolved for another reason.
    """
    try:
        return _run_git_command(["rev-parse", "--verify", "-q", "HEAD^{commit}"], cwd=repo_root)
    except GitError:
        pass

    # An unborn branch still has a symbolic HEAD
    if _git_succeeds(["symbolic-ref", "-q", "HEAD"], cwd=repo_root):
        return None
    raise RepositoryStateError("HEAD cannot be resolved to a commit.")


def get_empty_tree(repo_root: Path) -> str:
    """Get the id of the empty tree, writing it to the object database.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        The empty tree object id for the repository's hash algorithm.

    Raises:
        RepositoryStateError: If the object cannot be hashed.
    """
    try:
        return _run_git_command(
            ["hash-object", "-t", "tree", "-w", "--stdin"], cwd=repo_root, input_text=""
        )
    except GitError as e:
        raise RepositoryStateError(f"Cannot create the empty tree: {e}")


def get_commit_tree(repo_root: Path, commit: str) -> str:
    """Get the tree id of a commit.

    Raises:
        RepositoryStateError: If the commit or its tree is missing.
    """
    try:
        return _run_git_command(["rev-parse", "--verify", f"{commit}^{{tree}}"], cwd=repo_root)
    except GitError as e:
        raise RepositoryStateError(f"Cannot resolve tree of {commit}: {e}")


def resolve_baseline_tree(repo_root: Path) -> str:
    """Resolve the tree outstanding changes are measured against.

    An unborn HEAD (no commits yet) diffs against the empty tree instead of
    failing.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        The baseline tree id.

    Raises:
        RepositoryStateError: If HEAD exists but cannot be resolved.
    """
    head = get_head_commit(repo_root)
    if head is None:
        return get_empty_tree(repo_root)
    return get_commit_tree(repo_root, head)


def resolve_signature(repo_root: Path) -> tuple[str, str]:
    """Resolve author and committer identity from repository configuration.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Tuple of (author ident, committer ident).

    Raises:
        ObjectWriteError: If no identity is configured.
    """
    try:
        author = _run_git_command(["var", "GIT_AUTHOR_IDENT"], cwd=repo_root)
        committer = _run_git_command(["var", "GIT_COMMITTER_IDENT"], cwd=repo_root)
    except GitError as e:
        raise ObjectWriteError(
            "No commit signature configured. Set user.name and user.email:\n"
            f"  git config user.name \"Your Name\"\n  git config user.email you@example.com\n{e}"
        )
    return author, committer


def write_tree(repo_root: Path) -> str:
    """Write the current index to a tree object.

    Raises:
        ObjectWriteError: If the tree cannot be written.
    """
    try:
        return _run_git_command(["write-tree"], cwd=repo_root)
    except GitError as e:
        raise ObjectWriteError(f"Failed to write tree: {e}")


def signature_env(signature: tuple[str, str]) -> dict[str, str]:
    """Turn (author ident, committer ident) into git identity variables.

    Timestamps are dropped so each commit is dated when it is created.

    Raises:
        ObjectWriteError: If an ident is not in git's "Name <email> time tz" form.
    """
    env = {}
    for role, ident in zip(("AUTHOR", "COMMITTER"), signature):
        match = _IDENT_RE.match(ident)
        if match is None:
            raise ObjectWriteError(f"Malformed {role.lower()} identity: {ident}")
        env[f"GIT_{role}_NAME"] = match.group(1)
        env[f"GIT_{role}_EMAIL"] = match.group(2)
    return env


def commit_tree(
    repo_root: Path,
    tree: str,
    parents: list[str],
    message: str,
    signature: Optional[tuple[str, str]] = None,
) -> str:
    """Create a commit object for a tree.

    Args:
        repo_root: The root directory of the git repository.
        tree: Tree object id.
        parents: Parent commit ids (empty for a root commit).
        message: Full commit message.
        signature: (author ident, committer ident) from resolve_signature. When
            omitted, git resolves the identity itself.

    Returns:
        The new commit id.

    Raises:
        ObjectWriteError: If the commit cannot be created.
    """
    args = ["commit-tree", tree]
    for parent in parents:
        args += ["-p", parent]
    args += ["-F", "-"]
    env = signature_env(signature) if signature is not None else None
    try:
        return _run_git_command(args, cwd=repo_root, input_text=message, env=env)
    except GitError as e:
        raise ObjectWriteError(f"Failed to create commit: {e}")


def update_head(repo_root: Path, new: str, old: Optional[str], reason: str) -> None:
    """Point HEAD (through its branch, if symbolic) at a new commit.

    The update only succeeds if HEAD still points at `old`; an unborn HEAD is
    expected to have no value yet.

    Raises:
        ObjectWriteError: If the ref cannot be updated.
    """
    expected = old if old is not None else "0" * len(new)
    try:
        _run_git_command(["update-ref", "-m", reason, "HEAD", new, expected], cwd=repo_root)
    except GitError as e:
        raise ObjectWriteError(f"Failed to advance HEAD to {new}: {e}")
