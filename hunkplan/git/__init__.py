"""Git access layer for hunkplan.

This package provides modular repository access with:
- exceptions: GitError, RepositoryStateError, ObjectWriteError
- runner: _run_git_command, get_repo_root
- status: StatusSummary, classify_status, parse_porcelain_status,
          get_worktree_changes
- objects: get_head_commit, get_empty_tree, resolve_baseline_tree,
           resolve_signature, signature_env, write_tree, commit_tree,
           update_head
- index: reset_index, add_to_index, remove_from_index, apply_patch_to_index
"""

# Exceptions
from hunkplan.git.exceptions import (
    GitError,
    ObjectWriteError,
    RepositoryStateError,
)

# Runner utilities
from hunkplan.git.runner import (
    _run_git_command,
    get_repo_root,
)

# Status utilities
from hunkplan.git.status import (
    StatusSummary,
    classify_status,
    get_worktree_changes,
    parse_porcelain_status,
)

# Object database and refs
from hunkplan.git.objects import (
    commit_tree,
    get_commit_tree,
    get_empty_tree,
    get_head_commit,
    resolve_baseline_tree,
    resolve_signature,
    signature_env,
    update_head,
    write_tree,
)

# Index utilities
from hunkplan.git.index import (
    add_to_index,
    apply_patch_to_index,
    remove_from_index,
    reset_index,
)


__all__ = [
    # Exceptions
    "GitError",
    "RepositoryStateError",
    "ObjectWriteError",
    # Runner
    "_run_git_command",
    "get_repo_root",
    # Status
    "StatusSummary",
    "classify_status",
    "get_worktree_changes",
    "parse_porcelain_status",
    # Objects
    "get_head_commit",
    "get_empty_tree",
    "get_commit_tree",
    "resolve_baseline_tree",
    "resolve_signature",
    "signature_env",
    "write_tree",
    "commit_tree",
    "update_head",
    # Index
    "reset_index",
    "add_to_index",
    "remove_from_index",
    "apply_patch_to_index",
]
