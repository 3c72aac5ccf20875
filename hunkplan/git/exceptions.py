"""Git-related exception classes.

Contains all exception classes for Git operations:
- GitError: Base exception for git-related errors
- RepositoryStateError: HEAD, index or status cannot be read
- ObjectWriteError: A tree, commit, ref or signature cannot be produced
"""


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


class RepositoryStateError(GitError):
    """Raised when the repository state cannot be resolved (unresolved HEAD, corrupt index)."""

    pass


class ObjectWriteError(GitError):
    """Raised when writing a tree, commit or ref fails, or no signature is configured."""

    pass
