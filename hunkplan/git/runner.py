"""Git command runner and repository utilities.

Contains:
- _run_git_command: Run a git command and return its output
- _git_succeeds: Run a git check and report whether it exited cleanly
- get_repo_root: Get the root directory of the current git repository

Git output is read as bytes and decoded as UTF-8 with surrogateescape, so
CRLF line endings survive and bytes that are not UTF-8 round-trip unchanged
when the text is fed back to git (patches, paths).
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

from hunkplan.git.exceptions import GitError

LOG = logging.getLogger(__name__)

GIT_ENCODING = "utf-8"
GIT_ERRORS = "surrogateescape"


def _run_git_command(
    args: list[str],
    cwd: Optional[Path] = None,
    input_text: Optional[str] = None,
    strip: bool = True,
    env: Optional[dict[str, str]] = None,
) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run git in (defaults to the process cwd).
        input_text: Optional text fed to git on stdin.
        strip: Strip surrounding whitespace from stdout. Diff output must be
            kept verbatim, so callers reading patches pass False.
        env: Extra environment variables for this command only.

    Returns:
        The stdout of the git command.

    Raises:
        GitError: If the command fails.
    """
    LOG.debug("Running git command: git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            check=True,
            cwd=cwd,
            input=input_text.encode(GIT_ENCODING, GIT_ERRORS) if input_text is not None else None,
            env={**os.environ, **env} if env else None,
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or b"").decode(GIT_ENCODING, "replace").strip()
        LOG.debug("git stderr: %s", stderr)
        raise GitError(f"Git command failed: git {' '.join(args)}\n{stderr}")
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH.")
    output = result.stdout.decode(GIT_ENCODING, GIT_ERRORS)
    return output.strip() if strip else output


def _git_succeeds(args: list[str], cwd: Optional[Path] = None) -> bool:
    """Run a git command and return True if it exited with status 0.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run git in.

    Returns:
        Whether the command succeeded.
    """
    try:
        _run_git_command(args, cwd=cwd)
    except GitError:
        return False
    return True


def get_repo_root(path: Optional[Path] = None) -> Path:
    """Get the root directory of the current git repository.

    Args:
        path: Directory to start from (defaults to the process cwd).

    Returns:
        Path to the repository root.

    Raises:
        GitError: If not in a git repository.
    """
    try:
        root = _run_git_command(["rev-parse", "--show-toplevel"], cwd=path)
        return Path(root)
    except GitError:
        raise GitError("Not in a git repository. Please run this command from within a git repo.")
