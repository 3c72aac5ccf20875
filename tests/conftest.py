"""Shared test fixtures and configuration."""

import subprocess
import tempfile
from pathlib import Path

import pytest


def _run_git(repo: Path, *args: str, input_text=None) -> str:
    """Run git in a test repository and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
        input=input_text,
    )
    return result.stdout


def _init_repo(repo_dir: Path) -> Path:
    repo_dir.mkdir()
    _run_git(repo_dir, "init", "-q")
    _run_git(repo_dir, "config", "user.email", "test@example.com")
    _run_git(repo_dir, "config", "user.name", "Test User")
    _run_git(repo_dir, "config", "commit.gpgsign", "false")
    _run_git(repo_dir, "config", "core.autocrlf", "false")
    return repo_dir


@pytest.fixture(autouse=True)
def isolated_git_env(monkeypatch, tmp_path):
    """Keep the user's global git configuration out of every test."""
    global_config = tmp_path / "gitconfig"
    global_config.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for name in (
        "GIT_AUTHOR_NAME",
        "GIT_AUTHOR_EMAIL",
        "GIT_COMMITTER_NAME",
        "GIT_COMMITTER_EMAIL",
        "GIT_DIR",
        "GIT_WORK_TREE",
        "GIT_INDEX_FILE",
        "EMAIL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_repo_root(temp_dir):
    """Create a mock git repository root directory."""
    # Create .git directory to simulate a git repo
    git_dir = temp_dir / ".git"
    git_dir.mkdir()
    return temp_dir


@pytest.fixture
def git():
    """Callable running git in a repository: git(repo, *args) -> stdout."""
    return _run_git


@pytest.fixture
def temp_repo(tmp_path):
    """Create a temporary git repository with one commit."""
    repo_dir = _init_repo(tmp_path / "test_repo")

    # Create initial commit
    (repo_dir / "README.md").write_text("# Test Repo\n")
    _run_git(repo_dir, "add", "README.md")
    _run_git(repo_dir, "commit", "-q", "-m", "Initial commit")

    return repo_dir


@pytest.fixture
def unborn_repo(tmp_path):
    """Create a temporary git repository with no commits yet."""
    return _init_repo(tmp_path / "unborn_repo")


@pytest.fixture
def numbered_file():
    """Content of a 20-line file, "line1" to "line20"."""
    return "".join(f"line{i}\n" for i in range(1, 21))
