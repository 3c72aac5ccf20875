"""User configuration management for hunkplan.

Handles reading and writing the .hunkplan/config.yaml file in each repository.
"""

import copy
from pathlib import Path

import yaml
from pydantic import ValidationError

from hunkplan.compose.message import CommitOptions


# Default configuration values
DEFAULT_CONFIG = {
    "truncate": [
        # Lock files (auto-generated dependency files)
        "poetry.lock",
        "package-lock.json",
        "yarn.lock",
        "pnpm-lock.yaml",
        "Cargo.lock",
        "Gemfile.lock",
        "composer.lock",
        "go.sum",
        # Build artifacts
        "*.min.js",
        "*.min.css",
        "*.map",
    ],
    "commit": {
        "capitalize_prefix": False,
        "include_scope": True,
        "include_breaking": True,
        "breaking_symbol": "!",
    },
}


def get_config_dir(repo_root: Path) -> Path:
    """Get the repository config directory.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Path to .hunkplan/
    """
    return repo_root / ".hunkplan"


def get_config_file(repo_root: Path) -> Path:
    """Return path to the config.yaml file.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Path to .hunkplan/config.yaml.
    """
    return get_config_dir(repo_root) / "config.yaml"


def load_config(repo_root: Path) -> dict:
    """Load the hunkplan configuration from config.yaml.

    A missing file reads as the defaults. It is only written by save_config,
    so reading never adds an untracked file to the working tree.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        Configuration dictionary.
    """
    config_file = get_config_file(repo_root)

    if not config_file.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError):
        # If config is corrupted, return defaults
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(config, dict):
        return copy.deepcopy(DEFAULT_CONFIG)

    # Merge with defaults for any missing keys
    for key, value in DEFAULT_CONFIG.items():
        if key not in config:
            config[key] = copy.deepcopy(value)
    return config


def save_config(repo_root: Path, config: dict) -> None:
    """Save the configuration to config.yaml.

    Args:
        repo_root: The root directory of the git repository.
        config: Configuration dictionary to save.
    """
    config_file = get_config_file(repo_root)
    config_file.parent.mkdir(exist_ok=True)

    with open(config_file, "w") as f:
        yaml.dump(
            config,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


def get_truncate_patterns(repo_root: Path) -> list[str]:
    """Get the list of truncate patterns from config.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        List of file patterns rendered as "Truncated File".
    """
    config = load_config(repo_root)
    patterns = config.get("truncate")
    if not isinstance(patterns, list):
        return list(DEFAULT_CONFIG["truncate"])
    return [str(p) for p in patterns]


def add_truncate_pattern(repo_root: Path, pattern: str) -> None:
    """Add a pattern to the truncate list.

    Args:
        repo_root: The root directory of the git repository.
        pattern: File pattern to add (e.g., "*.log", "dist/*").
    """
    config = load_config(repo_root)
    if not isinstance(config.get("truncate"), list):
        config["truncate"] = []
    if pattern not in config["truncate"]:
        config["truncate"].append(pattern)
        save_config(repo_root, config)


def remove_truncate_pattern(repo_root: Path, pattern: str) -> bool:
    """Remove a pattern from the truncate list.

    Args:
        repo_root: The root directory of the git repository.
        pattern: File pattern to remove.

    Returns:
        True if pattern was found and removed, False otherwise.
    """
    config = load_config(repo_root)
    patterns = config.get("truncate")
    if isinstance(patterns, list) and pattern in patterns:
        patterns.remove(pattern)
        save_config(repo_root, config)
        return True
    return False


def get_commit_options(repo_root: Path) -> CommitOptions:
    """Get commit message options from config.

    Invalid values fall back to the defaults.

    Args:
        repo_root: The root directory of the git repository.

    Returns:
        CommitOptions for the repository.
    """
    config = load_config(repo_root)
    section = config.get("commit")
    if not isinstance(section, dict):
        return CommitOptions(**DEFAULT_CONFIG["commit"])
    try:
        return CommitOptions(**{**DEFAULT_CONFIG["commit"], **section})
    except ValidationError:
        return CommitOptions(**DEFAULT_CONFIG["commit"])
