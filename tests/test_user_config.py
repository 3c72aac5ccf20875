"""Tests for hunkplan.user_config module."""

import yaml

from hunkplan.compose.message import CommitOptions
from hunkplan.user_config import (
    DEFAULT_CONFIG,
    add_truncate_pattern,
    get_commit_options,
    get_config_file,
    get_truncate_patterns,
    load_config,
    remove_truncate_pattern,
    save_config,
)


def _write_config(repo_root, config):
    config_file = get_config_file(repo_root)
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        yaml.dump(config, f)


class TestGetConfigFile:
    """Tests for get_config_file function."""

    def test_returns_correct_path(self, temp_dir):
        """Test that correct config path is returned."""
        config_file = get_config_file(temp_dir)
        assert config_file.name == "config.yaml"
        assert config_file.parent.name == ".hunkplan"

    def test_does_not_create_directory(self, temp_dir):
        get_config_file(temp_dir)
        assert not (temp_dir / ".hunkplan").exists()


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_when_missing(self, temp_dir):
        """Test that a missing file reads as defaults without being created."""
        config = load_config(temp_dir)

        assert config == DEFAULT_CONFIG
        assert not get_config_file(temp_dir).exists()

    def test_returns_copy_of_defaults(self, temp_dir):
        config = load_config(temp_dir)
        config["truncate"].append("mutated")

        assert "mutated" not in DEFAULT_CONFIG["truncate"]

    def test_loads_existing_config(self, temp_dir):
        """Test loading existing config file."""
        _write_config(temp_dir, {"truncate": ["custom.lock", "*.log"]})

        config = load_config(temp_dir)

        assert config["truncate"] == ["custom.lock", "*.log"]

    def test_merges_with_defaults(self, temp_dir):
        """Test that missing keys are filled from defaults."""
        _write_config(temp_dir, {"truncate": []})

        config = load_config(temp_dir)

        assert config["truncate"] == []
        assert config["commit"] == DEFAULT_CONFIG["commit"]

    def test_corrupted_config_returns_defaults(self, temp_dir):
        config_file = get_config_file(temp_dir)
        config_file.parent.mkdir(parents=True)
        config_file.write_text("truncate: [unclosed\n")

        assert load_config(temp_dir) == DEFAULT_CONFIG

    def test_non_mapping_returns_defaults(self, temp_dir):
        config_file = get_config_file(temp_dir)
        config_file.parent.mkdir(parents=True)
        config_file.write_text("- just\n- a list\n")

        assert load_config(temp_dir) == DEFAULT_CONFIG


class TestSaveConfig:
    """Tests for save_config function."""

    def test_round_trip(self, temp_dir):
        config = {"truncate": ["a.lock"], "commit": {"capitalize_prefix": True}}

        save_config(temp_dir, config)

        with open(get_config_file(temp_dir)) as f:
            assert yaml.safe_load(f) == config

    def test_preserves_key_order(self, temp_dir):
        save_config(temp_dir, {"truncate": [], "commit": {}})

        text = get_config_file(temp_dir).read_text()
        assert text.index("truncate") < text.index("commit")


class TestTruncatePatterns:
    """Tests for truncate pattern helpers."""

    def test_defaults(self, temp_dir):
        patterns = get_truncate_patterns(temp_dir)
        assert "Cargo.lock" in patterns
        assert "package-lock.json" in patterns

    def test_add_pattern(self, temp_dir):
        add_truncate_pattern(temp_dir, "*.log")

        assert "*.log" in get_truncate_patterns(temp_dir)
        assert get_config_file(temp_dir).exists()

    def test_add_duplicate_is_noop(self, temp_dir):
        add_truncate_pattern(temp_dir, "*.log")
        add_truncate_pattern(temp_dir, "*.log")

        assert get_truncate_patterns(temp_dir).count("*.log") == 1

    def test_remove_pattern(self, temp_dir):
        add_truncate_pattern(temp_dir, "*.log")

        assert remove_truncate_pattern(temp_dir, "*.log") is True
        assert "*.log" not in get_truncate_patterns(temp_dir)

    def test_remove_missing_pattern(self, temp_dir):
        assert remove_truncate_pattern(temp_dir, "never-added") is False
        assert not get_config_file(temp_dir).exists()

    def test_invalid_section_falls_back(self, temp_dir):
        _write_config(temp_dir, {"truncate": "not a list"})
        assert get_truncate_patterns(temp_dir) == DEFAULT_CONFIG["truncate"]


class TestGetCommitOptions:
    """Tests for get_commit_options function."""

    def test_defaults(self, temp_dir):
        options = get_commit_options(temp_dir)

        assert isinstance(options, CommitOptions)
        assert options.capitalize_prefix is False
        assert options.include_scope is True
        assert options.include_breaking is True
        assert options.breaking_symbol == "!"

    def test_partial_section(self, temp_dir):
        _write_config(temp_dir, {"commit": {"capitalize_prefix": True, "breaking_symbol": "⚠"}})

        options = get_commit_options(temp_dir)

        assert options.capitalize_prefix is True
        assert options.breaking_symbol == "⚠"
        assert options.include_scope is True

    def test_invalid_values_fall_back(self, temp_dir):
        _write_config(temp_dir, {"commit": {"include_scope": {"nested": "mapping"}}})

        assert get_commit_options(temp_dir) == CommitOptions(**DEFAULT_CONFIG["commit"])
