"""Tests for hunkplan.compose.message module."""

from hunkplan.compose.message import CommitOptions, format_commit_message, format_commit_prefix
from hunkplan.compose.models import CommitMessage, CommitType


class TestFormatCommitPrefix:
    """Tests for format_commit_prefix function."""

    def test_type_only(self):
        message = CommitMessage(type=CommitType.FIX, description="handle empty input")
        assert format_commit_prefix(message) == "fix"

    def test_scope_lowercased(self):
        message = CommitMessage(type=CommitType.FEAT, scope="API", description="add route")
        assert format_commit_prefix(message) == "feat(api)"

    def test_breaking_symbol_before_scope(self):
        message = CommitMessage(type=CommitType.FEAT, scope="cli", breaking=True, description="drop flag")
        assert format_commit_prefix(message) == "feat!(cli)"

    def test_custom_breaking_symbol(self):
        message = CommitMessage(type=CommitType.REFACTOR, breaking=True, description="rename")
        options = CommitOptions(breaking_symbol="💥")
        assert format_commit_prefix(message, options) == "refactor💥"

    def test_capitalize_prefix(self):
        message = CommitMessage(type=CommitType.DOCS, description="update readme")
        assert format_commit_prefix(message, CommitOptions(capitalize_prefix=True)) == "Docs"

    def test_scope_and_breaking_disabled(self):
        message = CommitMessage(type=CommitType.FEAT, scope="core", breaking=True, description="x")
        options = CommitOptions(include_scope=False, include_breaking=False)
        assert format_commit_prefix(message, options) == "feat"

    def test_blank_scope_ignored(self):
        message = CommitMessage(type=CommitType.CHORE, scope="  ", description="tidy")
        assert format_commit_prefix(message) == "chore"


class TestFormatCommitMessage:
    """Tests for format_commit_message function."""

    def test_subject_only(self):
        message = CommitMessage(type=CommitType.FEAT, description="add new.rs")
        assert format_commit_message(message) == "feat: add new.rs\n"

    def test_with_body(self):
        message = CommitMessage(
            type=CommitType.FIX,
            scope="parser",
            description="keep trailing newline",
            body="The last line lost its newline.\n",
        )

        assert format_commit_message(message) == (
            "fix(parser): keep trailing newline\n\nThe last line lost its newline.\n"
        )

    def test_blank_body_ignored(self):
        message = CommitMessage(type=CommitType.TEST, description="cover status", body="   ")
        assert format_commit_message(message) == "test: cover status\n"
