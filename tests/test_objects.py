"""Tests for hunkplan.git.objects module."""

import pytest

from hunkplan.git.exceptions import ObjectWriteError
from hunkplan.git.objects import (
    commit_tree,
    get_head_commit,
    resolve_baseline_tree,
    resolve_signature,
    signature_env,
    write_tree,
)


class TestSignatureEnv:
    """Tests for signature_env function."""

    def test_splits_idents(self):
        env = signature_env((
            "Alice Author <alice@example.com> 1700000000 +0000",
            "Bob <bob@example.com> 1700000000 -0130",
        ))

        assert env == {
            "GIT_AUTHOR_NAME": "Alice Author",
            "GIT_AUTHOR_EMAIL": "alice@example.com",
            "GIT_COMMITTER_NAME": "Bob",
            "GIT_COMMITTER_EMAIL": "bob@example.com",
        }

    def test_malformed_ident(self):
        with pytest.raises(ObjectWriteError, match="Malformed author identity"):
            signature_env(("Alice", "Bob <bob@example.com> 1700000000 +0000"))


class TestResolveSignature:
    """Tests for resolve_signature function."""

    def test_repository_identity(self, temp_repo):
        author, committer = resolve_signature(temp_repo)

        assert author.startswith("Test User <test@example.com> ")
        assert committer.startswith("Test User <test@example.com> ")

    def test_missing_identity(self, temp_repo, git):
        git(temp_repo, "config", "--unset", "user.name")
        git(temp_repo, "config", "--unset", "user.email")
        git(temp_repo, "config", "user.useConfigOnly", "true")

        with pytest.raises(ObjectWriteError, match="No commit signature configured"):
            resolve_signature(temp_repo)


class TestCommitTree:
    """Tests for commit_tree function."""

    def test_explicit_signature(self, temp_repo, git):
        head = get_head_commit(temp_repo)
        signature = (
            "Alice Author <alice@example.com> 1700000000 +0000",
            "Bob Committer <bob@example.com> 1700000000 +0000",
        )

        commit = commit_tree(temp_repo, write_tree(temp_repo), [head], "chore: empty\n", signature=signature)

        fields = git(temp_repo, "log", "-1", "--format=%an|%ae|%cn|%ce|%P|%s", commit).strip()
        assert fields == f"Alice Author|alice@example.com|Bob Committer|bob@example.com|{head}|chore: empty"

    def test_signature_does_not_need_configuration(self, temp_repo, git):
        git(temp_repo, "config", "--unset", "user.name")
        git(temp_repo, "config", "--unset", "user.email")
        git(temp_repo, "config", "user.useConfigOnly", "true")
        signature = ("Alice <alice@example.com> 1700000000 +0000",) * 2

        commit = commit_tree(temp_repo, write_tree(temp_repo), [], "root\n", signature=signature)

        assert git(temp_repo, "log", "-1", "--format=%an", commit).strip() == "Alice"

    def test_root_commit_without_signature(self, unborn_repo, git):
        tree = resolve_baseline_tree(unborn_repo)

        commit = commit_tree(unborn_repo, tree, [], "first\n")

        assert git(unborn_repo, "rev-list", "--parents", "-n", "1", commit).split() == [commit]
        assert git(unborn_repo, "log", "-1", "--format=%an", commit).strip() == "Test User"

    def test_bad_tree(self, temp_repo):
        with pytest.raises(ObjectWriteError, match="Failed to create commit"):
            commit_tree(temp_repo, "0" * 40, [], "broken\n")
