"""
Tests for GitClient against real throwaway repositories.
"""

import subprocess
from datetime import date
from unittest.mock import patch

import pytest

from commitlog.exit_codes import RepositoryError, ResolutionError
from commitlog.infra import GitClient, parse_log
from commitlog.infra.git_client import FIELD_SEP, RECORD_SEP
from tests.conftest import requires_git

pytestmark = requires_git


@pytest.fixture
def client():
    return GitClient(timeout=10)


class TestRepositoryChecks:
    """Repository detection."""

    def test_is_git_repo(self, client, git_repo, tmp_path):
        git_repo.commit("feat: init")
        assert client.is_git_repo(str(git_repo.path))
        assert not client.is_git_repo(str(tmp_path / "missing"))

    def test_ensure_repo_missing_path(self, client, tmp_path):
        with pytest.raises(RepositoryError, match="does not exist"):
            client.ensure_repo(str(tmp_path / "missing"))

    def test_ensure_repo_not_a_repo(self, client, tmp_path, monkeypatch):
        plain = tmp_path / "plain"
        plain.mkdir()
        monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
        with pytest.raises(RepositoryError, match="Not a git repository"):
            client.ensure_repo(str(plain))

    def test_timeout(self, client, tmp_path):
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("git", 10)):
            with pytest.raises(RepositoryError, match="timed out"):
                client.list_tags(str(tmp_path))

    def test_git_missing(self, client, tmp_path):
        with patch("subprocess.run", side_effect=FileNotFoundError("git")):
            with pytest.raises(RepositoryError, match="git executable not found"):
                client.list_tags(str(tmp_path))


class TestRevisions:
    """Tags, revisions and ancestry."""

    def test_list_tags(self, client, released_repo):
        assert client.list_tags(str(released_repo.path)) == {"v1.0.0", "v1.1.0"}

    def test_resolve_revision(self, client, released_repo):
        path = str(released_repo.path)
        head = released_repo.run("rev-parse", "HEAD")
        assert client.resolve_revision(path, "v1.1.0") == head
        assert client.resolve_revision(path, "HEAD") == head
        assert client.resolve_revision(path, head[:7]) == head

    @pytest.mark.parametrize("expr", ["v9.9.9", "", "--all"])
    def test_resolve_revision_failure(self, client, released_repo, expr):
        with pytest.raises(ResolutionError):
            client.resolve_revision(str(released_repo.path), expr)

    def test_is_ancestor(self, client, released_repo):
        path = str(released_repo.path)
        old = client.resolve_revision(path, "v1.0.0")
        new = client.resolve_revision(path, "v1.1.0")
        assert client.is_ancestor(path, old, new)
        assert not client.is_ancestor(path, new, old)

    def test_commit_date(self, client, released_repo):
        assert client.commit_date(str(released_repo.path), "v1.1.0").date() == date(2020, 4, 29)

    def test_remote_url(self, client, released_repo):
        path = str(released_repo.path)
        assert client.remote_url(path) is None
        released_repo.run("remote", "add", "origin", "git@github.com:owner/repo.git")
        assert client.remote_url(path) == "git@github.com:owner/repo.git"
        assert client.remote_url(path, "upstream") is None


class TestCommitsBetween:
    """History reads."""

    def test_range_newest_first(self, client, released_repo):
        path = str(released_repo.path)
        start = client.resolve_revision(path, "v1.0.0")
        end = client.resolve_revision(path, "v1.1.0")
        commits = client.commits_between(path, start, end)
        assert [c.first_line for c in commits] == [
            "chore: bump deps", "fix(build): fix build script", "feat: add x",
        ]
        assert commits[0].hash == end
        assert commits[0].author_name == "Test User"
        assert commits[0].author_email == "test-user@test.com"

    def test_from_root(self, client, released_repo):
        path = str(released_repo.path)
        end = client.resolve_revision(path, "v1.0.0")
        commits = client.commits_between(path, None, end)
        assert [c.first_line for c in commits] == ["chore: add README", "feat: first feature"]

    def test_multiline_body(self, client, git_repo):
        path = str(git_repo.path)
        end = git_repo.commit("feat!: drop v1 api\n\nBREAKING CHANGE: gone")
        [commit] = client.commits_between(path, None, end)
        assert commit.first_line == "feat!: drop v1 api"
        assert commit.message.endswith("BREAKING CHANGE: gone")

    def test_merges_excluded(self, client, git_repo):
        path = str(git_repo.path)
        git_repo.commit("feat: base")
        base_branch = git_repo.run("rev-parse", "--abbrev-ref", "HEAD")
        git_repo.run("checkout", "-q", "-b", "topic")
        git_repo.commit("fix: on topic")
        git_repo.run("checkout", "-q", base_branch)
        git_repo.commit("docs: on main")
        git_repo.run("merge", "-q", "--no-ff", "--no-edit", "topic")

        commits = client.commits_between(path, None, client.resolve_revision(path, "HEAD"))
        assert sorted(c.first_line for c in commits) == ["docs: on main", "feat: base", "fix: on topic"]


class TestParseLog:
    """Parsing of the log format."""

    def test_parse(self):
        record = FIELD_SEP.join([
            "a" * 40, "Jane Doe", "jane@example.com", "2020-04-29T16:00:01+09:00",
            "feat: x\n\nbody\n",
        ])
        [commit] = parse_log(record + RECORD_SEP + "\n")
        assert commit.hash == "a" * 40
        assert commit.short_hash == "aaaaaaa"
        assert commit.author_name == "Jane Doe"
        assert commit.message == "feat: x\n\nbody"
        assert commit.date.year == 2020

    def test_empty_email(self):
        record = FIELD_SEP.join(["b" * 40, "Bot", "", "2020-04-29T16:00:01+00:00", "chore: x"])
        [commit] = parse_log(record + RECORD_SEP)
        assert commit.author_email is None

    def test_malformed_record_skipped(self):
        assert parse_log("garbage" + RECORD_SEP) == []
        assert parse_log("") == []
