"""Shared fixtures for commitlog tests."""

import os
import shutil
import subprocess
from datetime import datetime, timezone

import pytest

from commitlog.domain import RawCommit

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not installed")


def make_commit(message, hash=None, author="Test User", email="test-user@test.com",
                date=None, n=0):
    """Build a RawCommit with a predictable hash."""
    return RawCommit(
        hash=hash or f"{n:07x}d185faf719f12292414c88872e3397fc5",
        author_name=author,
        author_email=email,
        message=message,
        date=date or datetime(2020, 4, 1, 1, 1, n, tzinfo=timezone.utc),
    )


class GitRepo:
    """Throwaway git repository driven through the git executable."""

    def __init__(self, path):
        self.path = path
        self._tick = 0
        self.run("init", "-q")
        self.run("config", "user.name", "Test User")
        self.run("config", "user.email", "test-user@test.com")
        self.run("config", "commit.gpgsign", "false")
        self.run("config", "tag.gpgsign", "false")

    def run(self, *args):
        env = dict(os.environ)
        stamp = f"2020-04-29T16:{self._tick // 60:02d}:{self._tick % 60:02d}+09:00"
        env.update({
            "GIT_AUTHOR_DATE": stamp,
            "GIT_COMMITTER_DATE": stamp,
            "GIT_CONFIG_NOSYSTEM": "1",
            "HOME": str(self.path),
        })
        result = subprocess.run(
            ["git", *args], cwd=self.path, env=env,
            capture_output=True, text=True, check=True,
        )
        return result.stdout.strip()

    def commit(self, message):
        """Create an empty commit and return its full hash."""
        self._tick += 1
        self.run("commit", "-q", "--allow-empty", "-m", message)
        return self.run("rev-parse", "HEAD")

    def tag(self, name):
        self.run("tag", name)


@pytest.fixture
def git_repo(tmp_path):
    """An empty repository with a fixed identity."""
    if shutil.which("git") is None:
        pytest.skip("git executable not installed")
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    return GitRepo(repo_dir)


@pytest.fixture
def released_repo(git_repo):
    """
    Repository with two releases:

        v1.0.0: feat: first feature, chore: add README
        v1.1.0: feat: add x, fix: fix build script, chore: bump deps
    """
    git_repo.commit("feat: first feature")
    git_repo.commit("chore: add README")
    git_repo.tag("v1.0.0")
    git_repo.commit("feat: add x")
    git_repo.commit("fix(build): fix build script")
    git_repo.commit("chore: bump deps")
    git_repo.tag("v1.1.0")
    return git_repo


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's real configuration and COMMITLOG_* variables out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("COMMITLOG_"):
            monkeypatch.delenv(key)
    return home
