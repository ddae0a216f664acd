"""
Git client infrastructure for commitlog.

Provides a clean abstraction over git command execution.
All history reads go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from the changelog logic
"""

import subprocess
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Set, Tuple
import logging

from ..domain import RawCommit
from ..exit_codes import RepositoryError, ResolutionError

logger = logging.getLogger(__name__)

# Field/record separators for `git log` output (bodies may contain anything else)
FIELD_SEP = "\x1f"
RECORD_SEP = "\x1e"
LOG_FORMAT = FIELD_SEP.join(["%H", "%an", "%ae", "%aI", "%B"]) + RECORD_SEP


class GitClient:
    """
    Commit history provider backed by the git executable.

    Example:
        client = GitClient()
        tags = client.list_tags("/path/to/repo")
        to = client.resolve_revision("/path/to/repo", "v1.1.0")
        commits = client.commits_between("/path/to/repo", None, to)
    """

    def __init__(self, timeout: int = 30):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: 30)
        """
        self.timeout = timeout

    def _run(self, args: List[str], cwd: str) -> Tuple[str, int, str]:
        """
        Run a git command.

        Args:
            args: Git arguments (without the leading "git")
            cwd: Working directory

        Returns:
            Tuple of (stdout, returncode, stderr)

        Raises:
            RepositoryError: If git cannot be started or times out
        """
        cmd = ["git"] + args
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            raise RepositoryError(f"Git command timed out after {self.timeout}s", cwd)
        except FileNotFoundError:
            if not Path(cwd).exists():
                raise RepositoryError("Repository path does not exist", cwd)
            raise RepositoryError("git executable not found", cwd)
        except OSError as e:
            raise RepositoryError(f"Cannot run git ({e})", cwd)

        logger.debug(f"{' '.join(cmd)} -> {result.returncode}")
        return result.stdout, result.returncode, result.stderr.strip()

    def is_git_repo(self, path: str) -> bool:
        """Check if path is inside a git repository."""
        if not Path(path).is_dir():
            return False
        _, code, _ = self._run(["rev-parse", "--git-dir"], cwd=path)
        return code == 0

    def ensure_repo(self, path: str) -> None:
        """
        Raises:
            RepositoryError: If path is missing or not a git repository
        """
        if not Path(path).exists():
            raise RepositoryError("Repository path does not exist", path)
        if not self.is_git_repo(path):
            raise RepositoryError("Not a git repository", path)

    def list_tags(self, path: str) -> Set[str]:
        """All tag names in the repository."""
        output, code, stderr = self._run(["tag", "--list"], cwd=path)
        if code != 0:
            raise RepositoryError(f"Cannot list tags ({stderr})", path)
        return {line.strip() for line in output.splitlines() if line.strip()}

    def resolve_revision(self, path: str, expr: str) -> str:
        """
        Resolve a revision expression to a full commit hash.

        Raises:
            ResolutionError: If the expression does not name a commit
        """
        if not expr or expr.startswith("-"):
            raise ResolutionError(f"Invalid revision: {expr!r}")
        output, code, _ = self._run(
            ["rev-parse", "--verify", "--quiet", f"{expr}^{{commit}}"],
            cwd=path
        )
        if code != 0 or not output.strip():
            raise ResolutionError(f"Revision {expr!r} does not resolve to a commit")
        return output.strip()

    def is_ancestor(self, path: str, ancestor: str, descendant: str) -> bool:
        """True if ``ancestor`` is reachable from ``descendant``."""
        _, code, stderr = self._run(
            ["merge-base", "--is-ancestor", ancestor, descendant], cwd=path
        )
        if code not in (0, 1):
            raise RepositoryError(f"Cannot compare revisions ({stderr})", path)
        return code == 0

    def commit_date(self, path: str, rev: str) -> datetime:
        """Committer date of a revision."""
        output, code, stderr = self._run(
            ["log", "-1", "--format=%cI", rev, "--"], cwd=path
        )
        if code != 0 or not output.strip():
            raise ResolutionError(f"Cannot read date of {rev!r} ({stderr})")
        return datetime.fromisoformat(output.strip())

    def commits_between(self, path: str, start: Optional[str], end: str) -> List[RawCommit]:
        """
        Commits reachable from ``end`` but not from ``start``, newest first.

        Merge commits are left out. ``start=None`` walks back to the root.

        Args:
            path: Path to git repository
            start: Exclusive lower bound (commit hash), or None
            end: Inclusive upper bound (commit hash)

        Returns:
            List of RawCommit objects
        """
        rev = f"{start}..{end}" if start else end
        output, code, stderr = self._run(
            ["log", "--no-merges", f"--format={LOG_FORMAT}", rev, "--"], cwd=path
        )
        if code != 0:
            raise RepositoryError(f"Cannot read history for {rev} ({stderr})", path)
        return parse_log(output)

    def remote_url(self, path: str, remote: str = "origin") -> Optional[str]:
        """
        Get remote URL.

        Args:
            path: Path to git repository
            remote: Remote name (default: "origin")

        Returns:
            Remote URL or None if not found
        """
        output, code, _ = self._run(["config", "--get", f"remote.{remote}.url"], cwd=path)
        if code == 0 and output.strip():
            return output.strip()
        return None


def parse_log(output: str) -> List[RawCommit]:
    """Parse `git log` output produced with LOG_FORMAT."""
    commits = []
    for record in output.split(RECORD_SEP):
        record = record.strip("\n")
        if not record.strip():
            continue

        parts = record.split(FIELD_SEP, 4)
        if len(parts) < 5:
            logger.warning(f"Skipping malformed log record: {record[:40]!r}")
            continue

        commit_hash, author, email, date_str, message = parts
        commits.append(RawCommit(
            hash=commit_hash.strip(),
            author_name=author.strip(),
            author_email=email.strip() or None,
            date=datetime.fromisoformat(date_str.strip()),
            message=message.strip("\n"),
        ))
    return commits
