"""
Infrastructure layer for commitlog.

Contains abstractions for external systems:
- GitClient: Git command execution (the commit history provider)

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, parse_log

__all__ = [
    'GitClient',
    'parse_log',
]
