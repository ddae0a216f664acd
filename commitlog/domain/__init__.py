"""
Domain layer for commitlog.

Contains pure domain objects with no I/O or side effects:
- SemanticVersion / Tag: Release tags split into prefix and version
- RawCommit / ClassifiedCommit / CommitType: Commits before and after
  Conventional Commit classification
- RevisionRange / ChangelogGroup / Changelog: The assembled changelog

These objects are immutable and provide serialization methods where
they are emitted as data.
"""

from .version import SemanticVersion, Tag
from .commit import CommitType, RawCommit, ClassifiedCommit
from .changelog import HEAD, RevisionRange, ChangelogGroup, Changelog

__all__ = [
    'SemanticVersion',
    'Tag',
    'CommitType',
    'RawCommit',
    'ClassifiedCommit',
    'HEAD',
    'RevisionRange',
    'ChangelogGroup',
    'Changelog',
]
