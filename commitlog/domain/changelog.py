"""
Changelog domain objects: the resolved range and the grouped commits.
"""

from dataclasses import dataclass, field
from datetime import date as Date
from typing import Optional, Tuple

from .commit import ClassifiedCommit, CommitType

HEAD = "HEAD"


@dataclass(frozen=True)
class RevisionRange:
    """
    Commit range to summarize.

    ``start`` is the exclusive lower bound (None = repository root) and
    ``end`` the inclusive upper bound.
    """
    end: str
    start: Optional[str] = None

    @property
    def is_unreleased(self) -> bool:
        return self.end == HEAD

    def __str__(self) -> str:
        if self.start is None:
            return self.end
        return f"{self.start}..{self.end}"


@dataclass(frozen=True)
class ChangelogGroup:
    """All surviving commits of one type, in display order."""
    type: CommitType
    entries: Tuple[ClassifiedCommit, ...] = ()


@dataclass(frozen=True)
class Changelog:
    """The single artifact produced per invocation."""
    range: RevisionRange
    groups: Tuple[ChangelogGroup, ...] = field(default_factory=tuple)
    date: Optional[Date] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'from': self.range.start,
            'to': self.range.end,
            'date': self.date.isoformat() if self.date else None,
            'groups': [
                {
                    'type': group.type.value,
                    'entries': [entry.to_dict() for entry in group.entries],
                }
                for group in self.groups
            ],
        }
