"""
Commit domain objects for commitlog.

RawCommit is what the history provider returns; ClassifiedCommit is the
same commit after its header has been read as a Conventional Commit.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional


class CommitType(Enum):
    """Conventional Commit types recognised in commit headers."""
    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CHORE = "chore"
    REVERT = "revert"
    OTHER = "other"     # Anything that is not a conventional header

    @classmethod
    def lookup(cls, name: str) -> 'CommitType':
        """
        Case-insensitive lookup of a header type token.

        Unknown tokens map to OTHER instead of raising.
        """
        return _TYPE_LOOKUP.get(name.strip().lower(), cls.OTHER)

    @classmethod
    def parse_option(cls, name: str) -> 'CommitType':
        """
        Strict lookup used for user-supplied type names (e.g. --ignore-types).

        Raises:
            ValueError: If the name is not a known type
        """
        key = name.strip().lower()
        if key not in _TYPE_LOOKUP:
            known = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown commit type {name!r} (expected one of: {known})")
        return _TYPE_LOOKUP[key]

    @property
    def title(self) -> str:
        """Heading text for this type's changelog section."""
        if self is CommitType.CI:
            return "CI"
        return self.value.title()


_TYPE_LOOKUP: Dict[str, CommitType] = {t.value: t for t in CommitType}
_TYPE_LOOKUP.update({
    "doc": CommitType.DOCS,
    "feature": CommitType.FEAT,
})


@dataclass(frozen=True)
class RawCommit:
    """A commit as read from the repository."""
    hash: str
    author_name: str
    message: str
    date: datetime
    author_email: Optional[str] = None

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @property
    def first_line(self) -> str:
        """The header line of the message, trimmed."""
        return self.message.split('\n', 1)[0].strip()


@dataclass(frozen=True)
class ClassifiedCommit:
    """
    A commit whose header has been classified.

    Attributes:
        type: Conventional Commit type, OTHER when the header did not parse
        scope: Text inside the header parentheses, if any
        is_breaking: True for a ``!`` header marker (or footer, when enabled)
        summary: Header text after ``: ``, or the whole header for OTHER
        source: The commit this record was derived from
    """
    type: CommitType
    summary: str
    source: RawCommit
    scope: Optional[str] = None
    is_breaking: bool = False

    @property
    def hash(self) -> str:
        return self.source.hash

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'type': self.type.value,
            'scope': self.scope,
            'is_breaking': self.is_breaking,
            'summary': self.summary,
            'hash': self.source.hash,
            'author': self.source.author_name,
            'date': self.source.date.isoformat(),
        }
