"""
Version tag domain objects for commitlog.

Release tags are parsed into a prefix and a semantic version:
- "1.2.0"          -> prefix "",       version 1.2.0
- "v1.2.0-rc.1"    -> prefix "v",      version 1.2.0-rc.1
- "auth-v2.0.0"    -> prefix "auth-v", version 2.0.0

Both objects are immutable value objects. Ordering follows SemVer 2.0
precedence; build metadata never takes part in it.
"""

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Optional, Tuple

_NUMERIC = r'0|[1-9]\d*'
_PRE_IDENTIFIER = r'(?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)'

_SEMVER_RE = re.compile(
    rf'^(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})'
    rf'(?:-(?P<pre>{_PRE_IDENTIFIER}(?:\.{_PRE_IDENTIFIER})*))?'
    r'(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$'
)


def _identifier_key(identifier: str) -> Tuple[int, int, str]:
    # Numeric identifiers sort below alphanumeric ones
    if identifier.isdigit():
        return (0, int(identifier), "")
    return (1, 0, identifier)


@total_ordering
@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """
    A semantic version.

    Examples:
        SemanticVersion.parse("1.2.3")            -> 1.2.3
        SemanticVersion.parse("1.2.3-beta.2+abc") -> 1.2.3-beta.2+abc

    Attributes:
        major, minor, patch: Numeric version components
        pre_release: Dot-separated pre-release identifiers, if any
        build: Build metadata, if any (ignored for precedence)
    """

    major: int
    minor: int
    patch: int
    pre_release: Optional[str] = None
    build: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> 'SemanticVersion':
        """
        Parse ``MAJOR.MINOR.PATCH[-pre][+build]``.

        Raises:
            ValueError: If the text is not a semantic version
        """
        match = _SEMVER_RE.match(text.strip())
        if not match:
            raise ValueError(f"Not a semantic version: {text!r}")
        return cls(
            major=int(match.group('major')),
            minor=int(match.group('minor')),
            patch=int(match.group('patch')),
            pre_release=match.group('pre'),
            build=match.group('build'),
        )

    def precedence_key(self) -> tuple:
        """Key that sorts versions by SemVer precedence."""
        if self.pre_release is None:
            # A release outranks every pre-release of the same triple
            pre = (1, ())
        else:
            pre = (0, tuple(_identifier_key(p) for p in self.pre_release.split('.')))
        return (self.major, self.minor, self.patch, pre)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.precedence_key() == other.precedence_key()

    def __lt__(self, other) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.precedence_key() < other.precedence_key()

    def __hash__(self) -> int:
        return hash(self.precedence_key())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release:
            text += f"-{self.pre_release}"
        if self.build:
            text += f"+{self.build}"
        return text


@dataclass(frozen=True)
class Tag:
    """
    A release tag split into prefix and version.

    Attributes:
        raw_name: Tag name exactly as it appears in the repository
        prefix: Everything before the version (may be empty)
        version: Parsed semantic version
    """

    raw_name: str
    prefix: str
    version: SemanticVersion

    def sort_key(self) -> tuple:
        """Version precedence, with the raw name as a stable tie-break."""
        return (self.version.precedence_key(), self.raw_name)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'raw_name': self.raw_name,
            'prefix': self.prefix,
            'version': str(self.version),
        }

    def __str__(self) -> str:
        return self.raw_name
