"""
Tag index for commitlog.

Builds an ordered, read-only view of the repository's release tags.
Tag names that do not look like versions are skipped, not reported.
"""

import re
import logging
from typing import Dict, Iterable, Iterator, List, Optional, Pattern, Tuple, Union

from ..domain import SemanticVersion, Tag
from ..exit_codes import AmbiguousRangeError, ConfigError

logger = logging.getLogger(__name__)


def compile_tag_pattern(pattern: Union[str, Pattern]) -> Pattern:
    """
    Compile and check a tag pattern.

    The pattern must define a named ``version`` group. An optional
    ``prefix`` group overrides the default prefix, which is the text
    before the version.

    Raises:
        ConfigError: If the pattern is invalid or has no version group
    """
    if isinstance(pattern, str):
        try:
            pattern = re.compile(pattern)
        except re.error as e:
            raise ConfigError(f"Invalid tag pattern {pattern!r}: {e}")
    if 'version' not in pattern.groupindex:
        raise ConfigError(
            f"Tag pattern {pattern.pattern!r} must define a named 'version' group"
        )
    return pattern


def parse_tag(raw_name: str, pattern: Pattern) -> Optional[Tag]:
    """Parse one tag name, returning None when it is not a version tag."""
    match = pattern.match(raw_name)
    if not match or match.group('version') is None:
        return None

    try:
        version = SemanticVersion.parse(match.group('version'))
    except ValueError:
        return None

    if 'prefix' in pattern.groupindex and match.group('prefix') is not None:
        prefix = match.group('prefix')
    else:
        prefix = raw_name[:match.start('version')]

    return Tag(raw_name=raw_name, prefix=prefix, version=version)


class TagIndex:
    """
    Version tags sorted by semantic-version precedence (ascending).

    Example:
        index = TagIndex.build({"v1.0.0", "v1.1.0", "nightly"}, DEFAULT_PATTERN)
        older, newer = index.latest_two("v")
    """

    def __init__(self, tags: Iterable[Tag] = ()):
        unique: Dict[str, Tag] = {}
        for tag in tags:
            unique.setdefault(tag.raw_name, tag)
        self._tags: Tuple[Tag, ...] = tuple(sorted(unique.values(), key=Tag.sort_key))

    @classmethod
    def build(cls, raw_tag_names: Iterable[str], tag_pattern: Union[str, Pattern]) -> 'TagIndex':
        """
        Build an index from raw tag names.

        Args:
            raw_tag_names: Tag names as listed by the repository
            tag_pattern: Regex (or compiled pattern) with a ``version`` group

        Returns:
            TagIndex containing every tag that matched
        """
        pattern = compile_tag_pattern(tag_pattern)
        tags = []
        for raw_name in raw_tag_names:
            tag = parse_tag(raw_name, pattern)
            if tag is None:
                logger.debug(f"Skipping non-version tag: {raw_name}")
                continue
            tags.append(tag)
        logger.debug(f"Indexed {len(tags)} version tags")
        return cls(tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self._tags)

    def prefixes(self) -> List[str]:
        """Distinct prefixes, sorted."""
        return sorted({tag.prefix for tag in self._tags})

    def tags_with_prefix(self, prefix: Optional[str]) -> List[Tag]:
        """Tags with exactly this prefix (all tags for None), ascending."""
        if prefix is None:
            return list(self._tags)
        return [tag for tag in self._tags if tag.prefix == prefix]

    def latest_two(self, prefix_filter: Optional[str] = None) -> Tuple[Tag, Tag]:
        """
        The two highest versions under the prefix filter.

        Returns:
            (older, newer)

        Raises:
            AmbiguousRangeError: If fewer than two tags are available
        """
        candidates = self.tags_with_prefix(prefix_filter)
        if len(candidates) < 2:
            label = "any prefix" if prefix_filter is None else f"prefix {prefix_filter!r}"
            raise AmbiguousRangeError(
                f"Insufficient tag history: found {len(candidates)} version tag(s) with {label}, need 2",
                self.prefixes(),
            )
        return candidates[-2], candidates[-1]
