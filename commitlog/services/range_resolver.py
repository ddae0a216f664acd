"""
Range resolution for commitlog.

Turns either an explicit revision expression or the repository's
version tags into the (from, to) pair the changelog is built for.
"""

import logging
from typing import Dict, List, Optional

from ..domain import HEAD, RevisionRange, Tag
from ..exit_codes import AmbiguousRangeError, ConfigError
from .tag_index import TagIndex

logger = logging.getLogger(__name__)

# Prefix groups picked automatically when several exist, in order
PREFERRED_PREFIXES = ("", "v")


def parse_revision_spec(spec: str) -> RevisionRange:
    """
    Parse ``<from>..<to>`` or a bare ``<to>``.

    ``<from>..`` ends at HEAD, ``..<to>`` starts at the repository root.
    Endpoints are forwarded literally; nothing is looked up here.

    Raises:
        ConfigError: For empty, triple-dot or otherwise malformed expressions
    """
    text = spec.strip()
    if not text:
        raise ConfigError("Empty revision expression")
    if '...' in text:
        raise ConfigError(
            f"Unsupported revision expression {spec!r}: "
            "only two-dot ranges (<from>..<to>) or a single revision are supported"
        )

    parts = text.split('..')
    if len(parts) == 1:
        return RevisionRange(end=text)
    if len(parts) > 2:
        raise ConfigError(f"Invalid revision expression {spec!r}")

    start, end = parts[0].strip(), parts[1].strip()
    if not start and not end:
        raise ConfigError(f"Invalid revision expression {spec!r}")
    return RevisionRange(end=end or HEAD, start=start or None)


def group_by_prefix(index: TagIndex) -> Dict[str, List[Tag]]:
    """Partition the index by tag prefix."""
    groups: Dict[str, List[Tag]] = {}
    for tag in index:
        groups.setdefault(tag.prefix, []).append(tag)
    return groups


def select_prefix(index: TagIndex, tag_prefix_filter: Optional[str] = None) -> str:
    """
    Pick the prefix group autodetection works on.

    Raises:
        AmbiguousRangeError: If no group, or more than one, qualifies
    """
    groups = group_by_prefix(index)
    candidates = sorted(groups)

    if tag_prefix_filter is not None:
        if tag_prefix_filter not in groups:
            raise AmbiguousRangeError(
                f"No matching tags for tag prefix {tag_prefix_filter!r}",
                candidates,
            )
        return tag_prefix_filter

    if not groups:
        raise AmbiguousRangeError("Insufficient tag history: no version tags found")
    if len(groups) == 1:
        return candidates[0]

    for preferred in PREFERRED_PREFIXES:
        if preferred in groups:
            logger.debug(f"Multiple tag prefixes {candidates}, preferring {preferred!r}")
            return preferred

    raise AmbiguousRangeError(
        "Ambiguous tag prefixes, specify --tag-prefix",
        candidates,
    )


def resolve(
    explicit_spec: Optional[str],
    tag_prefix_filter: Optional[str],
    tag_index: Optional[TagIndex],
) -> RevisionRange:
    """
    Resolve the revision range to summarize.

    Args:
        explicit_spec: Revision expression from the user, or None to autodetect
        tag_prefix_filter: Exact tag prefix to restrict autodetection to
        tag_index: Version tags (only consulted when autodetecting)

    Returns:
        RevisionRange with literal endpoint names
    """
    if explicit_spec is not None:
        revision_range = parse_revision_spec(explicit_spec)
        logger.debug(f"Using explicit range {revision_range}")
        return revision_range

    index = tag_index if tag_index is not None else TagIndex()
    prefix = select_prefix(index, tag_prefix_filter)
    older, newer = index.latest_two(prefix)
    revision_range = RevisionRange(end=newer.raw_name, start=older.raw_name)
    logger.debug(f"Autodetected range {revision_range} (prefix {prefix!r})")
    return revision_range
