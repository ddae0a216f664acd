"""
Filter and group engine for commitlog.

Drops ignored commits and arranges the rest into changelog sections.
"""

import logging
from typing import Collection, Dict, Iterable, List, Optional, Pattern, Set

from ..domain import ChangelogGroup, ClassifiedCommit, CommitType

logger = logging.getLogger(__name__)

# Section order; not configurable, and independent of --reverse
GROUP_PRECEDENCE = (
    CommitType.FEAT,
    CommitType.FIX,
    CommitType.PERF,
    CommitType.REFACTOR,
    CommitType.REVERT,
    CommitType.DOCS,
    CommitType.STYLE,
    CommitType.TEST,
    CommitType.BUILD,
    CommitType.CI,
    CommitType.CHORE,
    CommitType.OTHER,
)

GROUP_RANK: Dict[CommitType, int] = {t: rank for rank, t in enumerate(GROUP_PRECEDENCE)}


def is_ignored(
    commit: ClassifiedCommit,
    ignore_types: Collection[CommitType],
    ignore_summary_pattern: Optional[Pattern] = None,
) -> bool:
    """True if the commit's type or summary is on the ignore list."""
    if commit.type in ignore_types:
        return True
    if ignore_summary_pattern is not None and ignore_summary_pattern.search(commit.summary):
        return True
    return False


def process(
    commits: Iterable[ClassifiedCommit],
    ignore_types: Optional[Collection[CommitType]] = None,
    ignore_summary_pattern: Optional[Pattern] = None,
    reverse: bool = False,
) -> List[ChangelogGroup]:
    """
    Filter commits and group them by type.

    Args:
        commits: Classified commits in provider order (newest first)
        ignore_types: Types to drop entirely
        ignore_summary_pattern: Drop commits whose summary matches (search)
        reverse: List entries oldest first within each group

    Returns:
        Non-empty groups in canonical section order
    """
    ignore_types = set(ignore_types or ())
    buckets: Dict[CommitType, List[ClassifiedCommit]] = {}
    seen: Set[str] = set()

    for commit in commits:
        if commit.hash in seen:
            logger.debug(f"Dropping duplicate commit {commit.source.short_hash}")
            continue
        seen.add(commit.hash)

        if is_ignored(commit, ignore_types, ignore_summary_pattern):
            logger.debug(f"Ignoring {commit.source.short_hash} ({commit.type.value}): {commit.summary}")
            continue
        buckets.setdefault(commit.type, []).append(commit)

    groups = []
    for commit_type in sorted(buckets, key=GROUP_RANK.__getitem__):
        entries = buckets[commit_type]
        if reverse:
            entries = entries[::-1]
        groups.append(ChangelogGroup(type=commit_type, entries=tuple(entries)))
    return groups
