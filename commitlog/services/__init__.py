"""
Service layer for commitlog.

Services hold the changelog logic on top of domain objects:
- TagIndex: Version tags ordered by semantic version
- range_resolver: Explicit or tag-autodetected commit ranges
- classifier: Conventional Commit header classification
- grouping: Ignore rules, grouping and section order
- ChangelogService: The end-to-end pipeline for one repository
"""

from .tag_index import TagIndex, compile_tag_pattern, parse_tag
from .range_resolver import resolve, parse_revision_spec, select_prefix
from .classifier import classify, classify_all
from .grouping import process, GROUP_PRECEDENCE
from .changelog_service import ChangelogService

__all__ = [
    'TagIndex',
    'compile_tag_pattern',
    'parse_tag',
    'resolve',
    'parse_revision_spec',
    'select_prefix',
    'classify',
    'classify_all',
    'process',
    'GROUP_PRECEDENCE',
    'ChangelogService',
]
