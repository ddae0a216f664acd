"""
Conventional Commit classification.

Reads the header line of a commit message:

    type(scope)!: summary

Classification never fails. Headers that do not follow the grammar, or
that use an unknown type, become OTHER with the whole header as summary,
so one odd commit message cannot abort a run.
"""

import re
from typing import Iterable, List

from ..domain import ClassifiedCommit, CommitType, RawCommit

HEADER_PATTERN = re.compile(
    r'^(?P<type>[A-Za-z]+)'
    r'(?:\((?P<scope>[^()]*)\))?'
    r'(?P<breaking>!)?'
    r': (?P<summary>.*)$'
)

BREAKING_FOOTER_PATTERN = re.compile(r'^BREAKING[ -]CHANGE: ', re.MULTILINE)


def _fallback(commit: RawCommit) -> ClassifiedCommit:
    return ClassifiedCommit(
        type=CommitType.OTHER,
        summary=commit.first_line,
        source=commit,
    )


def classify(commit: RawCommit, scan_breaking_footer: bool = False) -> ClassifiedCommit:
    """
    Classify one commit from its header line.

    Args:
        commit: Commit to classify
        scan_breaking_footer: Also treat a ``BREAKING CHANGE:`` footer in the
            body as a breaking marker

    Returns:
        ClassifiedCommit (type OTHER when the header is not conventional)
    """
    header = commit.first_line
    match = HEADER_PATTERN.match(header)
    if not match:
        return _fallback(commit)

    commit_type = CommitType.lookup(match.group('type'))
    summary = match.group('summary').strip()
    if not summary or (commit_type is CommitType.OTHER
                       and match.group('type').lower() != CommitType.OTHER.value):
        return _fallback(commit)

    is_breaking = match.group('breaking') is not None
    if not is_breaking and scan_breaking_footer:
        body = commit.message.split('\n', 1)[1] if '\n' in commit.message else ''
        is_breaking = bool(BREAKING_FOOTER_PATTERN.search(body))

    return ClassifiedCommit(
        type=commit_type,
        scope=match.group('scope'),
        is_breaking=is_breaking,
        summary=summary,
        source=commit,
    )


def classify_all(commits: Iterable[RawCommit], scan_breaking_footer: bool = False) -> List[ClassifiedCommit]:
    """Classify commits, preserving their order."""
    return [classify(c, scan_breaking_footer=scan_breaking_footer) for c in commits]
