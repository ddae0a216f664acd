"""
Markdown rendering for commitlog.

Core functions return data, this module makes it human-readable.
Rendering is pure: the same Changelog and options always produce the
same text.
"""

import logging
import string
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .domain import Changelog, ClassifiedCommit
from .exit_codes import RenderError

COMPARE_PLACEHOLDERS = ("from", "to")
COMMIT_PLACEHOLDERS = ("hash",)

SHORT_HASH_LENGTH = 7

UNRELEASED = "Unreleased"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderOptions:
    """
    Options for the Markdown renderer.

    Attributes:
        root_indent_level: Number of '#' for the release heading (>= 1)
        enable_email_link: Render authors as mailto links when an email is known
        compare_url_template: Template with {from} and {to}, or None
        commit_url_template: Template with {hash}, or None
        mark_breaking: Prefix breaking changes with **BREAKING**
    """
    root_indent_level: int = 2
    enable_email_link: bool = False
    compare_url_template: Optional[str] = None
    commit_url_template: Optional[str] = None
    mark_breaking: bool = False


def _check_template(template: str, allowed, name: str) -> None:
    try:
        fields = [f for _, f, _, _ in string.Formatter().parse(template) if f is not None]
    except ValueError as e:
        raise RenderError(f"Malformed {name} template {template!r}: {e}")
    for field_name in fields:
        if field_name not in allowed:
            expected = ", ".join("{" + a + "}" for a in allowed)
            raise RenderError(
                f"Malformed {name} template {template!r}: "
                f"unknown placeholder {{{field_name}}} (expected {expected})"
            )


def validate_options(options: RenderOptions) -> None:
    """
    Check options before anything is rendered.

    Raises:
        RenderError: For a bad indent level or malformed link template
    """
    if options.root_indent_level < 1:
        raise RenderError(f"root_indent_level must be >= 1, got {options.root_indent_level}")
    if options.compare_url_template is not None:
        _check_template(options.compare_url_template, COMPARE_PLACEHOLDERS, "compare link")
    if options.commit_url_template is not None:
        _check_template(options.commit_url_template, COMMIT_PLACEHOLDERS, "commit link")


def format_link(template: str, **values: str) -> str:
    """Fill a link template, mapping formatting failures to RenderError."""
    try:
        return template.format(**values)
    except (KeyError, IndexError, ValueError) as e:
        raise RenderError(f"Cannot format link template {template!r}: {e}")


def render_author(commit: ClassifiedCommit, options: RenderOptions) -> str:
    """Author as plain name, or a mailto link when enabled."""
    name = commit.source.author_name or "Unknown"
    email = commit.source.author_email
    if options.enable_email_link and email:
        return f"[{name}](mailto:{email})"
    return name


def _common_prefix_length(a: str, b: str) -> int:
    size = 0
    for x, y in zip(a, b):
        if x != y:
            break
        size += 1
    return size


def abbreviate_hashes(hashes: Iterable[str], length: int = SHORT_HASH_LENGTH) -> Dict[str, str]:
    """
    Map each full hash to its shortest label of at least ``length`` chars
    that no other hash in the set shares.
    """
    ordered = sorted(set(hashes))
    labels = {}
    for i, full in enumerate(ordered):
        # Only sorted neighbours can share the longest prefix
        shared = max(
            (_common_prefix_length(full, other) for other in ordered[max(i - 1, 0):i + 2] if other != full),
            default=0,
        )
        size = min(max(length, shared + 1), len(full))
        if size > length:
            logger.debug(f"Widening short hash of {full} to {size} characters")
        labels[full] = full[:size]
    return labels


def render_entry(commit: ClassifiedCommit, options: RenderOptions, short: Optional[str] = None) -> str:
    """One bullet line for a commit."""
    short = short or commit.source.short_hash
    ref = f"[[{short}]]" if options.commit_url_template else f"[{short}]"
    summary = commit.summary
    if options.mark_breaking and commit.is_breaking:
        summary = f"**BREAKING** {summary}"
    return f"- {ref} {summary} ({render_author(commit, options)})"


def render_heading(changelog: Changelog, options: RenderOptions, linked: bool) -> str:
    title = UNRELEASED if changelog.range.is_unreleased else changelog.range.end
    if linked:
        title = f"[{title}]"
    heading = f"{'#' * options.root_indent_level} {title}"
    if changelog.date is not None:
        heading += f" - {changelog.date.isoformat()}"
    return heading


def render(changelog: Changelog, options: Optional[RenderOptions] = None) -> str:
    """
    Render a changelog as Markdown.

    Args:
        changelog: Grouped commits and the range they cover
        options: Rendering options (defaults when None)

    Returns:
        Markdown text ending with a newline

    Raises:
        RenderError: If the link templates are malformed
    """
    options = options or RenderOptions()
    validate_options(options)

    revision_range = changelog.range
    compare_link = None
    if options.compare_url_template and revision_range.start is not None:
        compare_link = format_link(
            options.compare_url_template,
            **{"from": revision_range.start, "to": revision_range.end},
        )

    lines: List[str] = [render_heading(changelog, options, linked=compare_link is not None)]
    sub_heading = '#' * (options.root_indent_level + 1)
    commit_links: Dict[str, str] = {}
    labels = abbreviate_hashes(entry.hash for group in changelog.groups for entry in group.entries)

    sections = []
    for group in changelog.groups:
        if not group.entries:
            continue
        section = [f"{sub_heading} {group.type.title}"]
        for entry in group.entries:
            short = labels[entry.hash]
            section.append(render_entry(entry, options, short))
            if options.commit_url_template:
                if short not in commit_links:
                    commit_links[short] = format_link(options.commit_url_template, hash=entry.hash)
        sections.append("\n".join(section) + "\n")

    text = "\n".join(lines) + "\n" + "\n".join(sections)

    references = []
    if compare_link is not None:
        title = UNRELEASED if revision_range.is_unreleased else revision_range.end
        references.append(f"[{title}]: {compare_link}")
    references.extend(f"[{short}]: {url}" for short, url in commit_links.items())

    if references:
        text += "\n" + "\n".join(references) + "\n"
    return text
