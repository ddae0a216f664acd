"""
commitlog - Generate changelogs from Conventional Commits.

commitlog reads a range of git history, classifies each commit header
as a Conventional Commit and renders the result as Markdown.

Quick Start:
    import commitlog

    # Range between the two latest version tags
    print(commitlog.generate("~/src/project"))

    # Explicit range
    print(commitlog.generate(".", "v1.0.0..v1.1.0", ignore_types=["chore"]))

    # Structured result instead of Markdown
    changelog = commitlog.build(".", "v1.0.0..v1.1.0")
    for group in changelog.groups:
        print(group.type.title, len(group.entries))

Domain Objects:
    SemanticVersion, Tag - Version tags
    RawCommit, ClassifiedCommit, CommitType - Commits
    RevisionRange, ChangelogGroup, Changelog - The assembled changelog

Services:
    TagIndex - Version tags in precedence order
    ChangelogService - The end-to-end pipeline
"""

__version__ = "0.4.0"

# High-level API
from .api import generate, build

# Domain objects
from .domain import (
    SemanticVersion,
    Tag,
    CommitType,
    RawCommit,
    ClassifiedCommit,
    RevisionRange,
    ChangelogGroup,
    Changelog,
)

# Services (for advanced use)
from .services import TagIndex, ChangelogService, classify, process, resolve

# Rendering
from .render import RenderOptions, render

# Configuration
from .config import load_config, DEFAULT_TAG_PATTERN

__all__ = [
    # Version
    "__version__",
    # High-level API
    "generate",
    "build",
    # Domain objects
    "SemanticVersion",
    "Tag",
    "CommitType",
    "RawCommit",
    "ClassifiedCommit",
    "RevisionRange",
    "ChangelogGroup",
    "Changelog",
    # Services
    "TagIndex",
    "ChangelogService",
    "classify",
    "process",
    "resolve",
    # Rendering
    "RenderOptions",
    "render",
    # Configuration
    "load_config",
    "DEFAULT_TAG_PATTERN",
]
