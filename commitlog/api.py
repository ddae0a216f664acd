"""
High-level API for commitlog.

Example:
    import commitlog

    # Autodetect the range from the two latest version tags
    print(commitlog.generate("~/src/project"))

    # Explicit range, skipping chores
    print(commitlog.generate(".", "v1.0.0..v1.1.0", ignore_types=["chore"]))
"""

from pathlib import Path
from typing import Any, Dict, Optional

from .config import ChangelogOptions, build_options, load_config, merge_configs
from .domain import Changelog
from .infra import GitClient
from .services import ChangelogService

# Keyword overrides accepted by generate(), by config section
CHANGELOG_KEYS = ("tag_pattern", "tag_prefix", "ignore_types", "ignore_summary",
                  "reverse", "scan_breaking_footer")
RENDER_KEYS = ("root_indent_level", "enable_email_link", "mark_breaking",
               "compare_url", "commit_url", "remote_links", "remote")


def overrides_to_config(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Sort flat keyword overrides into config sections.

    Keys whose value is None are left out so they do not mask
    configured values.
    """
    config: Dict[str, Any] = {"changelog": {}, "render": {}}
    for key, value in overrides.items():
        if value is None:
            continue
        if key in CHANGELOG_KEYS:
            config["changelog"][key] = value
        elif key in RENDER_KEYS:
            config["render"][key] = value
        else:
            raise TypeError(f"Unknown option: {key}")
    return config


def resolve_options(repo_path: str, **overrides) -> ChangelogOptions:
    """Load configuration for a repository and apply keyword overrides."""
    config = merge_configs(load_config(repo_path), overrides_to_config(overrides))
    return build_options(config)


def build(repo_path: str = ".", revision_spec: Optional[str] = None, **overrides) -> Changelog:
    """Build the grouped changelog without rendering it."""
    repo_path = str(Path(repo_path).expanduser())
    options = resolve_options(repo_path, **overrides)
    service = ChangelogService(GitClient(timeout=options.git_timeout))
    return service.build(repo_path, options, revision_spec)


def generate(repo_path: str = ".", revision_spec: Optional[str] = None, **overrides) -> str:
    """
    Generate a Markdown changelog.

    Args:
        repo_path: Path to the git repository
        revision_spec: ``from..to`` or ``to``; None autodetects from tags
        **overrides: Settings from the ``changelog`` and ``render`` config
            sections (e.g. ``reverse=True``, ``ignore_types=["chore"]``)

    Returns:
        Markdown text
    """
    repo_path = str(Path(repo_path).expanduser())
    options = resolve_options(repo_path, **overrides)
    service = ChangelogService(GitClient(timeout=options.git_timeout))
    return service.generate(repo_path, options, revision_spec)
