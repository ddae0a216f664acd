#!/usr/bin/env python3

import os
import json
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Pattern

import logging
import sys

import yaml

from .domain import CommitType
from .exit_codes import ConfigError
from .render import RenderOptions

logger = logging.getLogger("commitlog")

# Optional prefix, then MAJOR.MINOR.PATCH[-pre][+build]
DEFAULT_TAG_PATTERN = (
    r"^(?P<prefix>\D*)"
    r"(?P<version>\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?)$"
)

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']
REPO_CONFIG_FILENAMES = ['.commitlog.json', '.commitlog.toml', '.commitlog.yaml', '.commitlog.yml']


def setup_logging(level: str = "WARNING", fmt: str = "%(levelname)s: %(message)s") -> None:
    """Send commitlog's log records to stderr at the given level."""
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(
        level=numeric,
        format=fmt,
        handlers=[
            logging.StreamHandler(sys.stderr)  # stdout is reserved for the changelog
        ],
        force=True,
    )


def get_config_path():
    """Get the path to the global configuration file.

    Checks in order:
    1. COMMITLOG_CONFIG environment variable
    2. ~/.commitlog/ directory
    """
    if 'COMMITLOG_CONFIG' in os.environ:
        path = Path(os.environ['COMMITLOG_CONFIG'])
        if path.exists():
            return path
        logger.warning(f"COMMITLOG_CONFIG points to a missing file: {path}")

    config_dir = Path.home() / '.commitlog'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    return None


def get_repo_config_path(repo_path) -> Optional[Path]:
    """Get the per-repository configuration file, if one exists."""
    for filename in REPO_CONFIG_FILENAMES:
        path = Path(repo_path) / filename
        if path.is_file():
            return path
    return None


def read_config_file(config_path: Path) -> dict:
    """
    Read a JSON, TOML or YAML configuration file.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    try:
        suffix = config_path.suffix.lower()
        if suffix == '.toml':
            with open(config_path, 'rb') as f:
                data = tomllib.load(f)
        elif suffix in ['.yaml', '.yml']:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f)
        else:
            with open(config_path, 'r') as f:
                data = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Error loading config from {config_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return data


def load_config(repo_path=None):
    """
    Load configuration.

    Defaults are merged with the global file, then the repository's
    own file, then COMMITLOG_* environment variables.
    """
    config = get_default_config()

    config_path = get_config_path()
    if config_path is not None:
        logger.debug(f"Loading config from {config_path}")
        config = merge_configs(config, read_config_file(config_path))

    if repo_path is not None:
        repo_config = get_repo_config_path(repo_path)
        if repo_config is not None:
            logger.debug(f"Loading repository config from {repo_config}")
            config = merge_configs(config, read_config_file(repo_config))

    return apply_env_overrides(config)


def get_default_config():
    """Get default configuration."""
    return {
        "changelog": {
            "tag_pattern": DEFAULT_TAG_PATTERN,
            "tag_prefix": None,
            "ignore_types": [],
            "ignore_summary": None,
            "reverse": False,
            "scan_breaking_footer": False,
        },
        "render": {
            "root_indent_level": 2,
            "enable_email_link": False,
            "mark_breaking": False,
            "compare_url": None,
            "commit_url": None,
            "remote_links": True,
            "remote": "origin",
        },
        "git": {
            "timeout_seconds": 30,
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s",
        },
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: COMMITLOG_SECTION_KEY
    For example: COMMITLOG_RENDER_ROOT_INDENT_LEVEL=3
    """
    env_prefix = "COMMITLOG_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "COMMITLOG_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest config key that is a prefix of the remaining key parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                break

    return config


@dataclass(frozen=True)
class ChangelogOptions:
    """Effective settings for one changelog run, patterns compiled."""
    tag_pattern: Pattern
    tag_prefix: Optional[str] = None
    ignore_types: FrozenSet[CommitType] = frozenset()
    ignore_summary: Optional[Pattern] = None
    reverse: bool = False
    scan_breaking_footer: bool = False
    render: RenderOptions = field(default_factory=RenderOptions)
    remote_links: bool = True
    remote: str = "origin"
    git_timeout: int = 30


def compile_regex(pattern: str, name: str) -> Pattern:
    """
    Raises:
        ConfigError: If the pattern does not compile
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigError(f"Invalid {name} regex {pattern!r}: {e}")


def parse_ignore_types(values) -> FrozenSet[CommitType]:
    """
    Parse type names, accepting lists and comma-separated strings.

    Raises:
        ConfigError: For unknown type names
    """
    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]

    types = set()
    for value in values:
        for name in str(value).split(','):
            if not name.strip():
                continue
            try:
                types.add(CommitType.parse_option(name))
            except ValueError as e:
                raise ConfigError(str(e))
    return frozenset(types)


def build_options(config: Dict[str, Any]) -> ChangelogOptions:
    """
    Validate a configuration dict and turn it into ChangelogOptions.

    Raises:
        ConfigError: For invalid patterns, types or values
    """
    from .services.tag_index import compile_tag_pattern

    changelog = config.get("changelog", {})
    render = config.get("render", {})
    git = config.get("git", {})

    ignore_summary = changelog.get("ignore_summary")
    try:
        indent = int(render.get("root_indent_level", 2))
        timeout = int(git.get("timeout_seconds", 30))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid numeric setting: {e}")
    if indent < 1:
        raise ConfigError(f"root_indent_level must be >= 1, got {indent}")

    return ChangelogOptions(
        tag_pattern=compile_tag_pattern(changelog.get("tag_pattern") or DEFAULT_TAG_PATTERN),
        tag_prefix=changelog.get("tag_prefix"),
        ignore_types=parse_ignore_types(changelog.get("ignore_types")),
        ignore_summary=compile_regex(ignore_summary, "ignore-summary") if ignore_summary else None,
        reverse=bool(changelog.get("reverse", False)),
        scan_breaking_footer=bool(changelog.get("scan_breaking_footer", False)),
        render=RenderOptions(
            root_indent_level=indent,
            enable_email_link=bool(render.get("enable_email_link", False)),
            compare_url_template=render.get("compare_url") or None,
            commit_url_template=render.get("commit_url") or None,
            mark_breaking=bool(render.get("mark_breaking", False)),
        ),
        remote_links=bool(render.get("remote_links", True)),
        remote=render.get("remote") or "origin",
        git_timeout=timeout,
    )
