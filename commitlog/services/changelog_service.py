"""
Changelog service for commitlog.

Runs the whole pipeline for one repository:

    range resolution -> history -> classification -> grouping -> rendering

Every step runs synchronously and the full commit list is read before
classification starts. Any error aborts the run; nothing is rendered
from a partial result.
"""

from typing import Optional, Tuple
import logging

from ..config import ChangelogOptions
from ..domain import Changelog, RevisionRange
from ..infra import GitClient
from ..links import templates_for_remote
from ..render import RenderOptions, render, validate_options
from ..exit_codes import ResolutionError
from . import range_resolver
from .classifier import classify_all
from .grouping import process
from .tag_index import TagIndex

logger = logging.getLogger(__name__)


class ChangelogService:
    """
    Service for building changelogs from a repository's history.

    Example:
        service = ChangelogService()
        changelog = service.build("/path/to/repo", options)
        print(service.render(changelog, options))
    """

    def __init__(self, git_client: Optional[GitClient] = None):
        """
        Initialize ChangelogService.

        Args:
            git_client: Git client instance (creates default if None)
        """
        self.git = git_client or GitClient()

    def resolve_range(
        self,
        repo_path: str,
        revision_spec: Optional[str],
        options: ChangelogOptions,
    ) -> Tuple[RevisionRange, Optional[str], str]:
        """
        Resolve the range and check both endpoints.

        Returns:
            (range, from_commit_hash or None, to_commit_hash)

        Raises:
            ConfigError, AmbiguousRangeError, ResolutionError
        """
        tag_index = None
        if revision_spec is None:
            tag_index = TagIndex.build(self.git.list_tags(repo_path), options.tag_pattern)

        revision_range = range_resolver.resolve(revision_spec, options.tag_prefix, tag_index)

        end = self.git.resolve_revision(repo_path, revision_range.end)
        start = None
        if revision_range.start is not None:
            start = self.git.resolve_revision(repo_path, revision_range.start)
            if not self.git.is_ancestor(repo_path, start, end):
                raise ResolutionError(
                    f"{revision_range.start!r} is not an ancestor of {revision_range.end!r}"
                )

        logger.info(f"Changelog range: {revision_range}")
        return revision_range, start, end

    def build(
        self,
        repo_path: str,
        options: ChangelogOptions,
        revision_spec: Optional[str] = None,
    ) -> Changelog:
        """
        Build the grouped changelog for a repository.

        Args:
            repo_path: Path to the git repository
            options: Effective options
            revision_spec: Explicit ``from..to`` / ``to`` expression, or None
                to autodetect from version tags

        Returns:
            Changelog ready for rendering
        """
        self.git.ensure_repo(repo_path)
        return self._collect(repo_path, options, revision_spec)

    def _collect(
        self,
        repo_path: str,
        options: ChangelogOptions,
        revision_spec: Optional[str],
    ) -> Changelog:
        revision_range, start, end = self.resolve_range(repo_path, revision_spec, options)

        commits = self.git.commits_between(repo_path, start, end)
        logger.debug(f"Read {len(commits)} commits")

        classified = classify_all(commits, scan_breaking_footer=options.scan_breaking_footer)
        groups = process(
            classified,
            ignore_types=options.ignore_types,
            ignore_summary_pattern=options.ignore_summary,
            reverse=options.reverse,
        )

        return Changelog(
            range=revision_range,
            groups=tuple(groups),
            date=self.git.commit_date(repo_path, end).date(),
        )

    def render_options(self, repo_path: str, options: ChangelogOptions) -> RenderOptions:
        """Render options with link templates detected from the remote when unset."""
        render_options = options.render
        if not options.remote_links:
            return RenderOptions(
                root_indent_level=render_options.root_indent_level,
                enable_email_link=render_options.enable_email_link,
                mark_breaking=render_options.mark_breaking,
            )
        if render_options.compare_url_template and render_options.commit_url_template:
            return render_options

        compare, commit = templates_for_remote(self.git.remote_url(repo_path, options.remote))
        if compare:
            logger.debug(f"Using link templates from remote {options.remote!r}")
        return RenderOptions(
            root_indent_level=render_options.root_indent_level,
            enable_email_link=render_options.enable_email_link,
            compare_url_template=render_options.compare_url_template or compare,
            commit_url_template=render_options.commit_url_template or commit,
            mark_breaking=render_options.mark_breaking,
        )

    def generate(
        self,
        repo_path: str,
        options: ChangelogOptions,
        revision_spec: Optional[str] = None,
    ) -> str:
        """
        Build and render the changelog as Markdown.

        Link templates are validated before history is read.
        """
        self.git.ensure_repo(repo_path)
        render_options = self.render_options(repo_path, options)
        validate_options(render_options)
        changelog = self._collect(repo_path, options, revision_spec)
        return render(changelog, render_options)
