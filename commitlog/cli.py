#!/usr/bin/env python3

import click
import json
import sys

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from commitlog import api
from commitlog.config import load_config, setup_logging
from commitlog.exit_codes import (
    SUCCESS, INTERRUPTED, CommandError, get_exit_code_for_exception
)

err_console = Console(stderr=True)


def _split_types(values):
    """Flatten repeated and comma-separated --ignore-types values."""
    types = []
    for value in values:
        types.extend(t.strip() for t in value.split(',') if t.strip())
    return types


@click.command()
@click.version_option(package_name="commitlog")
@click.argument('repo_path', default='.', type=click.Path(file_okay=False))
@click.argument('revision_spec', required=False)
@click.option('--reverse', is_flag=True,
              help='List entries oldest first within each section')
@click.option('--enable-email-link', is_flag=True,
              help='Render authors as mailto links')
@click.option('--root-indent-level', type=click.IntRange(min=1),
              help='Heading level of the release heading (default: 2)')
@click.option('--tag-prefix',
              help='Only autodetect from tags with exactly this prefix (e.g. "v")')
@click.option('--tag-pattern',
              help='Regex for version tags; must define a named "version" group')
@click.option('--ignore-types', multiple=True,
              help='Commit types to leave out (repeatable or comma separated)')
@click.option('--ignore-summary',
              help='Leave out commits whose summary matches this regex')
@click.option('--compare-url',
              help='Compare link template with {from} and {to}')
@click.option('--commit-url',
              help='Commit link template with {hash}')
@click.option('--no-links', is_flag=True,
              help='Do not derive link templates from the remote URL')
@click.option('--mark-breaking', is_flag=True,
              help='Prefix breaking changes with **BREAKING**')
@click.option('--scan-breaking-footer', is_flag=True,
              help='Also treat a "BREAKING CHANGE:" footer as breaking')
@click.option('--pretty', is_flag=True,
              help='Render the Markdown for the terminal')
@click.option('--json', 'json_output', is_flag=True,
              help='Output the grouped changelog as JSON instead of Markdown')
@click.option('-v', '--verbose', is_flag=True,
              help='Debug logging on stderr')
def cli(repo_path, revision_spec, reverse, enable_email_link, root_indent_level,
        tag_prefix, tag_pattern, ignore_types, ignore_summary, compare_url,
        commit_url, no_links, mark_breaking, scan_breaking_footer, pretty, json_output, verbose):
    """commitlog - Generate a changelog from Conventional Commits.

    REPO_PATH is the git repository (default: current directory).
    REVISION_SPEC is "<from>..<to>" or "<to>"; when omitted the range
    between the two latest version tags is used.
    """
    try:
        logging_config = load_config(repo_path).get("logging", {})
        setup_logging(
            "DEBUG" if verbose else logging_config.get("level", "WARNING"),
            logging_config.get("format", "%(levelname)s: %(message)s"),
        )

        overrides = dict(
            reverse=reverse or None,
            enable_email_link=enable_email_link or None,
            root_indent_level=root_indent_level,
            tag_prefix=tag_prefix,
            tag_pattern=tag_pattern,
            ignore_types=_split_types(ignore_types) or None,
            ignore_summary=ignore_summary,
            compare_url=compare_url,
            commit_url=commit_url,
            remote_links=False if no_links else None,
            mark_breaking=mark_breaking or None,
            scan_breaking_footer=scan_breaking_footer or None,
        )

        if json_output:
            changelog = api.build(repo_path, revision_spec, **overrides)
            output = json.dumps(changelog.to_dict(), ensure_ascii=False)
        else:
            output = api.generate(repo_path, revision_spec, **overrides)
    except KeyboardInterrupt:
        err_console.print("[red]Interrupted by user[/red]")
        sys.exit(INTERRUPTED)
    except CommandError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False, soft_wrap=True)
        sys.exit(e.exit_code)
    except OSError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False, soft_wrap=True)
        sys.exit(get_exit_code_for_exception(e))

    if json_output:
        click.echo(output)
    elif pretty:
        Console().print(Markdown(output))
    else:
        click.echo(output, nl=False)
    sys.exit(SUCCESS)


def main():
    cli()

if __name__ == "__main__":
    main()
