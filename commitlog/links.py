"""
Link template detection for commitlog.

Derives compare and commit link templates from a git remote URL so
changelogs for hosted repositories get working reference links without
configuration. Only GitHub-style web paths are generated.
"""

import re
from typing import Optional, Tuple

_SSH_REMOTE = re.compile(r'^(?:ssh://)?git@(?P<host>[^/:]+)[:/](?P<repo>.+?)(?:\.git)?/?$')
_HTTP_REMOTE = re.compile(r'^(?P<scheme>https?://)(?:[^@/]+@)?(?P<host>[^/]+)/(?P<repo>.+?)(?:\.git)?/?$')


def web_url(remote_url: str) -> str:
    """
    Convert a git remote URL to the repository's web URL.

    Examples:
        git@github.com:owner/repo.git          -> https://github.com/owner/repo
        ssh://git@github.com/owner/repo.git    -> https://github.com/owner/repo
        http://example.com/owner/repo.git      -> http://example.com/owner/repo

    Unknown forms are returned unchanged.
    """
    url = remote_url.strip()

    match = _HTTP_REMOTE.match(url)
    if match:
        return f"{match.group('scheme')}{match.group('host')}/{match.group('repo')}"

    match = _SSH_REMOTE.match(url)
    if match:
        return f"https://{match.group('host')}/{match.group('repo')}"

    return url


def templates_for_remote(remote_url: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Compare and commit link templates for a remote.

    Returns:
        (compare_template, commit_template), both None without a remote
    """
    if not remote_url:
        return None, None
    # Braces in the URL itself must survive str.format
    base = web_url(remote_url).replace("{", "{{").replace("}", "}}")
    return f"{base}/compare/{{from}}...{{to}}", f"{base}/commit/{{hash}}"
