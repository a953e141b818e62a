"""Helpers for ``namespace/name`` repository identifiers.

The namespace is an organisation, user or workspace, or a GitLab group path
such as ``group/subgroup``. The repository name is always the final segment.
"""

from __future__ import annotations


def repo_slug(owner: str, name: str) -> str:
    """Join a namespace and a repository name.

    Examples
    --------
    >>> repo_slug("octo", "reef")
    'octo/reef'
    >>> repo_slug("platform/ci", "runner")
    'platform/ci/runner'

    """
    return f"{owner}/{name}"


def parse_repo_slug(slug: str) -> tuple[str, str]:
    """Split ``slug`` at its last ``/`` into namespace and repository name.

    Raises
    ------
    ValueError
        If there is no ``/`` or any path segment is empty.

    Examples
    --------
    >>> parse_repo_slug("octo/reef")
    ('octo', 'reef')
    >>> parse_repo_slug("platform/ci/runner")
    ('platform/ci', 'runner')

    """
    owner, sep, name = slug.rpartition("/")
    if not sep or not name or not all(owner.split("/")):
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)
    return owner, name
