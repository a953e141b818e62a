"""Tests for repository slug helpers."""

from __future__ import annotations

import pytest

from triggergate.common.slug import parse_repo_slug, repo_slug


def test_repo_slug_joins_owner_and_name() -> None:
    """Owner and name are joined with a slash."""
    assert repo_slug("octo", "reef") == "octo/reef"


def test_parse_repo_slug_splits_owner_and_name() -> None:
    """A well-formed slug parses back into its parts."""
    assert parse_repo_slug("octo/reef") == ("octo", "reef")


def test_parse_repo_slug_keeps_subgroups_in_namespace() -> None:
    """GitLab subgroup paths split at the last slash."""
    assert parse_repo_slug("platform/ci/runner") == ("platform/ci", "runner")


@pytest.mark.parametrize(
    "slug",
    ["octo", "/reef", "octo/", "octo//reef", "/octo/reef", ""],
)
def test_parse_repo_slug_rejects_malformed_slugs(slug: str) -> None:
    """Slugs with a missing or empty segment are rejected."""
    with pytest.raises(ValueError, match="owner/name"):
        parse_repo_slug(slug)
