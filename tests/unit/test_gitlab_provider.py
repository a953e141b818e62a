"""Tests for the GitLab provider adapter."""

from __future__ import annotations

import base64

import httpx
import pytest

from triggergate.events import ThreadKind
from triggergate.providers import (
    GitLabProviderClient,
    NotFoundError,
    ProviderAPIError,
    ProviderConfig,
    ProviderKind,
)
from triggergate.providers.protocol import CommentRecord
from tests.helpers.http_routes import RouteTable

_API = "https://gitlab.test/api/v4"
_PROJECT = "/api/v4/projects/octo%2Freef"


def _client(routes: RouteTable) -> GitLabProviderClient:
    config = ProviderConfig(kind=ProviderKind.GITLAB, token="glpat", api_url=_API)
    return GitLabProviderClient(config, http_client=routes.client())


@pytest.mark.asyncio
async def test_notes_skip_system_entries() -> None:
    """System notes are not comments and are dropped."""
    routes = RouteTable()
    routes.json(
        f"{_PROJECT}/merge_requests/9/notes",
        [
            {"body": "added 1 commit", "author": {"username": "bot"}, "system": True},
            {"body": "/ok-to-test", "author": {"username": "maintainer"}},
        ],
    )

    records = await _client(routes).list_issue_comments("octo", "reef", 9)

    assert records == [CommentRecord(body="/ok-to-test", author_login="maintainer")]
    request = routes.requests[0]
    assert request.headers["PRIVATE-TOKEN"] == "glpat"
    assert request.url.params["sort"] == "asc"
    assert request.url.params["order_by"] == "created_at"


@pytest.mark.asyncio
async def test_issue_thread_reads_issue_notes() -> None:
    """Issue threads use the issue notes endpoint, not merge request !N."""
    routes = RouteTable()
    routes.json(
        f"{_PROJECT}/issues/9/notes",
        [{"body": "/ok-to-test", "author": {"username": "triager"}}],
    )
    routes.json(
        f"{_PROJECT}/merge_requests/9/notes",
        [{"body": "/ok-to-test", "author": {"username": "maintainer"}}],
    )

    records = await _client(routes).list_issue_comments(
        "octo", "reef", 9, thread=ThreadKind.ISSUE
    )

    assert records == [CommentRecord(body="/ok-to-test", author_login="triager")]
    assert routes.paths() == [f"{_PROJECT}/issues/9/notes"]


def _user_route(routes: RouteTable, login: str, user_id: int) -> None:
    def users(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("username") != login:
            return httpx.Response(200, json=[])
        return httpx.Response(200, json=[{"id": user_id, "username": login}])

    routes.add("/api/v4/users", users)


@pytest.mark.parametrize(
    ("access_level", "expected"),
    [(50, True), (40, True), (30, True), (20, False), (10, False)],
)
@pytest.mark.asyncio
async def test_collaborator_requires_developer_access(
    access_level: int, *, expected: bool
) -> None:
    """Developer access or higher is trusted."""
    routes = RouteTable()
    _user_route(routes, "maintainer", 42)
    routes.json(f"{_PROJECT}/members/all/42", {"access_level": access_level})

    allowed = await _client(routes).is_collaborator("octo", "reef", "maintainer")

    assert allowed is expected


@pytest.mark.asyncio
async def test_unknown_user_is_not_collaborator() -> None:
    """No user with the exact username means no membership lookup."""
    routes = RouteTable()
    _user_route(routes, "someone-else", 7)

    assert not await _client(routes).is_collaborator("octo", "reef", "ghost")
    assert routes.paths() == ["/api/v4/users"]


@pytest.mark.asyncio
async def test_non_member_is_not_collaborator() -> None:
    """A ``404`` membership lookup is ``False``."""
    routes = RouteTable()
    _user_route(routes, "visitor", 3)

    assert not await _client(routes).is_collaborator("octo", "reef", "visitor")


@pytest.mark.asyncio
async def test_unauthorised_user_lookup_raises() -> None:
    """A rejected token is a transport failure."""
    routes = RouteTable()
    routes.status("/api/v4/users", 401)

    with pytest.raises(ProviderAPIError):
        await _client(routes).is_collaborator("octo", "reef", "visitor")


@pytest.mark.asyncio
async def test_file_path_is_fully_encoded() -> None:
    """Repository file paths are encoded as one path segment."""
    routes = RouteTable()
    routes.json(
        f"{_PROJECT}/repository/files/.gitlab%2FOWNERS",
        {"content": base64.b64encode(b"approvers: [a]").decode(), "encoding": "base64"},
    )

    content = await _client(routes).get_file_content(
        "octo", "reef", ".gitlab/OWNERS", "main"
    )

    assert content == b"approvers: [a]"
    assert routes.requests[0].url.params["ref"] == "main"


@pytest.mark.asyncio
async def test_missing_file_raises_not_found() -> None:
    """A ``404`` file lookup raises ``NotFoundError``."""
    with pytest.raises(NotFoundError):
        await _client(RouteTable()).get_file_content("octo", "reef", "OWNERS", "main")
