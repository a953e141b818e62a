"""GitLab REST (v4) implementation of :class:`ProviderClient`.

GitLab addresses projects by the URL-encoded ``group/project`` path, names
comments "notes", and expresses repository access as numeric access levels.
Issues and merge requests are numbered separately, so the notes endpoint
depends on the thread kind.
"""

from __future__ import annotations

import typing as typ
from urllib.parse import quote

import msgspec

from triggergate.common.slug import repo_slug
from triggergate.events.payloads import ThreadKind

from .errors import NotFoundError
from .protocol import CommentRecord
from .rest import (
    RestProviderClient,
    is_error_status,
    is_not_found,
    is_transport_failure,
)

_NOTES_PER_PAGE = 100
_NOTEABLE_SEGMENTS = {
    ThreadKind.ISSUE: "issues",
    ThreadKind.PULL_REQUEST: "merge_requests",
}
# Developer and above can push to non-protected branches.
_DEVELOPER_ACCESS_LEVEL = 30


class _Author(msgspec.Struct):
    username: str = ""


class _Note(msgspec.Struct):
    body: str = ""
    author: _Author | None = None
    system: bool = False


class _User(msgspec.Struct):
    id: int
    username: str = ""


class _Member(msgspec.Struct):
    access_level: int = 0


class GitLabProviderClient(RestProviderClient):
    """GitLab REST client rooted at ``https://<host>/api/v4``."""

    provider_name: typ.ClassVar[str] = "GitLab"

    def _auth_headers(self, token: str) -> dict[str, str]:
        return {"PRIVATE-TOKEN": token}

    def _project_path(self, org: str, repo: str) -> str:
        return f"/projects/{quote(repo_slug(org, repo), safe='')}"

    async def list_issue_comments(
        self,
        org: str,
        repo: str,
        issue_id: int,
        *,
        thread: ThreadKind = ThreadKind.PULL_REQUEST,
    ) -> list[CommentRecord]:
        """Return issue or merge request notes oldest first, skipping system notes."""
        segment = _NOTEABLE_SEGMENTS[thread]
        url = self._url(
            f"{self._project_path(org, repo)}/{segment}/{issue_id}/notes"
        )
        records: list[CommentRecord] = []
        async for page in self._iter_link_pages(
            url,
            params={
                "sort": "asc",
                "order_by": "created_at",
                "per_page": _NOTES_PER_PAGE,
            },
        ):
            records.extend(
                CommentRecord(
                    body=note.body,
                    author_login=note.author.username if note.author else "",
                )
                for note in self._decode(page, list[_Note])
                if not note.system
            )
        return records

    async def _user_id(self, login: str) -> int | None:
        response = await self._send(self._url("/users"), params={"username": login})
        if is_transport_failure(response.status_code):
            self._raise_for_status(response)
        if is_error_status(response.status_code):
            return None
        for user in self._decode(response, list[_User]):
            if user.username == login:
                return user.id
        return None

    async def is_collaborator(self, org: str, repo: str, login: str) -> bool:
        """Return whether ``login`` is a project member with Developer access.

        Inherited group membership counts, so ``members/all`` is queried.
        """
        user_id = await self._user_id(login)
        if user_id is None:
            return False
        url = self._url(f"{self._project_path(org, repo)}/members/all/{user_id}")
        response = await self._send(url)
        if is_transport_failure(response.status_code):
            self._raise_for_status(response)
        if is_error_status(response.status_code):
            return False
        member = self._decode(response, _Member)
        return member.access_level >= _DEVELOPER_ACCESS_LEVEL

    async def get_file_content(
        self, org: str, repo: str, path: str, ref: str
    ) -> bytes:
        """Return the decoded content of ``path`` at ``ref``."""
        url = self._url(
            f"{self._project_path(org, repo)}/repository/files/{quote(path, safe='')}"
        )
        response = await self._send(url, params={"ref": ref})
        if is_not_found(response.status_code):
            raise NotFoundError.file(repo_slug(org, repo), path, ref)
        self._raise_for_status(response)
        return self._decode_contents(response)
