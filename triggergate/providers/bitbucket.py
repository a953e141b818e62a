"""Bitbucket Cloud REST (2.0) implementation of :class:`ProviderClient`.

Bitbucket paginates with a ``next`` URL inside the JSON body instead of a
``Link`` header, serves file content raw from the ``src`` endpoint, and
identifies accounts by ``nickname`` in comments and permission queries.
Branch names containing ``/`` cannot appear in a ``src`` path, so such refs
are first resolved to their head commit.
"""

from __future__ import annotations

import typing as typ
from urllib.parse import quote

import msgspec

from triggergate.common.slug import repo_slug
from triggergate.events.payloads import ThreadKind

from .errors import NotFoundError, ResponseShapeError
from .protocol import CommentRecord
from .rest import (
    RestProviderClient,
    is_error_status,
    is_not_found,
    is_transport_failure,
)

_PAGE_LENGTH = 100
_MAX_PAGES = 100
_WRITE_PERMISSIONS = frozenset({"admin", "write"})
_THREAD_SEGMENTS = {
    ThreadKind.ISSUE: "issues",
    ThreadKind.PULL_REQUEST: "pullrequests",
}
# Characters that would break out of a BBQL string literal.
_BBQL_UNSAFE = frozenset('"\\')


class _Account(msgspec.Struct):
    nickname: str = ""


class _Content(msgspec.Struct):
    raw: str = ""


class _Comment(msgspec.Struct):
    content: _Content | None = None
    user: _Account | None = None
    deleted: bool = False


class _CommentPage(msgspec.Struct):
    values: list[_Comment] = msgspec.field(default_factory=list)
    next: str | None = None


class _Permission(msgspec.Struct):
    permission: str = ""


class _PermissionPage(msgspec.Struct):
    values: list[_Permission] = msgspec.field(default_factory=list)


class _Target(msgspec.Struct):
    hash: str = ""


class _Branch(msgspec.Struct):
    name: str = ""
    target: _Target | None = None


class _BranchPage(msgspec.Struct):
    values: list[_Branch] = msgspec.field(default_factory=list)


class BitbucketProviderClient(RestProviderClient):
    """Bitbucket Cloud REST client rooted at ``https://api.bitbucket.org/2.0``."""

    provider_name: typ.ClassVar[str] = "Bitbucket"

    def _repo_path(self, org: str, repo: str) -> str:
        return f"/repositories/{quote(org, safe='')}/{quote(repo, safe='')}"

    async def list_issue_comments(
        self,
        org: str,
        repo: str,
        issue_id: int,
        *,
        thread: ThreadKind = ThreadKind.PULL_REQUEST,
    ) -> list[CommentRecord]:
        """Return issue tracker or pull request comments oldest first.

        Deleted comments are skipped.
        """
        segment = _THREAD_SEGMENTS[thread]
        next_url: str | None = self._url(
            f"{self._repo_path(org, repo)}/{segment}/{issue_id}/comments"
        )
        params: dict[str, str | int] | None = {
            "pagelen": _PAGE_LENGTH,
            "sort": "created_on",
        }
        records: list[CommentRecord] = []
        for _ in range(_MAX_PAGES):
            if next_url is None:
                return records
            page = self._decode(await self._get(next_url, params=params), _CommentPage)
            records.extend(
                CommentRecord(
                    body=comment.content.raw if comment.content else "",
                    author_login=comment.user.nickname if comment.user else "",
                )
                for comment in page.values
                if not comment.deleted
            )
            next_url, params = page.next, None
        if next_url is not None:
            raise ResponseShapeError.too_many_pages(self.provider_name, _MAX_PAGES)
        return records

    async def is_collaborator(self, org: str, repo: str, login: str) -> bool:
        """Return whether ``login`` holds write or admin repository permission."""
        if not login or _BBQL_UNSAFE.intersection(login):
            return False
        url = self._url(
            f"/workspaces/{quote(org, safe='')}/permissions/repositories/"
            f"{quote(repo, safe='')}"
        )
        response = await self._send(url, params={"q": f'user.nickname="{login}"'})
        if is_transport_failure(response.status_code):
            self._raise_for_status(response)
        if is_error_status(response.status_code):
            return False
        page = self._decode(response, _PermissionPage)
        return any(item.permission in _WRITE_PERMISSIONS for item in page.values)

    async def get_file_content(
        self, org: str, repo: str, path: str, ref: str
    ) -> bytes:
        """Return the raw content of ``path`` at ``ref``."""
        commit = ref
        if "/" in ref:
            commit = await self._branch_head(org, repo, path, ref)
        url = self._url(
            f"{self._repo_path(org, repo)}/src/{quote(commit, safe='')}/{quote(path)}"
        )
        response = await self._send(url)
        if is_not_found(response.status_code):
            raise NotFoundError.file(repo_slug(org, repo), path, ref)
        self._raise_for_status(response)
        return response.content

    async def _branch_head(self, org: str, repo: str, path: str, ref: str) -> str:
        """Return the head commit hash of branch ``ref``.

        A branch that does not exist makes ``path`` unreadable, so it raises
        :class:`NotFoundError` like a missing file.
        """
        missing = NotFoundError.file(repo_slug(org, repo), path, ref)
        if _BBQL_UNSAFE.intersection(ref):
            raise missing
        response = await self._send(
            self._url(f"{self._repo_path(org, repo)}/refs/branches"),
            params={"q": f'name="{ref}"'},
        )
        if is_not_found(response.status_code):
            raise missing
        self._raise_for_status(response)
        for branch in self._decode(response, _BranchPage).values:
            if branch.name == ref and branch.target is not None and branch.target.hash:
                return branch.target.hash
        raise missing
