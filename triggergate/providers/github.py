"""GitHub REST implementation of :class:`ProviderClient`."""

from __future__ import annotations

import typing as typ
from urllib.parse import quote

import msgspec

from triggergate.common.slug import repo_slug
from triggergate.events.payloads import ThreadKind

from .errors import NotFoundError
from .protocol import CommentRecord
from .rest import RestProviderClient, is_not_found, is_transport_failure

_COMMENTS_PER_PAGE = 100
_HTTP_OK = 200
_WRITE_PERMISSIONS = frozenset({"admin", "maintain", "write"})


class GitUser(msgspec.Struct):
    """Account object embedded in GitHub and Gitea responses."""

    login: str = ""


class IssueComment(msgspec.Struct):
    """Issue comment as returned by GitHub and Gitea."""

    body: str | None = None
    user: GitUser | None = None


class _CollaboratorPermission(msgspec.Struct):
    permission: str = "none"


def comment_records(comments: list[IssueComment]) -> list[CommentRecord]:
    """Convert decoded issue comments into :class:`CommentRecord` values."""
    return [
        CommentRecord(
            body=comment.body or "",
            author_login=comment.user.login if comment.user else "",
        )
        for comment in comments
    ]


class GitHubProviderClient(RestProviderClient):
    """GitHub (github.com or Enterprise Server) REST client."""

    provider_name: typ.ClassVar[str] = "GitHub"
    accept: typ.ClassVar[str] = "application/vnd.github+json"

    def _auth_headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _repo_path(self, org: str, repo: str) -> str:
        return f"/repos/{quote(org, safe='')}/{quote(repo, safe='')}"

    async def list_issue_comments(
        self,
        org: str,
        repo: str,
        issue_id: int,
        *,
        thread: ThreadKind = ThreadKind.PULL_REQUEST,
    ) -> list[CommentRecord]:
        """Return issue or pull request comments in creation order.

        Issues and pull requests share one number space and one comments
        endpoint, so ``thread`` does not change the request.
        """
        del thread
        url = self._url(f"{self._repo_path(org, repo)}/issues/{issue_id}/comments")
        records: list[CommentRecord] = []
        async for page in self._iter_link_pages(
            url, params={"per_page": _COMMENTS_PER_PAGE}
        ):
            records.extend(comment_records(self._decode(page, list[IssueComment])))
        return records

    async def is_collaborator(self, org: str, repo: str, login: str) -> bool:
        """Return whether ``login`` holds write, maintain or admin permission.

        GitHub reports read-only users with a ``200`` and ``read`` permission,
        so the permission level is checked rather than the membership status.
        """
        url = self._url(
            f"{self._repo_path(org, repo)}/collaborators/"
            f"{quote(login, safe='')}/permission"
        )
        response = await self._send(url)
        if is_transport_failure(response.status_code):
            self._raise_for_status(response)
        if response.status_code != _HTTP_OK:
            return False
        permission = self._decode(response, _CollaboratorPermission)
        return permission.permission in _WRITE_PERMISSIONS

    async def get_file_content(
        self, org: str, repo: str, path: str, ref: str
    ) -> bytes:
        """Return the decoded content of ``path`` at ``ref``."""
        url = self._url(f"{self._repo_path(org, repo)}/contents/{quote(path)}")
        response = await self._send(url, params={"ref": ref})
        if is_not_found(response.status_code):
            raise NotFoundError.file(repo_slug(org, repo), path, ref)
        self._raise_for_status(response)
        return self._decode_contents(response)
