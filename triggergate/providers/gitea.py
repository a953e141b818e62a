"""Gitea (and Forgejo) REST implementation of :class:`ProviderClient`.

Gitea mirrors the GitHub REST layout for the endpoints the ACL engine needs,
so comment decoding is shared with :mod:`triggergate.providers.github`. The
differences are the ``token`` authorisation scheme, ``limit`` based paging,
and a collaborator check answered with ``204``/``404``.
"""

from __future__ import annotations

import typing as typ
from urllib.parse import quote

from triggergate.common.slug import repo_slug
from triggergate.events.payloads import ThreadKind

from .errors import NotFoundError
from .github import IssueComment, comment_records
from .protocol import CommentRecord
from .rest import RestProviderClient, is_not_found, is_transport_failure

_COMMENTS_PER_PAGE = 50
_HTTP_NO_CONTENT = 204


class GiteaProviderClient(RestProviderClient):
    """Gitea REST client rooted at ``https://<host>/api/v1``."""

    provider_name: typ.ClassVar[str] = "Gitea"

    def _auth_headers(self, token: str) -> dict[str, str]:
        return {"Authorization": f"token {token}"}

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
            url, params={"limit": _COMMENTS_PER_PAGE}
        ):
            records.extend(comment_records(self._decode(page, list[IssueComment])))
        return records

    async def is_collaborator(self, org: str, repo: str, login: str) -> bool:
        """Return whether Gitea answers ``204`` for the collaborator check."""
        url = self._url(
            f"{self._repo_path(org, repo)}/collaborators/{quote(login, safe='')}"
        )
        response = await self._send(url)
        if response.status_code == _HTTP_NO_CONTENT:
            return True
        if is_transport_failure(response.status_code):
            self._raise_for_status(response)
        return False

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
