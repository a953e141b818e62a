"""Provider capability contract consumed by the ACL engine."""

from __future__ import annotations

import dataclasses
import typing as typ

from triggergate.events.payloads import ThreadKind


@dataclasses.dataclass(frozen=True, slots=True)
class CommentRecord:
    """One comment from an issue or pull request thread."""

    body: str
    author_login: str


class ProviderClient(typ.Protocol):
    """Interface every Git-hosting integration implements for ACL checks.

    Implementations perform one remote call per method (plus transparent
    pagination) and never retry.
    """

    async def list_issue_comments(
        self,
        org: str,
        repo: str,
        issue_id: int,
        *,
        thread: ThreadKind = ThreadKind.PULL_REQUEST,
    ) -> list[CommentRecord]:
        """Return the thread's comments in creation order.

        ``thread`` selects between issue and pull request numbering on
        providers that keep them apart. An issue without comments yields an
        empty list. Network and auth failures raise
        :class:`~triggergate.providers.errors.TransportError`.
        """
        ...

    async def is_collaborator(self, org: str, repo: str, login: str) -> bool:
        """Return whether ``login`` has at least write access to the repository.

        Non-membership is ``False``; only transport or auth failures raise.
        """
        ...

    async def get_file_content(
        self, org: str, repo: str, path: str, ref: str
    ) -> bytes:
        """Return the raw bytes of ``path`` at ``ref``.

        Raises :class:`~triggergate.providers.errors.NotFoundError` when the
        path or ref does not exist.
        """
        ...
