"""Typed webhook payload structures consumed by the ACL engine.

Only the fields the trust decision needs are declared; msgspec ignores the
rest of the provider payload when decoding.
"""

from __future__ import annotations

import enum
from urllib.parse import urlsplit

import msgspec


class ThreadKind(enum.StrEnum):
    """Conversation a comment thread belongs to."""

    ISSUE = "issue"
    PULL_REQUEST = "pull_request"


class PullRequestLink(msgspec.Struct, kw_only=True, frozen=True):
    """Marker attached to an issue that is really a pull request."""

    url: str | None = None


class IssueRef(msgspec.Struct, kw_only=True, frozen=True):
    """Issue or pull request reference carried by a webhook payload.

    Attributes
    ----------
    url : str
        API or web URL of the issue; the last path segment is the issue id.
    number : int, optional
        Issue number when the provider includes it.
    html_url : str, optional
        Browser URL for log messages.
    pull_request : PullRequestLink, optional
        Present when the issue is a pull request or merge request, as in
        GitHub and Gitea ``issue_comment`` payloads.

    """

    url: str
    number: int | None = None
    html_url: str | None = None
    pull_request: PullRequestLink | None = None


class UserRef(msgspec.Struct, kw_only=True, frozen=True):
    """Account reference embedded in payloads."""

    login: str


class CommentRef(msgspec.Struct, kw_only=True, frozen=True):
    """Comment that triggered an ``issue_comment`` event."""

    body: str = ""
    user: UserRef | None = None


class RepositoryRef(msgspec.Struct, kw_only=True, frozen=True):
    """Repository reference embedded in repository-level payloads."""

    full_name: str | None = None
    default_branch: str | None = None


class IssueCommentPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Payload for comments posted on an issue or pull request."""

    issue: IssueRef
    comment: CommentRef | None = None


class PullRequestPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Payload for pull request lifecycle events."""

    pull_request: IssueRef


class RepositoryPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Payload that only identifies a repository (push, repository events)."""

    repository: RepositoryRef | None = None


Payload = IssueCommentPayload | PullRequestPayload | RepositoryPayload


class PayloadDecodeError(ValueError):
    """Raised when a webhook body cannot be decoded into a payload struct."""

    @classmethod
    def invalid(cls, event_type: str, detail: object) -> PayloadDecodeError:
        """Return an error for a body that does not match ``event_type``."""
        return cls(f"cannot decode {event_type} payload: {detail}")


def issue_id_from_url(url: str) -> int | None:
    """Return the numeric issue id held in the last path segment of ``url``.

    Examples
    --------
    >>> issue_id_from_url("http://url.com/owner/repo/1")
    1
    >>> issue_id_from_url("https://api.github.com/repos/o/r/pulls/42/")
    42
    >>> issue_id_from_url("https://example.test/o/r") is None
    True

    """
    segments = [segment for segment in urlsplit(url).path.split("/") if segment]
    if not segments:
        return None
    last = segments[-1]
    if not last.isascii() or not last.isdigit():
        return None
    return int(last)
