"""Provider-agnostic event model handed to the ACL engine."""

from __future__ import annotations

import dataclasses
import enum

import msgspec

from triggergate.common.slug import repo_slug

from .payloads import (
    IssueCommentPayload,
    Payload,
    PayloadDecodeError,
    PullRequestPayload,
    RepositoryPayload,
    ThreadKind,
)


class EventType(enum.StrEnum):
    """Kinds of Git-hosting events the gateway receives."""

    ISSUE_COMMENT = "issue_comment"
    PULL_REQUEST = "pull_request"
    PUSH = "push"


class TriggerTarget(enum.StrEnum):
    """Logical trigger category selecting which ACL path applies."""

    DEFAULT = "default"
    OK_TO_TEST_COMMENT = "ok-to-test-comment"


@dataclasses.dataclass(frozen=True, slots=True)
class Event:
    """Normalised inbound trigger.

    Attributes
    ----------
    organization
        Organisation, group, workspace or user owning the repository.
    repository
        Repository name within ``organization``.
    sender
        Login of the actor who produced the event.
    default_branch
        Repository default branch; OWNERS is read from this ref.
    base_branch
        Target branch of the pull request, when there is one.
    event_type
        Kind of webhook the event was decoded from.
    trigger_target
        ACL path selector.
    payload
        Provider payload; only reachable through the typed accessors below.

    """

    organization: str
    repository: str
    sender: str
    default_branch: str = ""
    base_branch: str = ""
    event_type: EventType = EventType.PULL_REQUEST
    trigger_target: TriggerTarget = TriggerTarget.DEFAULT
    payload: Payload | None = None

    @property
    def slug(self) -> str:
        """Return the ``organization/repository`` identifier."""
        return repo_slug(self.organization, self.repository)

    def commentable_url(self) -> str | None:
        """Return the issue or pull request URL when the payload carries one.

        Repository-level payloads, or no payload at all, return ``None``.
        """
        payload = self.payload
        if isinstance(payload, IssueCommentPayload):
            return payload.issue.url or None
        if isinstance(payload, PullRequestPayload):
            return payload.pull_request.url or None
        return None

    def thread_kind(self) -> ThreadKind:
        """Return whether the commentable thread is an issue or a pull request.

        Issue comment payloads name a pull request thread through
        ``issue.pull_request``; pull request payloads always do.
        """
        payload = self.payload
        if isinstance(payload, IssueCommentPayload):
            if payload.issue.pull_request is None:
                return ThreadKind.ISSUE
        return ThreadKind.PULL_REQUEST


def decode_payload(event_type: EventType, body: bytes | str) -> Payload:
    """Decode a webhook JSON body into the payload struct for ``event_type``.

    Raises
    ------
    PayloadDecodeError
        If the body is not valid JSON or lacks the fields the struct requires.

    """
    payload_type: type[Payload]
    match event_type:
        case EventType.ISSUE_COMMENT:
            payload_type = IssueCommentPayload
        case EventType.PULL_REQUEST:
            payload_type = PullRequestPayload
        case _:
            payload_type = RepositoryPayload
    try:
        return msgspec.json.decode(body, type=payload_type)
    except msgspec.DecodeError as exc:
        raise PayloadDecodeError.invalid(event_type, exc) from exc
