"""Normalised event model and webhook payload structures."""

from __future__ import annotations

from .models import Event, EventType, TriggerTarget, decode_payload
from .payloads import (
    CommentRef,
    IssueCommentPayload,
    IssueRef,
    Payload,
    PayloadDecodeError,
    PullRequestLink,
    PullRequestPayload,
    RepositoryPayload,
    RepositoryRef,
    ThreadKind,
    UserRef,
    issue_id_from_url,
)

__all__ = [
    "CommentRef",
    "Event",
    "EventType",
    "IssueCommentPayload",
    "IssueRef",
    "Payload",
    "PayloadDecodeError",
    "PullRequestLink",
    "PullRequestPayload",
    "RepositoryPayload",
    "RepositoryRef",
    "ThreadKind",
    "TriggerTarget",
    "UserRef",
    "decode_payload",
    "issue_id_from_url",
]
