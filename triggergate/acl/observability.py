"""Structured log events for ACL decisions.

A denial is a policy outcome logged at INFO. A failure is logged at ERROR
with an :class:`ErrorCategory` separating transient provider outages from
configuration and policy mistakes.
"""

from __future__ import annotations

import asyncio
import enum
import typing as typ

from triggergate.logging import get_logger, log_debug, log_error, log_info
from triggergate.providers.errors import (
    ProviderConfigError,
    ResponseShapeError,
    TransportError,
)

from .errors import AclConfigError, PolicyFormatError

if typ.TYPE_CHECKING:
    from triggergate.events.models import Event

    from .engine import AclDecision

logger = get_logger(__name__)

_HTTP_SERVER_ERROR_THRESHOLD = 500


class AclEventType(enum.StrEnum):
    """Structured log event types for ACL decisions."""

    DECISION_ALLOWED = "acl.decision.allowed"
    DECISION_DENIED = "acl.decision.denied"
    DECISION_FAILED = "acl.decision.failed"
    TRIGGER_NOT_APPLICABLE = "acl.trigger.not_applicable"
    OWNERS_MISSING = "acl.owners.missing"


class ErrorCategory(enum.StrEnum):
    """Categories for error classification in alerts."""

    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    POLICY_FORMAT = "policy_format"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (ResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (PolicyFormatError, ErrorCategory.POLICY_FORMAT),
    (ProviderConfigError, ErrorCategory.CONFIGURATION),
    (AclConfigError, ErrorCategory.CONFIGURATION),
    (TimeoutError, ErrorCategory.TIMEOUT),
    (asyncio.CancelledError, ErrorCategory.CANCELLED),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception raised during a decision for alert routing."""
    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    # Timeouts and network failures carry no status and are worth retrying.
    if isinstance(exc, TransportError):
        if exc.status_code is None or exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD:
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    return ErrorCategory.UNKNOWN


class AclEventLogger:
    """Emit structured ACL events via femtologging."""

    def log_allowed(self, event: Event, decision: AclDecision) -> None:
        """Log an admitted event with the trust source that granted it."""
        log_info(
            logger,
            "[%s] repo_slug=%s sender=%s trust_source=%s trusted_login=%s",
            AclEventType.DECISION_ALLOWED,
            event.slug,
            event.sender,
            decision.source,
            decision.login,
        )

    def log_denied(self, event: Event) -> None:
        """Log an event denied for lack of trust evidence."""
        log_info(
            logger,
            "[%s] repo_slug=%s sender=%s trigger_target=%s",
            AclEventType.DECISION_DENIED,
            event.slug,
            event.sender,
            event.trigger_target,
        )

    def log_failed(self, event: Event, error: BaseException) -> None:
        """Log a decision aborted by an error, with its category."""
        log_error(
            logger,
            "[%s] repo_slug=%s sender=%s error_type=%s error_category=%s "
            "error_message=%s",
            AclEventType.DECISION_FAILED,
            event.slug,
            event.sender,
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )

    def log_not_applicable(self, event: Event, reason: str) -> None:
        """Log an ``ok-to-test`` trigger whose payload cannot carry comments."""
        log_debug(
            logger,
            "[%s] repo_slug=%s event_type=%s reason=%s",
            AclEventType.TRIGGER_NOT_APPLICABLE,
            event.slug,
            event.event_type,
            reason,
        )

    def log_owners_missing(self, event: Event, path: str, ref: str) -> None:
        """Log that no OWNERS file exists at the default branch."""
        log_debug(
            logger,
            "[%s] repo_slug=%s path=%s ref=%s",
            AclEventType.OWNERS_MISSING,
            event.slug,
            path,
            ref,
        )
