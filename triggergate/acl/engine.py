"""ACL engine deciding whether an event may trigger a pipeline run.

Trust for a login is the first match among, in order:

1. the login is the repository's organisation (owner identity);
2. the provider reports the login as a collaborator with write access;
3. the login is an approver in the OWNERS file on the default branch.

For ``ok-to-test-comment`` triggers whose sender is not trusted, the issue
thread is scanned for the ``/ok-to-test`` command and each command author is
put through the same three checks. An untrusted actor therefore cannot
admit itself by commenting.

Absence of evidence (no membership, no OWNERS file, no matching comment, a
payload that cannot carry comments) is a denial. Provider faults, malformed
OWNERS files, deadline expiry and cancellation propagate as exceptions so a
caller never mistakes an outage for a denial.

Usage
-----
>>> async with build_provider_client(config) as provider:
...     engine = AclEngine(provider)
...     if await engine.is_allowed(event):
...         ...

"""

from __future__ import annotations

import asyncio
import dataclasses
import enum
import typing as typ

from triggergate.events.models import TriggerTarget
from triggergate.events.payloads import issue_id_from_url
from triggergate.providers.errors import NotFoundError

from .commands import iter_command_authors
from .config import AclSettings
from .observability import AclEventLogger
from .owners import OwnersPolicy, parse_owners

if typ.TYPE_CHECKING:
    from triggergate.events.models import Event
    from triggergate.providers.protocol import ProviderClient


class TrustSource(enum.StrEnum):
    """Evidence that granted an event access."""

    OWNER = "owner"
    COLLABORATOR = "collaborator"
    OWNERS_FILE = "owners_file"
    OK_TO_TEST_COMMENT = "ok_to_test_comment"


@dataclasses.dataclass(frozen=True, slots=True)
class AclDecision:
    """Verdict for one event.

    Attributes
    ----------
    allowed
        Whether the event may trigger a pipeline run.
    source
        Trust source that granted access, ``None`` when denied.
    login
        Login whose trust granted access: the sender, or the author of the
        ``/ok-to-test`` comment.

    """

    allowed: bool
    source: TrustSource | None = None
    login: str | None = None

    @classmethod
    def granted(cls, source: TrustSource, login: str) -> AclDecision:
        """Return an allowing decision."""
        return cls(allowed=True, source=source, login=login)

    @classmethod
    def denied(cls) -> AclDecision:
        """Return a denying decision."""
        return cls(allowed=False)


_DENIED = AclDecision.denied()


@dataclasses.dataclass(slots=True)
class _DecisionScope:
    """Evidence gathered while deciding one event; discarded afterwards."""

    owners: OwnersPolicy | None = None
    owners_loaded: bool = False
    untrusted: set[str] = dataclasses.field(default_factory=set)


class AclEngine:
    """Evaluate events against provider trust sources.

    The engine keeps no state between decisions; the provider is injected so
    concurrent decisions for different tenants never share clients.
    """

    def __init__(
        self,
        provider: ProviderClient,
        *,
        settings: AclSettings | None = None,
        event_logger: AclEventLogger | None = None,
    ) -> None:
        """Bind the engine to ``provider`` and optional settings."""
        self._provider = provider
        self._settings = settings or AclSettings()
        self._events = event_logger or AclEventLogger()

    async def is_allowed(self, event: Event) -> bool:
        """Return whether ``event`` may trigger a pipeline run.

        Raises
        ------
        TransportError
            If the provider could not be queried.
        PolicyFormatError
            If the OWNERS file exists but cannot be parsed.
        TimeoutError
            If the configured decision deadline expired.

        """
        decision = await self.evaluate(event)
        return decision.allowed

    async def evaluate(self, event: Event) -> AclDecision:
        """Return the full :class:`AclDecision` for ``event``.

        Raises the same exceptions as :meth:`is_allowed`; each failure is
        logged with its error category before propagating.
        """
        try:
            async with asyncio.timeout(self._settings.timeout_s):
                decision = await self._evaluate(event, _DecisionScope())
        except (Exception, asyncio.CancelledError) as exc:
            self._events.log_failed(event, exc)
            raise

        if decision.allowed:
            self._events.log_allowed(event, decision)
        else:
            self._events.log_denied(event)
        return decision

    async def check_trust(self, event: Event, login: str) -> AclDecision:
        """Evaluate owner, collaborator and OWNERS trust for ``login``.

        ``event`` only supplies the repository coordinates and default branch,
        so any login can be checked, not just the sender.
        """
        return await self._check_trust(event, login, _DecisionScope())

    async def _evaluate(self, event: Event, scope: _DecisionScope) -> AclDecision:
        decision = await self._check_trust(event, event.sender, scope)
        if decision.allowed:
            return decision
        if event.trigger_target is TriggerTarget.OK_TO_TEST_COMMENT:
            return await self._check_ok_to_test(event, scope)
        return _DENIED

    async def _check_trust(
        self, event: Event, login: str, scope: _DecisionScope
    ) -> AclDecision:
        if not login or login in scope.untrusted:
            return _DENIED

        if login == event.organization:
            return AclDecision.granted(TrustSource.OWNER, login)

        if await self._provider.is_collaborator(
            event.organization, event.repository, login
        ):
            return AclDecision.granted(TrustSource.COLLABORATOR, login)

        owners = await self._owners_policy(event, scope)
        if owners is not None and owners.approves(login):
            return AclDecision.granted(TrustSource.OWNERS_FILE, login)

        scope.untrusted.add(login)
        return _DENIED

    async def _owners_policy(
        self, event: Event, scope: _DecisionScope
    ) -> OwnersPolicy | None:
        """Fetch and parse OWNERS at the default branch, once per decision."""
        if scope.owners_loaded:
            return scope.owners

        path = self._settings.owners_path
        ref = event.default_branch
        scope.owners_loaded = True
        if not ref:
            self._events.log_owners_missing(event, path, ref)
            return None
        try:
            content = await self._provider.get_file_content(
                event.organization, event.repository, path, ref
            )
        except NotFoundError:
            self._events.log_owners_missing(event, path, ref)
            return None

        scope.owners = parse_owners(content)
        return scope.owners

    async def _check_ok_to_test(
        self, event: Event, scope: _DecisionScope
    ) -> AclDecision:
        url = event.commentable_url()
        if url is None:
            self._events.log_not_applicable(event, "payload carries no issue")
            return _DENIED
        issue_id = issue_id_from_url(url)
        if issue_id is None:
            self._events.log_not_applicable(event, "issue url has no numeric id")
            return _DENIED

        comments = await self._provider.list_issue_comments(
            event.organization,
            event.repository,
            issue_id,
            thread=event.thread_kind(),
        )
        for author in iter_command_authors(
            comments, self._settings.ok_to_test_command
        ):
            decision = await self._check_trust(event, author, scope)
            if decision.allowed:
                return AclDecision.granted(TrustSource.OK_TO_TEST_COMMENT, author)
        return _DENIED
