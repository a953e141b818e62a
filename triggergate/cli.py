"""Command-line helpers for ACL checks and OWNERS linting.

``triggergate check`` evaluates one event against the provider configured by
the ``TRIGGERGATE_PROVIDER*`` environment variables and reports the verdict
through the exit status: ``0`` allowed, ``1`` denied, ``2`` error. Only
status ``2`` is worth retrying.

``triggergate lint-owners`` validates an OWNERS file locally.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path

from triggergate.acl import (
    AclDecision,
    AclEngine,
    AclError,
    AclSettings,
    PolicyFormatError,
    load_owners,
)
from triggergate.common.slug import parse_repo_slug
from triggergate.events import (
    Event,
    EventType,
    TriggerTarget,
    decode_payload,
)
from triggergate.logging import configure_logging, get_logger, log_warning
from triggergate.providers import (
    ProviderConfig,
    ProviderError,
    build_provider_client,
)

logger = get_logger(__name__)

EXIT_ALLOWED = 0
EXIT_DENIED = 1
EXIT_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="triggergate", description=__doc__)
    parser.add_argument(
        "--log-level",
        default=os.environ.get("TRIGGERGATE_LOG_LEVEL", "INFO"),
        help="femtologging level (default: TRIGGERGATE_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Evaluate one event")
    check.add_argument(
        "repository", help="Repository slug, owner/name or group/subgroup/name"
    )
    check.add_argument("--sender", required=True, help="Login that sent the event")
    check.add_argument(
        "--default-branch", default="", help="Repository default branch"
    )
    check.add_argument("--base-branch", default="", help="Pull request base branch")
    check.add_argument(
        "--event-type",
        choices=[item.value for item in EventType],
        default=EventType.PULL_REQUEST.value,
    )
    check.add_argument(
        "--trigger-target",
        choices=[item.value for item in TriggerTarget],
        default=TriggerTarget.DEFAULT.value,
    )
    check.add_argument(
        "--payload",
        type=Path,
        default=None,
        help="Optional webhook JSON body to attach to the event",
    )

    lint = subparsers.add_parser("lint-owners", help="Validate an OWNERS file")
    lint.add_argument("owners", type=Path, help="OWNERS file to validate")
    return parser


def _build_event(args: argparse.Namespace) -> Event:
    organization, repository = parse_repo_slug(args.repository)
    event_type = EventType(args.event_type)
    payload = None
    if args.payload is not None:
        payload = decode_payload(event_type, args.payload.read_bytes())
    return Event(
        organization=organization,
        repository=repository,
        sender=args.sender,
        default_branch=args.default_branch,
        base_branch=args.base_branch,
        event_type=event_type,
        trigger_target=TriggerTarget(args.trigger_target),
        payload=payload,
    )


async def _evaluate(event: Event) -> AclDecision:
    config = ProviderConfig.from_env()
    settings = AclSettings.from_env()
    async with build_provider_client(config) as provider:
        return await AclEngine(provider, settings=settings).evaluate(event)


def _check(args: argparse.Namespace) -> int:
    try:
        event = _build_event(args)
    except (OSError, ValueError) as exc:
        # PayloadDecodeError is a ValueError.
        print(f"invalid event: {exc}", file=sys.stderr)
        return EXIT_ERROR

    try:
        decision = asyncio.run(_evaluate(event))
    except (ProviderError, AclError, TimeoutError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    if decision.allowed:
        print(
            f"allowed: {event.slug} sender={event.sender} "
            f"source={decision.source} login={decision.login}"
        )
        return EXIT_ALLOWED
    print(f"denied: {event.slug} sender={event.sender}")
    return EXIT_DENIED


def _lint_owners(path: Path) -> int:
    try:
        policy = load_owners(path)
    except (OSError, PolicyFormatError) as exc:
        print(f"OWNERS validation failed for {path}: {exc}")
        return EXIT_DENIED
    print(f"OWNERS {path} is valid ({len(policy.approvers)} approvers)")
    return EXIT_ALLOWED


def main(argv: list[str] | None = None) -> int:
    """Run the triggergate command line.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Process exit status.

    """
    args = _build_parser().parse_args(argv)
    level, invalid = configure_logging(args.log_level, force=True)
    if invalid:
        log_warning(logger, "Unknown log level %r; using %s", args.log_level, level)

    if args.command == "lint-owners":
        return _lint_owners(args.owners)
    return _check(args)


__all__ = ["EXIT_ALLOWED", "EXIT_DENIED", "EXIT_ERROR", "main"]


if __name__ == "__main__":
    raise SystemExit(main())
