"""Access control for CI triggers: OWNERS policy, comment commands, engine."""

from __future__ import annotations

from .commands import is_command, iter_command_authors
from .config import OK_TO_TEST_COMMAND, OWNERS_PATH, AclSettings
from .engine import AclDecision, AclEngine, TrustSource
from .errors import AclConfigError, AclError, PolicyFormatError
from .observability import AclEventLogger, AclEventType, ErrorCategory, categorize_error
from .owners import OwnersPolicy, load_owners, parse_owners

__all__ = [
    "OK_TO_TEST_COMMAND",
    "OWNERS_PATH",
    "AclConfigError",
    "AclDecision",
    "AclEngine",
    "AclError",
    "AclEventLogger",
    "AclEventType",
    "AclSettings",
    "ErrorCategory",
    "OwnersPolicy",
    "PolicyFormatError",
    "TrustSource",
    "categorize_error",
    "is_command",
    "iter_command_authors",
    "load_owners",
    "parse_owners",
]
