"""Settings for the ACL engine."""

from __future__ import annotations

import dataclasses
import os

from .errors import AclConfigError

OK_TO_TEST_COMMAND = "/ok-to-test"
OWNERS_PATH = "OWNERS"


@dataclasses.dataclass(frozen=True, slots=True)
class AclSettings:
    """Tunables for trust evaluation.

    Attributes
    ----------
    ok_to_test_command
        Comment body that, authored by a trusted login, admits an event.
    owners_path
        Repository path of the OWNERS policy file.
    timeout_s
        Deadline for one whole decision, or ``None`` for no deadline.

    """

    ok_to_test_command: str = OK_TO_TEST_COMMAND
    owners_path: str = OWNERS_PATH
    timeout_s: float | None = None

    @staticmethod
    def _parse_timeout_from_env() -> float | None:
        raw = os.environ.get("TRIGGERGATE_ACL_TIMEOUT_S")
        if raw is None or not raw.strip():
            return None
        try:
            timeout = float(raw)
        except ValueError as exc:
            raise AclConfigError.invalid_timeout(raw) from exc
        if timeout <= 0:
            raise AclConfigError.invalid_timeout(raw)
        return timeout

    @classmethod
    def from_env(cls) -> AclSettings:
        """Build settings from environment variables.

        Reads the following environment variables:

        - ``TRIGGERGATE_OK_TO_TEST_COMMAND``: trigger phrase override
        - ``TRIGGERGATE_OWNERS_PATH``: OWNERS path override
        - ``TRIGGERGATE_ACL_TIMEOUT_S``: optional positive decision deadline

        Raises
        ------
        AclConfigError
            If an override is blank or the timeout is invalid.

        """
        command = os.environ.get("TRIGGERGATE_OK_TO_TEST_COMMAND", OK_TO_TEST_COMMAND)
        if not command.strip():
            raise AclConfigError.empty_command()

        owners_path = os.environ.get("TRIGGERGATE_OWNERS_PATH", OWNERS_PATH)
        if not owners_path.strip():
            raise AclConfigError.empty_owners_path()

        return cls(
            ok_to_test_command=command.strip(),
            owners_path=owners_path.strip(),
            timeout_s=cls._parse_timeout_from_env(),
        )
