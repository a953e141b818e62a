"""Errors raised by ACL policy parsing and configuration."""

from __future__ import annotations


class AclError(Exception):
    """Base exception for ACL engine errors."""


class PolicyFormatError(AclError):
    """Raised when an OWNERS file is present but structurally unparsable.

    A malformed policy is an operator mistake, so it is surfaced instead of
    being treated as "no policy".
    """

    @classmethod
    def not_utf8(cls, detail: object) -> PolicyFormatError:
        """Return an error for content that is not valid UTF-8."""
        return cls(f"OWNERS file is not valid UTF-8: {detail}")

    @classmethod
    def invalid_yaml(cls, detail: object) -> PolicyFormatError:
        """Return an error for content the YAML loader rejected."""
        return cls(f"failed to parse OWNERS YAML: {detail}")

    @classmethod
    def invalid_schema(cls, detail: object) -> PolicyFormatError:
        """Return an error for YAML whose structure is not an OWNERS file."""
        return cls(f"OWNERS schema validation failed: {detail}")


class AclConfigError(AclError):
    """Raised when ACL settings from the environment are invalid."""

    @classmethod
    def empty_command(cls) -> AclConfigError:
        """Return an error for a blank trigger phrase."""
        return cls("TRIGGERGATE_OK_TO_TEST_COMMAND must be non-empty")

    @classmethod
    def empty_owners_path(cls) -> AclConfigError:
        """Return an error for a blank OWNERS path."""
        return cls("TRIGGERGATE_OWNERS_PATH must be non-empty")

    @classmethod
    def invalid_timeout(cls, value: str) -> AclConfigError:
        """Return an error for a non-positive or non-numeric decision timeout."""
        return cls(f"Invalid ACL timeout '{value}'. Must be a positive number")
