"""Errors raised by Git-hosting provider clients.

Absence of evidence is not an error: a missing collaborator is reported as
``False``. Only :class:`NotFoundError` signals a missing file or ref, and the
ACL engine recovers it into a denial. Everything under
:class:`TransportError` is a genuine fault that callers must surface.
"""

from __future__ import annotations


class ProviderError(Exception):
    """Base exception for all provider client errors."""


class TransportError(ProviderError):
    """Raised for network, authentication or malformed-response failures.

    Attributes
    ----------
    status_code
        HTTP status code of the failing response, if one was received.

    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def timeout(cls, provider: str) -> TransportError:
        """Return an error for a request that exceeded its timeout."""
        return cls(f"{provider} API request timed out")

    @classmethod
    def network_error(cls, provider: str, detail: object) -> TransportError:
        """Return an error for DNS, connection or TLS failures."""
        return cls(f"{provider} API network error: {detail}")


class ProviderAPIError(TransportError):
    """Raised when a provider answers with an HTTP error status."""

    @classmethod
    def http_error(cls, provider: str, status_code: int, path: str) -> ProviderAPIError:
        """Return an error for a failing HTTP status on ``path``."""
        return cls(
            f"{provider} API HTTP {status_code} for {path}",
            status_code=status_code,
        )


class ResponseShapeError(TransportError):
    """Raised when a provider response is missing expected fields."""

    @classmethod
    def missing(cls, provider: str, field: str) -> ResponseShapeError:
        """Return an error for a missing or mistyped response field."""
        return cls(f"{provider} API response missing expected field: {field}")

    @classmethod
    def undecodable(cls, provider: str, detail: object) -> ResponseShapeError:
        """Return an error for a response body that could not be decoded."""
        return cls(f"{provider} API response could not be decoded: {detail}")

    @classmethod
    def too_many_pages(cls, provider: str, limit: int) -> ResponseShapeError:
        """Return an error when pagination does not terminate."""
        return cls(f"{provider} API pagination exceeded {limit} pages")


class NotFoundError(ProviderError):
    """Raised when a file or ref does not exist in the repository."""

    def __init__(self, message: str, *, path: str, ref: str) -> None:
        """Initialise with the missing ``path`` and the ``ref`` it was read at."""
        self.path = path
        self.ref = ref
        super().__init__(message)

    @classmethod
    def file(cls, slug: str, path: str, ref: str) -> NotFoundError:
        """Return an error for ``path`` missing from ``slug`` at ``ref``."""
        return cls(f"{path} not found in {slug} at ref {ref!r}", path=path, ref=ref)


class ProviderConfigError(ProviderError):
    """Raised when provider client configuration is invalid."""

    @classmethod
    def missing_token(cls) -> ProviderConfigError:
        """Return an error when no token is configured."""
        return cls("TRIGGERGATE_PROVIDER_TOKEN is required for provider access")

    @classmethod
    def empty_token(cls) -> ProviderConfigError:
        """Return an error when the provided token is empty."""
        return cls("Provider token must be non-empty")

    @classmethod
    def unknown_provider(cls, name: str, valid: list[str]) -> ProviderConfigError:
        """Return an error for an unrecognised provider name."""
        options = ", ".join(f"'{item}'" for item in sorted(valid))
        return cls(f"Invalid provider '{name}'. Valid options are: {options}")

    @classmethod
    def missing_api_url(cls, provider: str) -> ProviderConfigError:
        """Return an error when a provider has no default API URL."""
        return cls(f"TRIGGERGATE_PROVIDER_API_URL is required for {provider}")

    @classmethod
    def invalid_timeout(cls, value: str) -> ProviderConfigError:
        """Return an error for a non-positive or non-numeric timeout."""
        return cls(f"Invalid provider timeout '{value}'. Must be a positive number")
