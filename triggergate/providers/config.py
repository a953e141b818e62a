"""Configuration for Git-hosting provider clients."""

from __future__ import annotations

import dataclasses
import enum
import os

from .errors import ProviderConfigError

_DEFAULT_TIMEOUT_S = 20.0
_DEFAULT_USER_AGENT = "triggergate/0.1"


class ProviderKind(enum.StrEnum):
    """Supported Git-hosting providers."""

    GITHUB = "github"
    GITEA = "gitea"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"


# Gitea is always self-hosted, so it has no default endpoint.
_DEFAULT_API_URLS: dict[ProviderKind, str] = {
    ProviderKind.GITHUB: "https://api.github.com",
    ProviderKind.GITLAB: "https://gitlab.com/api/v4",
    ProviderKind.BITBUCKET: "https://api.bitbucket.org/2.0",
}


def default_api_url(kind: ProviderKind) -> str | None:
    """Return the public API root for ``kind``, if it has one."""
    return _DEFAULT_API_URLS.get(kind)


@dataclasses.dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Configuration for one provider client.

    Attributes
    ----------
    kind
        Provider selecting the adapter implementation.
    token
        API token sent with every request.
    api_url
        REST API root, without a trailing slash.
    timeout_s
        Per-request timeout in seconds.
    user_agent
        ``User-Agent`` header value.

    """

    kind: ProviderKind
    token: str
    api_url: str
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = _DEFAULT_USER_AGENT

    @staticmethod
    def _parse_kind(raw: str | None) -> ProviderKind:
        name = (raw or ProviderKind.GITHUB).strip().lower()
        try:
            return ProviderKind(name)
        except ValueError as exc:
            raise ProviderConfigError.unknown_provider(
                name, [kind.value for kind in ProviderKind]
            ) from exc

    @staticmethod
    def _parse_timeout(raw: str | None) -> float:
        if raw is None:
            return _DEFAULT_TIMEOUT_S
        try:
            timeout = float(raw)
        except ValueError as exc:
            raise ProviderConfigError.invalid_timeout(raw) from exc
        if timeout <= 0:
            raise ProviderConfigError.invalid_timeout(raw)
        return timeout

    @classmethod
    def from_env(cls) -> ProviderConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``TRIGGERGATE_PROVIDER``: provider name (default ``github``)
        - ``TRIGGERGATE_PROVIDER_TOKEN``: required API token
        - ``TRIGGERGATE_PROVIDER_API_URL``: API root override; required for
          Gitea
        - ``TRIGGERGATE_PROVIDER_TIMEOUT_S``: optional positive timeout

        Raises
        ------
        ProviderConfigError
            If a variable is missing or invalid.

        """
        kind = cls._parse_kind(os.environ.get("TRIGGERGATE_PROVIDER"))

        raw_token = os.environ.get("TRIGGERGATE_PROVIDER_TOKEN")
        if raw_token is None:
            raise ProviderConfigError.missing_token()
        token = raw_token.strip()
        if not token:
            raise ProviderConfigError.empty_token()

        api_url = os.environ.get("TRIGGERGATE_PROVIDER_API_URL", "").strip()
        if not api_url:
            api_url = default_api_url(kind) or ""
        if not api_url:
            raise ProviderConfigError.missing_api_url(kind)

        return cls(
            kind=kind,
            token=token,
            api_url=api_url.rstrip("/"),
            timeout_s=cls._parse_timeout(
                os.environ.get("TRIGGERGATE_PROVIDER_TIMEOUT_S")
            ),
        )
