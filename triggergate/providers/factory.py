"""Select the provider client implementation for a configuration."""

from __future__ import annotations

import typing as typ

from .bitbucket import BitbucketProviderClient
from .config import ProviderConfig, ProviderKind
from .errors import ProviderConfigError
from .gitea import GiteaProviderClient
from .github import GitHubProviderClient
from .gitlab import GitLabProviderClient

if typ.TYPE_CHECKING:
    import httpx

    from .rest import RestProviderClient

_CLIENTS: dict[ProviderKind, type[RestProviderClient]] = {
    ProviderKind.GITHUB: GitHubProviderClient,
    ProviderKind.GITEA: GiteaProviderClient,
    ProviderKind.GITLAB: GitLabProviderClient,
    ProviderKind.BITBUCKET: BitbucketProviderClient,
}


def build_provider_client(
    config: ProviderConfig,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> RestProviderClient:
    """Return the adapter for ``config.kind``.

    Parameters
    ----------
    config
        Provider configuration, usually from :meth:`ProviderConfig.from_env`.
    http_client
        Optional shared client; when omitted the adapter owns its own client
        and closes it in ``aclose()``.

    Raises
    ------
    ProviderConfigError
        If no adapter is registered for ``config.kind``.

    """
    try:
        client_cls = _CLIENTS[config.kind]
    except KeyError as exc:
        raise ProviderConfigError.unknown_provider(
            str(config.kind), [kind.value for kind in _CLIENTS]
        ) from exc
    return client_cls(config, http_client=http_client)


def build_provider_client_from_env() -> RestProviderClient:
    """Build the adapter described by ``TRIGGERGATE_PROVIDER*`` variables."""
    return build_provider_client(ProviderConfig.from_env())
