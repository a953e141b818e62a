"""Git-hosting provider capability interface and REST adapters."""

from __future__ import annotations

from .bitbucket import BitbucketProviderClient
from .config import ProviderConfig, ProviderKind
from .errors import (
    NotFoundError,
    ProviderAPIError,
    ProviderConfigError,
    ProviderError,
    ResponseShapeError,
    TransportError,
)
from .factory import build_provider_client, build_provider_client_from_env
from .gitea import GiteaProviderClient
from .github import GitHubProviderClient
from .gitlab import GitLabProviderClient
from .protocol import CommentRecord, ProviderClient

__all__ = [
    "BitbucketProviderClient",
    "CommentRecord",
    "GitHubProviderClient",
    "GitLabProviderClient",
    "GiteaProviderClient",
    "NotFoundError",
    "ProviderAPIError",
    "ProviderClient",
    "ProviderConfig",
    "ProviderConfigError",
    "ProviderError",
    "ProviderKind",
    "ResponseShapeError",
    "TransportError",
    "build_provider_client",
    "build_provider_client_from_env",
]
