"""Tests for provider configuration loading."""

from __future__ import annotations

import pytest

from triggergate.providers import ProviderConfig, ProviderConfigError, ProviderKind
from triggergate.providers.config import default_api_url


def test_github_is_the_default_provider(monkeypatch: pytest.MonkeyPatch) -> None:
    """Only a token is needed for github.com."""
    monkeypatch.setenv("TRIGGERGATE_PROVIDER_TOKEN", " ghs_token ")

    config = ProviderConfig.from_env()

    assert config.kind is ProviderKind.GITHUB
    assert config.token == "ghs_token"
    assert config.api_url == "https://api.github.com"
    assert config.timeout_s == 20.0


def test_api_url_override_drops_trailing_slash(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A self-hosted API root is normalised."""
    monkeypatch.setenv("TRIGGERGATE_PROVIDER", " Gitea ")
    monkeypatch.setenv("TRIGGERGATE_PROVIDER_TOKEN", "t")
    monkeypatch.setenv("TRIGGERGATE_PROVIDER_API_URL", "https://git.test/api/v1/")
    monkeypatch.setenv("TRIGGERGATE_PROVIDER_TIMEOUT_S", "5")

    config = ProviderConfig.from_env()

    assert config.kind is ProviderKind.GITEA
    assert config.api_url == "https://git.test/api/v1"
    assert config.timeout_s == 5.0


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (ProviderKind.GITHUB, "https://api.github.com"),
        (ProviderKind.GITLAB, "https://gitlab.com/api/v4"),
        (ProviderKind.BITBUCKET, "https://api.bitbucket.org/2.0"),
        (ProviderKind.GITEA, None),
    ],
)
def test_default_api_urls(kind: ProviderKind, expected: str | None) -> None:
    """Hosted providers have a public API root; Gitea does not."""
    assert default_api_url(kind) == expected


def test_missing_token_raises() -> None:
    """The token variable is mandatory."""
    with pytest.raises(ProviderConfigError, match="TRIGGERGATE_PROVIDER_TOKEN"):
        ProviderConfig.from_env()


def test_blank_token_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    """A whitespace token is rejected."""
    monkeypatch.setenv("TRIGGERGATE_PROVIDER_TOKEN", "   ")

    with pytest.raises(ProviderConfigError, match="non-empty"):
        ProviderConfig.from_env()


def test_unknown_provider_lists_valid_options(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """An unknown provider name names the accepted values."""
    monkeypatch.setenv("TRIGGERGATE_PROVIDER", "sourcehut")
    monkeypatch.setenv("TRIGGERGATE_PROVIDER_TOKEN", "t")

    with pytest.raises(ProviderConfigError, match="'bitbucket', 'gitea'"):
        ProviderConfig.from_env()


def test_gitea_requires_api_url(monkeypatch: pytest.MonkeyPatch) -> None:
    """Self-hosted Gitea has no default endpoint."""
    monkeypatch.setenv("TRIGGERGATE_PROVIDER", "gitea")
    monkeypatch.setenv("TRIGGERGATE_PROVIDER_TOKEN", "t")

    with pytest.raises(ProviderConfigError, match="API_URL"):
        ProviderConfig.from_env()


@pytest.mark.parametrize("value", ["fast", "0", "-1"])
def test_invalid_timeout_raises(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    """Timeouts must be positive numbers."""
    monkeypatch.setenv("TRIGGERGATE_PROVIDER_TOKEN", "t")
    monkeypatch.setenv("TRIGGERGATE_PROVIDER_TIMEOUT_S", value)

    with pytest.raises(ProviderConfigError, match="timeout"):
        ProviderConfig.from_env()
