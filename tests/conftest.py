"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import os

import pytest

_ENV_PREFIX = "TRIGGERGATE_"


@pytest.fixture(autouse=True)
def _isolate_triggergate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove ``TRIGGERGATE_*`` variables inherited from the developer shell."""
    for name in list(os.environ):
        if name.startswith(_ENV_PREFIX):
            monkeypatch.delenv(name)
