"""Unit tests for femtologging integration helpers.

Run with:
    pytest tests/unit/test_logging.py
"""

from __future__ import annotations

import pytest

from triggergate.logging import (
    configure_logging,
    format_log_message,
    log_debug,
    log_error,
    log_info,
    log_warning,
    normalize_log_level,
)


class _FakeLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None, bool]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message, exc_info, stack_info))
        return message


@pytest.mark.parametrize(
    ("input_level", "expected_level", "expected_invalid"),
    [
        ("warning", "WARNING", False),
        (" debug ", "DEBUG", False),
        ("TRACE", "TRACE", False),
        (None, "INFO", True),
        ("", "INFO", True),
        ("verbose", "INFO", True),
    ],
)
def test_normalize_log_level(
    input_level: str | None, expected_level: str, *, expected_invalid: bool
) -> None:
    """Normalize log levels and flag invalid inputs."""
    level, invalid = normalize_log_level(input_level)

    assert level == expected_level, (
        f"Expected {input_level!r} to normalize to {expected_level}."
    )
    assert invalid is expected_invalid


def test_format_log_message_uses_percent_formatting() -> None:
    """Percent formatting produces the expected message."""
    message = format_log_message("repo=%s issue=%d", "octo/reef", 3)

    assert message == "repo=octo/reef issue=3"


@pytest.mark.parametrize(
    ("helper", "level"),
    [
        (log_debug, "DEBUG"),
        (log_info, "INFO"),
        (log_warning, "WARNING"),
        (log_error, "ERROR"),
    ],
)
def test_helpers_format_and_pass_level(helper: object, level: str) -> None:
    """Each helper formats its template and emits its own level."""
    logger = _FakeLogger()

    helper(logger, "sender=%s", "visitor")  # type: ignore[operator]

    assert logger.calls == [(level, "sender=visitor", None, False)]


def test_log_error_forwards_exc_info() -> None:
    """log_error forwards exc_info to the logger."""
    logger = _FakeLogger()
    exc = RuntimeError("provider down")

    log_error(logger, "failed: %s", "octo/reef", exc_info=exc)

    assert logger.calls == [("ERROR", "failed: octo/reef", exc, False)]


@pytest.mark.parametrize(
    ("input_level", "force", "expected_normalized", "expected_invalid"),
    [
        ("DEBUG", False, "DEBUG", False),
        ("nope", True, "INFO", True),
    ],
)
def test_configure_logging(
    monkeypatch: pytest.MonkeyPatch,
    input_level: str,
    expected_normalized: str,
    *,
    force: bool,
    expected_invalid: bool,
) -> None:
    """configure_logging normalizes the level and forwards ``force``."""
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr("triggergate.logging.basicConfig", fake_basic_config)

    normalized, invalid = configure_logging(input_level, force=force)

    assert normalized == expected_normalized
    assert invalid is expected_invalid
    assert captured == {"level": expected_normalized, "force": force}
