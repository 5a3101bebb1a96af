"""Typed smoke tests for the settings loader.

These tests verify three guarantees:
1) Importing the module-level `settings` yields a `Settings` instance.
2) Environment variables override defaults after clearing the loader cache.
3) `get_logger()` respects the configured LOG_LEVEL when constructing loggers.
"""

from __future__ import annotations

import logging
from typing import Any

import pytest
from pydantic import ValidationError

from ristream.core.settings import (
    MAX_REPLAY_DEPTH_LIMIT,
    Settings,
    get_logger,
    load_settings,
    settings,
)


def test_settings_instance_type() -> None:
    """`settings` should be an instance of the typed `Settings` model."""
    assert isinstance(settings, Settings)


def test_defaults(monkeypatch: Any) -> None:
    """Without overrides the filter defaults are conservative."""
    monkeypatch.delenv("RISTREAM_MAX_REPLAY_DEPTH", raising=False)
    monkeypatch.delenv("RISTREAM_CAPTURE_RECORDS", raising=False)
    load_settings.cache_clear()
    s = load_settings()
    assert s.max_replay_depth == 64
    assert s.capture_archive_records is False


def test_env_overrides_with_cache_clear(monkeypatch: Any) -> None:
    """Changing env vars should take effect after `load_settings.cache_clear()`."""
    monkeypatch.setenv("RISTREAM_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("RISTREAM_MAX_REPLAY_DEPTH", "8")
    monkeypatch.setenv("RISTREAM_CAPTURE_RECORDS", "1")

    load_settings.cache_clear()
    s = load_settings()

    assert s.environment == "test"
    assert s.log_level == "DEBUG"
    assert s.max_replay_depth == 8
    assert s.capture_archive_records is True


@pytest.mark.parametrize("depth", ["0", str(MAX_REPLAY_DEPTH_LIMIT + 1)])  # type: ignore[misc]
def test_replay_depth_must_be_in_range(monkeypatch: Any, depth: str) -> None:
    """Zero would disable replay; past the limit Python's recursion guard trips first."""
    monkeypatch.setenv("RISTREAM_MAX_REPLAY_DEPTH", depth)
    load_settings.cache_clear()
    with pytest.raises(ValidationError):
        load_settings()


def test_get_logger_respects_level(monkeypatch: Any) -> None:
    """`get_logger()` should apply the numeric level derived from `LOG_LEVEL`."""
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    load_settings.cache_clear()
    _ = load_settings()

    logger = get_logger("ristream.tests.settings")

    assert logger.level == logging.ERROR
    assert logger.handlers, "Expected at least one StreamHandler to be attached."
