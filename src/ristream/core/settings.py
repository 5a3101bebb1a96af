"""Centralized configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod

Filters read their defaults from here; explicit constructor arguments win.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Each nested replay costs a handful of interpreter frames; deeper limits would
# hit the recursion limit before the replay guard could report.
MAX_REPLAY_DEPTH_LIMIT = 64


class Settings(BaseSettings):
    """Typed configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `RISTREAM_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    max_replay_depth : int
        How many replays may be active at once inside one inline archive
        filter before further replays are refused; maps from
        `RISTREAM_MAX_REPLAY_DEPTH`. Bounded by `MAX_REPLAY_DEPTH_LIMIT`.
    capture_archive_records : bool
        Record `ArchiveRecord` calls into an active archive or object
        instead of dropping them; maps from `RISTREAM_CAPTURE_RECORDS`.
    """

    environment: EnvName = Field(default="dev", alias="RISTREAM_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    max_replay_depth: int = Field(
        default=64, ge=1, le=MAX_REPLAY_DEPTH_LIMIT, alias="RISTREAM_MAX_REPLAY_DEPTH"
    )
    capture_archive_records: bool = Field(default=False, alias="RISTREAM_CAPTURE_RECORDS")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests force a rebuild via `load_settings.cache_clear()` after mutating
    `os.environ`.
    """
    os.environ.setdefault("RISTREAM_ENV", "dev")
    return Settings()


settings: Settings = load_settings()


def get_logger(name: str = "ristream") -> logging.Logger:
    """Return a process-global logger configured to the current log level."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
