"""
Import settings for openlib-spine.

All fields can be set via ``OPENLIB_SPINE_*`` environment variables (e.g.
``OPENLIB_SPINE_BATCH_SIZE=500``) or a ``.env`` file. CLI options override
whatever the environment resolved.

Tags:
    settings, configuration, pydantic, environment, openlib-spine
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from openlib_spine.core.errors import ConfigError


class ErrorPolicy(str, Enum):
    """What to do with a line that fails parsing or normalizing."""

    STRICT = "strict"  # abort the run
    SKIP = "skip"      # record a reject and continue


class ImportSettings(BaseSettings):
    """Configuration for an author import run."""

    model_config = SettingsConfigDict(
        env_prefix="OPENLIB_SPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    database: Path = Field(
        default_factory=lambda: Path.home() / ".openlib-spine" / "authors.db",
        description="SQLite file backing the record store",
    )

    # ── Submission ───────────────────────────────────────────────
    batch_size: int = Field(default=1000, ge=1)
    max_parallel: int = Field(default=4, ge=1)
    fail_fast: bool = True

    # ── Input ────────────────────────────────────────────────────
    encoding: str = "utf-8"
    error_policy: ErrorPolicy = ErrorPolicy.STRICT
    max_rejects: int = Field(
        default=1000,
        ge=0,
        description="Rejects kept in memory under the skip policy; the rest are only counted",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


def load_settings(**overrides: Any) -> ImportSettings:
    """Resolve settings from the environment, then apply non-None overrides."""
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return ImportSettings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}", cause=e) from e


__all__ = ["ErrorPolicy", "ImportSettings", "load_settings"]
