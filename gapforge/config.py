"""
Configuration settings for the gapforge engine.

Uses Pydantic Settings for environment variable management with .env file support.
Variables are prefixed with GAPFORGE_ (e.g. GAPFORGE_HISTORY_SIZE=20).
"""
from __future__ import annotations

import sys
from functools import lru_cache
from typing import Literal

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseSettings):
    """Engine tuning loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GAPFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Parsing
    # ========================================
    language: Literal["javascript"] = Field(
        default="javascript",
        description="Grammar used to parse source snippets",
    )
    keyword_window: int = Field(
        default=10,
        ge=1,
        description="Characters scanned at the start of a statement to locate its keyword",
    )

    # ========================================
    # Selection
    # ========================================
    history_size: int = Field(
        default=10,
        ge=1,
        description="Remembered gap combinations / type fingerprints per source",
    )
    retry_budget: int = Field(
        default=10,
        ge=1,
        description="Selection attempts before history is reset",
    )
    max_gaps_per_line: int = Field(default=2, ge=1)
    min_gap_spacing: int = Field(
        default=2,
        ge=1,
        description="Minimum characters between two gaps on the same line",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(default="WARNING")


@lru_cache
def get_config() -> EngineConfig:
    """Get cached engine configuration."""
    return EngineConfig()


def configure_logging(level: str | None = None) -> None:
    """Install the stderr log sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or get_config().log_level).upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
