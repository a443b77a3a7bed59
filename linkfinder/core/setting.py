"""
Configuration Settings

This module defines client configuration using Pydantic Settings.
All configuration is loaded from environment variables or .env file.

Design Decisions:
- Uses pydantic-settings for type-safe configuration
- Supports multiple environments (production, staging, dev)
- Defaults point at a link store running locally
- The controller receives these values as constructor defaults, so tests
  can override any of them per instance
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings"]


class EnvSettingsOptions(Enum):
    """Environment options for deployment."""
    production = "production"
    staging = "staging"
    development = "dev"


class Settings(BaseSettings):
    """
    Client settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Project Configuration
    ENV_SETTING: EnvSettingsOptions = Field(
        default=EnvSettingsOptions.development,
        description="Environment setting (production, staging, dev)"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level used by the command line driver"
    )

    # Link Store Configuration
    LINK_STORE_URL: str = Field(
        default="http://localhost:8080",
        description="Base URL of the link store HTTP API"
    )
    REQUEST_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Transport timeout applied to every link store request"
    )

    # Search Configuration
    SEARCH_DEBOUNCE_SECONDS: float = Field(
        default=0.3,
        description="Quiet interval after the last keystroke before a search is issued"
    )
    MIN_QUERY_LENGTH: int = Field(
        default=2,
        description="Shortest normalized input that triggers a search"
    )
    CANCEL_SUPERSEDED_REQUESTS: bool = Field(
        default=True,
        description="Cancel the task of a superseded request (stale responses are ignored either way)"
    )


settings = Settings()
