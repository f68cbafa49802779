"""
Configuration Module
====================

Process settings and the YAML backend configuration.

Two layers live here:

- ``Settings``: how the process itself runs (log level, where to find the
  YAML file). Loaded from ``BOOTSTRAP_*`` environment variables with
  pydantic-settings.
- ``Configuration``: the backend connection parameters read from
  ``config/config.yaml``. Environment variables never override these.
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from backend_bootstrap.config.loader import (
    Configuration,
    load_configuration,
    SUPPORTED_CONFIG_TYPES,
)


class Settings(BaseSettings):
    """
    Process settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="backend-bootstrap", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Configuration File ==========
    config_name: str = Field(
        default="config",
        description="Configuration file name without extension"
    )
    config_paths: List[Path] = Field(
        default=[Path("./config")],
        description="Directories searched for the configuration file, in order"
    )
    config_type: str = Field(default="yaml", description="Configuration file format")

    model_config = SettingsConfigDict(
        env_prefix="BOOTSTRAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @field_validator("config_type")
    @classmethod
    def validate_config_type(cls, v: str) -> str:
        if v.lower() not in SUPPORTED_CONFIG_TYPES:
            raise ValueError(f"config_type must be one of {SUPPORTED_CONFIG_TYPES}")
        return v.lower()


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


__all__ = [
    "Settings",
    "get_settings",
    "Configuration",
    "load_configuration",
    "SUPPORTED_CONFIG_TYPES",
]
