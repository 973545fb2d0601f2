"""
Application configuration and environment variables.

This module unifies configuration using pydantic-settings.
Variables can come from:
1. .env file
2. System environment variables (have priority)
3. Default values

Naming convention:
- In Python code: snake_case (storage_base_dir)
- In .env or ENV vars: UPPER_CASE (STORAGE_BASE_DIR)
- Pydantic automatically converts between both
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Unified storage configuration.

    All variables can be defined in:
    - .env file: VARIABLE_NAME=value
    - Environment variables: export VARIABLE_NAME=value

    Example:
        # In .env or as environment variable:
        STORAGE_PROVIDER=local
        STORAGE_BASE_DIR=/var/lib/acmestore
        LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allows using uppercase or lowercase
        extra="ignore",  # Ignores extra variables in .env
    )

    # ============================================================================
    # PROJECT SETTINGS
    # ============================================================================
    project_name: str = Field(default="acmestore", description="Project name")
    project_version: str = Field(default="1.0.0", description="Project version")

    # ============================================================================
    # LOGGING SETTINGS
    # ============================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | trace_id={extra[trace_id]} | {name}:{function}:{line} - {message}",  # noqa: E501
        description="Log format",
    )
    logger_enqueue: bool = Field(
        default=False, description="Enqueue logs using multiprocessing"
    )

    # ============================================================================
    # STORAGE SETTINGS
    # ============================================================================
    storage_provider: str = Field(
        default="local",
        description="Storage provider (local, memory)",
    )
    storage_base_dir: str = Field(
        default="~/.acmestore",
        description="Root directory of the local storage provider",
    )
    storage_public_file_mode: int = Field(
        default=0o644,
        description="File mode for public artefacts (certificates, distinguished names)",
    )
    storage_directory_mode: int = Field(
        default=0o700,
        description="File mode for directories created by the local provider",
    )
    storage_durable_writes: bool = Field(
        default=True,
        description="fsync staged files and their directory on every commit",
    )

    @field_validator("storage_public_file_mode")
    @classmethod
    def validate_public_file_mode(cls, value: int) -> int:
        """Reject modes that would let group or other write stored files."""
        if value & 0o022:
            raise ValueError(
                f"storage_public_file_mode {oct(value)} grants write access "
                "to group or other"
            )
        return value

    # ============================================================================
    # HELPER METHODS
    # ============================================================================

    def get_storage_base_dir(self) -> Path:
        """
        Get the local storage root with the user directory expanded.

        Returns:
            Path: Expanded storage root.
        """
        return Path(self.storage_base_dir).expanduser()


# ============================================================================
# SINGLETON PATTERN - Global settings instance
# ============================================================================


@lru_cache
def get_settings() -> Settings:
    """
    Get storage settings (LRU cached).

    This function is cached, so the .env file is only read once.
    To refresh the configuration, clear the cache:
        get_settings.cache_clear()

    Usage:
        from acmestore.config import get_settings
        settings = get_settings()
        print(settings.storage_base_dir)

    Returns:
        Settings: Configuration instance.
    """
    return Settings()


# Global instance for modules that do not receive settings explicitly
settings = get_settings()
