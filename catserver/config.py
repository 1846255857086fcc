"""Configuration loading for catserver.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server configuration
    server_host: str = Field(
        default="0.0.0.0",
        description="Host to listen on",
    )
    server_port: int = Field(
        default=5000,
        description="Port to listen on",
    )
    read_timeout_seconds: float = Field(
        default=5.0,
        description="Seconds to wait for a client to send its request",
    )
    max_payload_bytes: int = Field(
        default=1024 * 1024,
        description="Maximum size of a single request payload",
    )

    # Store configuration
    seed_categories: list[str] = Field(
        default=["Beverages", "Condiments", "Confections"],
        description="Names of the categories present at startup",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Run mode
    run_mode: Literal["server", "cli"] = Field(
        default="server",
        description="Run mode",
    )

    @field_validator("server_port")
    @classmethod
    def validate_server_port(cls, v: int) -> int:
        """Ensure server port is in valid range."""
        if v <= 0 or v > 65535:
            raise ValueError("server_port must be between 1 and 65535")
        return v

    @field_validator("read_timeout_seconds")
    @classmethod
    def validate_read_timeout(cls, v: float) -> float:
        """Ensure read timeout is positive."""
        if v <= 0:
            raise ValueError("read_timeout_seconds must be positive")
        return v

    @field_validator("max_payload_bytes")
    @classmethod
    def validate_max_payload(cls, v: int) -> int:
        """Ensure payload limit is positive."""
        if v <= 0:
            raise ValueError("max_payload_bytes must be positive")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
