"""Configuration management for EVA."""

from __future__ import annotations

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError
from .logging_utils import LogProfile, configure_logging


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="EVA_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Assistant Configuration
    default_role: str = Field(default="borrower", description="Role assumed when the caller supplies none")
    tool_delay_seconds: float = Field(default=2.0, ge=0, description="Simulated processing delay per tool run")
    max_detected_tools: int = Field(default=3, ge=1, description="Upper bound on tools picked for one message")
    min_token_length: int = Field(default=3, ge=1, description="Shortest token used for keyword matching")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_profile: LogProfile = Field(default="default", description="Log output profile: default, chat or json")


def get_settings(**overrides: object) -> Settings:
    """Get application settings.

    Args:
        **overrides: Explicit values that take precedence over the environment

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If the environment or overrides fail validation
    """
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid EVA settings: {exc}") from exc

    configure_logging(profile=settings.log_profile, level=settings.log_level)

    return settings
