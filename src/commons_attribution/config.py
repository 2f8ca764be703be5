# ABOUTME: Application configuration using Pydantic Settings for environment variables
# ABOUTME: Provides type-safe access to the wiki endpoint, HTTP, retry and logging settings

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="COMMONS_ATTRIBUTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
    )

    # Wiki Configuration
    default_wiki_url: str = Field(
        default="//commons.wikimedia.org/",
        description="Protocol-relative root of the wiki used when a lookup names no other wiki",
    )
    user_agent: str = Field(
        default="commons-attribution/0.1 (https://github.com/commons-attribution/commons-attribution)",
        description="User-Agent header sent to the MediaWiki API",
    )
    request_timeout: float = Field(default=15.0, description="Timeout in seconds for a single API request")

    # Caller-side Retry Configuration
    lookup_attempts: int = Field(default=3, ge=1, description="Attempts the CLI makes for a transient lookup failure")
    retry_min_wait: float = Field(default=0.5, description="Minimum backoff between lookup attempts in seconds")
    retry_max_wait: float = Field(default=8.0, description="Maximum backoff between lookup attempts in seconds")

    # Logging Configuration
    log_mode: Literal["interactive", "production"] = Field(default="interactive", description="Logging output mode")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging verbosity level"
    )

    log_file: Path | None = Field(default=None, description="Custom log file path (overrides default)")


# Global config instance - lazy loaded when first accessed
_config_instance: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Creates the config on first access, subsequent calls return the same instance.

    Returns:
        Config: The application configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Reload configuration from environment variables.

    Useful for testing or when environment variables change at runtime.

    Returns:
        Config: A fresh configuration instance
    """
    global _config_instance
    _config_instance = Config()
    return _config_instance
