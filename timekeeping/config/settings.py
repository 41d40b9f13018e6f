"""
Configuration management for the timekeeping system.
"""

from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TimekeepingConfig(BaseSettings):
    """Configuration settings for the timekeeping system."""

    # Record store
    store_backend: Literal["json", "memory"] = Field(
        default="json", alias="STORE_BACKEND"
    )
    store_file_path: str = Field(
        default="data/timekeeping.json", alias="STORE_FILE_PATH"
    )

    # Identity: authenticated user the CLI acts for when none is passed
    default_user_id: Optional[str] = Field(default=None, alias="TIMEKEEPING_USER_ID")

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="WARNING", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    @field_validator("store_file_path")
    @classmethod
    def validate_store_file_path(cls, v):
        """Ensure the store path points at a JSON document."""
        if not v.strip():
            raise ValueError("Store file path cannot be empty")
        if not v.endswith(".json"):
            raise ValueError("Store file path must end with .json")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()


def load_config(env_file: Optional[str] = None) -> TimekeepingConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return TimekeepingConfig()


# Global configuration instance
_config: Optional[TimekeepingConfig] = None


def get_config() -> TimekeepingConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> TimekeepingConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
