"""
Configuration Management for paycycle

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here. The engine itself needs very little:
the width of the default weekly window, how logs are rendered, and how
patiently the refresh flow retries the storage collaborator.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Weekly aggregation engine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PAYCYCLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    window_weeks: int = Field(
        default=6,
        ge=1,
        le=52,
        description="Number of Sunday-Saturday weeks in the default window"
    )
    include_current_week: bool = Field(
        default=True,
        description="Always materialize the week containing today, even if empty"
    )


class LoggingSettings(BaseSettings):
    """structlog rendering configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PAYCYCLE_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render JSON lines (False renders for the console)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept the standard level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.strip().upper()
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level


class StorageSettings(BaseSettings):
    """Retry policy for reads against the storage collaborator."""

    model_config = SettingsConfigDict(
        env_prefix="PAYCYCLE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per snapshot load before giving up"
    )
    retry_min_wait: float = Field(
        default=0.5,
        ge=0.0,
        description="Minimum backoff between attempts (seconds)"
    )
    retry_max_wait: float = Field(
        default=10.0,
        ge=0.0,
        description="Maximum backoff between attempts (seconds)"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def engine(self) -> EngineSettings:
        return EngineSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    "<name>_error" entry for each section that failed to load.
    """
    results: dict[str, bool] = {}
    settings = get_settings()

    for name in ("engine", "logging", "storage"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
