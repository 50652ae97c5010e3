"""Filter configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Filter settings loaded from environment variables."""

    # Request parameters
    FILTER_PARAM_PREFIX: str = "filter"

    # Accepted layouts for the D (date) value type, tried in order
    FILTER_DATE_FORMATS: list[str] = ["%Y-%m-%d", "%Y-%m-%d %H:%M:%S"]

    # Raise instead of logging when a filter value is not valid percent-encoded UTF-8
    FILTER_STRICT_DECODING: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
