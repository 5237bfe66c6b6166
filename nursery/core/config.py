from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Database
    db_path: str = "/data/nursery.db"

    # Local wall-clock zone used for hour-of-day and quiet hours
    tz: str = "Europe/London"

    # Pattern learning
    analysis_window_days: int = 14
    minimum_sample_size: int = 5

    # Reminder refresh job
    refresh_interval_minutes: int = 15
    snooze_minutes: int = 15
    debug: bool = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
