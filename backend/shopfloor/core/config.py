from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SHOPFLOOR_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Shopfloor Scheduler"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    DATABASE_URL: str = "sqlite:///./shopfloor.db"

    # Default daily working window, used until an operator saves a preference
    WINDOW_START: str = "06:30"
    DAILY_DURATION_HOURS: float = 12.0
    WINDOW_PREFERENCES_PATH: str = "./window_preferences.json"
    # zone for stored timestamps and window preferences written without an offset
    TIMEZONE: str = "UTC"

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["console", "json"] = "console"
    LOG_SQL: bool = False

    @field_validator("DAILY_DURATION_HOURS")
    @classmethod
    def _positive_window(cls, v: float) -> float:
        if v <= 0 or v > 24:
            raise ValueError("DAILY_DURATION_HOURS must be in (0, 24]")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
