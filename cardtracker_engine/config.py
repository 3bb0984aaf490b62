"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "cardtracker-engine"
    log_level: str = "INFO"

    # Status classification windows (days before the due date)
    urgent_window_days: int = 3
    upcoming_window_days: int = 14

    # Display
    default_locale: str = "en-US"
    default_currency: str = "USD"
    utilization_decimals: int = 1
    activity_feed_limit: Optional[int] = None  # None: no limit

    @model_validator(mode="after")
    def check_windows(self) -> "Settings":
        if self.urgent_window_days < 0 or self.upcoming_window_days < 0:
            raise ValueError("status windows must not be negative")
        if self.urgent_window_days > self.upcoming_window_days:
            raise ValueError("urgent_window_days must not exceed upcoming_window_days")
        return self


settings = Settings()
