from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Stockwatch Inventory"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./stockwatch.db"
    DB_TIMEOUT_SECONDS: int = 5
    SEED_SAMPLE_DATA: bool = False

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Security
    # ==============================
    API_KEYS: Optional[str] = None
    API_KEY_HEADER: str = "X-API-Key"

    # ==============================
    # SMS Configuration
    # ==============================
    SMS_ENABLED: bool = False
    SMS_API_URL: Optional[str] = None
    SMS_ACCESS_TOKEN: Optional[str] = None
    NOTIFICATION_PHONE: str = "5551234567"

    # ==============================
    # Alerts
    # ==============================
    ALERT_ON_TRANSITION_ONLY: bool = True
    LOW_STOCK_CHECK_ON_STARTUP: bool = True

    # ==============================
    # Scheduler
    # ==============================
    SCHEDULER_ENABLED: bool = False
    LOW_STOCK_DIGEST_TIME: str = "08:00"
    SCHEDULER_POLL_SECONDS: int = 30
    SCHEDULER_TZ: str = "local"


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
