from __future__ import annotations
"""server/smartrent/core/config.py
~~~~~~~~~~~~~~~~~~~~~~~~
Paramètres (pydantic-settings).
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql+psycopg://postgres:postgres@db:5432/smartrent"
    DB_CONNECT_TIMEOUT: int = 5
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    CORS_ALLOW_ORIGINS: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    # Alertes
    ALERT_OVERDUE_DAYS: int = 7
    ALERT_TREND_MONTHS: int = 12
    ALERT_PAGE_SIZE_DEFAULT: int = 10
    ALERT_PAGE_SIZE_MAX: int = 50

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

settings = Settings()
