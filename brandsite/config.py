from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./brandsite.db"
    CREATE_TABLES: bool = True

    # API
    API_TITLE: str = "Brandsite API"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Retry policy for database calls
    RETRY_MAX_RETRIES: int = 3
    RETRY_BASE_DELAY_MS: int = 500
    RETRY_JITTER: float = 0.1

    # Contact details used by service call-to-action links
    CONTACT_WHATSAPP: Optional[str] = None
    CONTACT_EMAIL: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    """Settings loaded from the environment, built once per process."""
    return Settings()
