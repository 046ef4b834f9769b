"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "TaskFlow API"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Database
    DATABASE_URL: Optional[str] = None
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_DBNAME: str = "taskflow"

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    BCRYPT_ROUNDS: int = 10
    PASSWORD_MIN_LENGTH: int = 6

    # Single-use tokens
    VERIFICATION_TOKEN_TTL_HOURS: int = 24
    RESET_TOKEN_TTL_HOURS: int = 1

    # Email
    FRONTEND_URL: str = "http://localhost:3000"
    FROM_EMAIL: str = "onboarding@taskflow.local"
    SMTP_HOST: str = ""
    SMTP_PORT: int = 465
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_SSL: bool = True

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Explicit DATABASE_URL if set, otherwise the PostgreSQL URL built from its parts."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}"
                f":{self.DATABASE_PORT}"
                f"/{self.DATABASE_DBNAME}")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
