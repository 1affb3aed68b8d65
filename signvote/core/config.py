from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    DATABASE_URL: str = "sqlite:///./signvote.db"
    AUTO_CREATE_TABLES: bool = True  # Provision the signatures table on startup

    # Security
    API_TOKEN: str = ""  # Shared bearer secret
    AUTH_REQUIRED: bool = True

    # Petition
    SIGNATURE_TARGET: int = Field(default=667, gt=0)

    # Application
    ENVIRONMENT: str = "development"
    ALLOWED_ORIGINS: list[str] = ["*"]
    API_TITLE: str = "SignVote API"
    API_DESCRIPTION: str = "Petition signature intake with per-device deduplication"
    API_VERSION_STRING: str = "2.0.0"

    # Features
    ENABLE_DOCS: bool = True
    ENABLE_REDOC: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"

    # Monitoring
    SENTRY_DSN: str = ""
    SENTRY_ENVIRONMENT: str = "development"
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
