"""Application configuration using Pydantic Settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str

    # Auth
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    SESSION_TTL_MINUTES: int = 1440
    ADMIN_EMAIL: Optional[str] = None  # Bootstrap moderator, created at startup
    ADMIN_PASSWORD: Optional[str] = None

    # Object storage for uploaded evidence files
    STORAGE_ROOT: str = "./storage"
    STORAGE_BUCKET: str = "evidence-files"
    PUBLIC_BASE_URL: str = "/files"
    MAX_UPLOAD_BYTES: int = 20 * 1024 * 1024

    # Moderation
    STRICT_TRANSITIONS: bool = False  # Only allow pending -> verified/rejected
    SUBMISSION_COMPENSATE: bool = True  # Delete orphaned events on failed submissions

    # Site
    SITE_TITLE: str = "大埔宏福苑維修火災事件簿"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


# Global settings instance
settings = Settings()
