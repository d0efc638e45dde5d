from __future__ import annotations

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: AnyUrl
    SUPABASE_SERVICE_ROLE_KEY: str
    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
    )

    FEED_PAGE_SIZE: int = Field(default=20, ge=1)
    FEED_MAX_PAGE_SIZE: int = Field(default=100, ge=1)
    COMMENT_MAX_LENGTH: int = Field(default=2000, ge=1)
    LIKE_ANIMATION_MS: int = Field(default=300, ge=0)
    USERNAME_MAX_ATTEMPTS: int = Field(default=1000, ge=1)


settings = Settings()
