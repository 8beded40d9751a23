from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """TrainerDesk configuration, read from the environment and ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "TrainerDesk API"
    APP_VERSION: str = "0.3.1"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # SQLite for local runs; hosted Postgres URLs are rewritten for asyncpg
    DATABASE_URL: str = "sqlite+aiosqlite:///./trainerdesk.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 5

    # Token revocation and rate limit counters
    REDIS_URL: str = "redis://localhost:6379/0"

    JWT_SECRET_KEY: str = "change-me-access"
    JWT_REFRESH_SECRET_KEY: str = "change-me-refresh"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30

    # Comma separated in the environment
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ["http://localhost:3000", "http://localhost:5173"]

    RATE_LIMIT_ENABLED: bool = True
    PLAN_COMMITS_PER_HOUR: int = Field(60, ge=1)

    # Replace-all plan commits
    DEFAULT_WEEKLY_SESSIONS: int = Field(3, ge=1, le=7)
    PLAN_COMMIT_MAX_ATTEMPTS: int = Field(3, ge=1)
    PLAN_COMMIT_RETRY_BACKOFF_SECONDS: float = Field(0.2, ge=0)

    DEFAULT_TRAINER_NAME: str = "Personal Trainer"
    SEED_EXERCISES_ON_STARTUP: bool = True

    # GlitchTip (Sentry protocol); empty DSN disables reporting
    GLITCHTIP_DSN: str = ""
    GLITCHTIP_TRACES_SAMPLE_RATE: float = 0.2
    GLITCHTIP_PROFILES_SAMPLE_RATE: float = 0.1

    @field_validator("DATABASE_URL")
    @classmethod
    def use_async_driver(cls, url: str) -> str:
        for prefix in ("postgresql://", "postgres://"):
            if url.startswith(prefix):
                return "postgresql+asyncpg://" + url[len(prefix):]
        return url

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
