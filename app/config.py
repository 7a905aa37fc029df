"""
Application configuration loaded from environment variables.

Values come from the process environment or a local .env file and are
validated once at startup.
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./payments.db",
        description="SQLAlchemy connection URL for the payments store",
    )
    db_pool_size: int = Field(default=10, ge=1)
    db_max_overflow: int = Field(default=0, ge=0)
    db_pool_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds a request waits for a pooled connection before failing",
    )
    db_connect_timeout: float = Field(default=10.0, gt=0)

    # Credentials
    bcrypt_rounds: int = Field(default=10, ge=4, le=16)

    # Server
    frontend_url: str = "http://localhost:3000"
    debug: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Settings are loaded once and shared for the lifetime of the process."""
    return Settings()
