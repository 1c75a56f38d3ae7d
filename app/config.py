"""Application configuration."""
import logging
from datetime import timedelta
from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

DEFAULT_ACCESS_TOKEN_MINUTES = 15
DEFAULT_REFRESH_TOKEN_DAYS = 7


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    db_user: str = "postgres"
    db_password: str = ""
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "crm"
    db_ssl_mode: str = "disable"
    db_max_connections: int = 10
    # Full SQLAlchemy URL; overrides the DB_* parts when set
    database_url: Optional[str] = None

    # Server
    server_port: int = 8080
    request_timeout_seconds: float = 60.0
    shutdown_timeout_seconds: int = 30

    # JWT
    jwt_secret: str = "dev_jwt_secret_change_in_production"
    jwt_access_token_expiry_minutes: int = DEFAULT_ACCESS_TOKEN_MINUTES
    jwt_refresh_token_expiry_days: int = DEFAULT_REFRESH_TOKEN_DAYS

    # Role name cache for the auth dependency; 0 disables it
    role_cache_ttl_seconds: float = 0.0

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    @field_validator("db_max_connections")
    @classmethod
    def validate_max_connections(cls, v: int) -> int:
        if v < 1:
            raise ValueError("DB_MAX_CONNECTIONS must be at least 1")
        return v

    @field_validator("jwt_access_token_expiry_minutes")
    @classmethod
    def default_access_expiry(cls, v: int) -> int:
        # Zero or negative falls back to the default lifetime
        return v if v > 0 else DEFAULT_ACCESS_TOKEN_MINUTES

    @field_validator("jwt_refresh_token_expiry_days")
    @classmethod
    def default_refresh_expiry(cls, v: int) -> int:
        return v if v > 0 else DEFAULT_REFRESH_TOKEN_DAYS

    @model_validator(mode='after')
    def process_database_url(self):
        """Build the async database URL from its parts unless given explicitly."""
        if self.database_url:
            # Strip whitespace/newlines some platforms append to env values
            self.database_url = self.database_url.strip()
            if self.database_url.startswith("postgresql://"):
                self.database_url = self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        else:
            self.database_url = (
                f"postgresql+asyncpg://{quote_plus(self.db_user)}:{quote_plus(self.db_password)}"
                f"@{self.db_host}:{self.db_port}/{self.db_name}"
            )
        return self

    @property
    def is_postgres(self) -> bool:
        return self.database_url.startswith("postgresql")

    @property
    def access_token_expires(self) -> timedelta:
        return timedelta(minutes=self.jwt_access_token_expiry_minutes)

    @property
    def refresh_token_expires(self) -> timedelta:
        return timedelta(days=self.jwt_refresh_token_expiry_days)

    class Config:
        env_file = ".env"
        extra = "ignore"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    logger = logging.getLogger(__name__)

    settings = Settings()

    # Hide credentials when logging the target
    db_url_masked = settings.database_url.split('@')[-1] if '@' in settings.database_url else settings.database_url[:30]
    logger.info(f"Settings loaded - database: ...@{db_url_masked}, environment: {settings.environment}")

    return settings
