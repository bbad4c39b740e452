# bookme/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import API_TITLE, API_VERSION

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "bookme-dev-secret-key-not-for-production"

_PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = _PROJECT_ROOT / ".env"
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: Literal["development", "test", "production"] = "development"

    # Database
    database_url: str = Field(
        default=f"sqlite:///{_PROJECT_ROOT / 'bookme.db'}",
        description="SQLAlchemy database URL (postgresql+psycopg2://... in production)",
    )
    sql_echo: bool = False
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 10
    db_pool_recycle: int = 1800

    # Auth: tokens are issued by the identity provider, verified here
    secret_key: SecretStr = Field(
        default=SecretStr(DEV_SECRET_KEY),
        description="Secret key used to verify JWT bearer tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours

    # Logging / monitoring
    log_level: str = "INFO"
    slow_operation_threshold_seconds: float = 1.0
    slow_request_threshold_ms: float = 500.0

    api_title: str = API_TITLE
    api_version: str = API_VERSION

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = (value or "INFO").strip().upper()
        if normalized not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return normalized

    @model_validator(mode="after")
    def _require_real_secret_in_production(self) -> "Settings":
        """Refuse to start production with the development signing secret."""
        if self.environment == "production":
            if self.secret_key.get_secret_value() == DEV_SECRET_KEY:
                raise ValueError("SECRET_KEY must be set in production environments.")
            if self.database_url.startswith("sqlite"):
                logger.warning("Production environment is running on SQLite")
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


settings = Settings()
