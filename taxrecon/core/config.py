from __future__ import annotations

import os
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "TaxRecon"
    ENV: str = "dev"
    DATABASE_URL: str | None = None
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_SSL_CERT_REQS: str | None = "required"
    REDIS_SSL_CA_CERTS: str | None = None

    S3_ENDPOINT: str | None = None
    S3_ACCESS_KEY: str | None = None
    S3_SECRET_KEY: str | None = None
    S3_BUCKET: str = "taxrecon-reports"
    S3_REGION: str = "us-east-1"  # AWS region for S3 bucket
    # Finance opens these links days after the run, so keep them valid for a week
    S3_PRESIGN_TTL: int = 7 * 24 * 3600
    REPORTS_S3_PREFIX: str = "sales-tax/in-sales-monthly"

    # Slack incoming webhook used for report completion messages
    SLACK_WEBHOOK_URL: str | None = None
    SLACK_CHANNEL: str = "payments"
    SLACK_TIMEOUT_SECONDS: int = 10

    # Master switch for the monthly beat entry
    INDIA_REPORT_ENABLED: bool = True

    INTERNAL_API_TOKEN: str = "change_me"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "plain"
    SENTRY_DSN: str | None = None

    @field_validator("REPORTS_S3_PREFIX", mode="before")
    @classmethod
    def strip_prefix_slashes(cls, v):
        """Keys are joined with '/', so surrounding slashes would double up."""
        if v is None:
            return v
        return str(v).strip("/")

    @model_validator(mode="after")
    def _validate_required_fields(self) -> BaseAppSettings:
        # Convert Heroku's postgres:// URL to postgresql://
        if self.DATABASE_URL and self.DATABASE_URL.startswith("postgres://"):
            self.DATABASE_URL = self.DATABASE_URL.replace("postgres://", "postgresql://", 1)

        required_in_prod = (
            "DATABASE_URL",
            "SLACK_WEBHOOK_URL",
            "INTERNAL_API_TOKEN",
        )
        if self.ENV.lower() == "prod":
            missing = [name for name in required_in_prod if not getattr(self, name)]
            if missing:
                raise ValueError(f"Missing required production settings: {', '.join(missing)}")
            if self.INTERNAL_API_TOKEN == "change_me":
                raise ValueError("Insecure default secrets in production: INTERNAL_API_TOKEN uses default placeholder")
        return self


class DevSettings(BaseAppSettings):
    ENV: str = "dev"
    DATABASE_URL: str = "sqlite:///./storage/dev.db"


class TestSettings(BaseAppSettings):
    ENV: str = "test"
    DATABASE_URL: str = "sqlite:///:memory:"
    INTERNAL_API_TOKEN: str = "test-internal-token"


class ProdSettings(BaseAppSettings):
    ENV: str = "prod"
    LOG_FORMAT: str = "json"


_ENV_TO_SETTINGS: dict[str, type[BaseAppSettings]] = {
    "dev": DevSettings,
    "development": DevSettings,
    "test": TestSettings,
    "testing": TestSettings,
    "prod": ProdSettings,
    "production": ProdSettings,
}


@lru_cache
def get_settings() -> BaseAppSettings:
    env_name = os.getenv("APP_ENV") or os.getenv("ENV") or "dev"
    env = env_name.lower()
    settings_cls = _ENV_TO_SETTINGS.get(env, DevSettings)
    return settings_cls()


settings = get_settings()
