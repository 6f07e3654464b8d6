"""Application settings, read from the environment and an optional .env file."""

from functools import lru_cache
from typing import Literal
from urllib.parse import urlparse

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

AppEnv = Literal["development", "testing", "production"]
SSLMode = Literal["disable", "prefer", "require", "verify-ca", "verify-full"]

PLACEHOLDER_SECRETS = frozenset({"change-me", "change-this-to-a-secure-random-string"})


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "CharterHub API"
    app_env: AppEnv = "development"
    debug: bool = False
    enable_openapi: bool = True
    log_user_emails: bool = False

    # Postgres in deployments; SQLite (aiosqlite) is accepted for tests
    database_url: str
    database_migrations_url: str | None = None
    database_pool_size: int = Field(default=5, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)
    database_statement_cache_size: int = 100
    database_ssl_mode: SSLMode = "prefer"

    # Session credentials
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "charterhub"
    jwt_audience: str = "charterhub-api"
    access_token_expire_minutes: int = Field(default=30, gt=0)
    refresh_token_expire_days: int = Field(default=7, gt=0)
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Invitations and the links mailed to customers
    invitation_expire_days: int = Field(default=7, gt=0)
    allowed_app_url_domains: list[str] = ["localhost", "127.0.0.1"]
    app_url: str = "http://localhost:3000"
    resend_api_key: str | None = None
    email_from: str = "noreply@example.com"
    email_send_timeout_seconds: int = 10

    cors_origins: list[str] = ["http://localhost:3000"]
    metrics_api_key: str | None = None

    # Redis is optional; the blacklist and rate limiter fall back without it
    redis_url: str | None = None
    redis_pool_size: int = 10

    login_rate_limit: str = "10/minute"
    register_rate_limit: str = "5/minute"
    invitation_validate_rate_limit: str = "30/minute"

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v in PLACEHOLDER_SECRETS:
            raise ValueError(
                "JWT_SECRET_KEY is a placeholder; generate one with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Credentials are allowed cross-origin, so every origin must be explicit."""
        if "*" in v:
            raise ValueError("CORS_ORIGINS may not contain '*'; list the frontend origins instead")
        return v

    @field_validator("app_url")
    @classmethod
    def validate_app_url(cls, v: str, info: ValidationInfo) -> str:
        """Invitation links embed APP_URL, so its host must be on the allow list."""
        allowed: list[str] = info.data.get("allowed_app_url_domains", [])
        hostname = urlparse(v).hostname or ""
        if hostname in allowed or any(hostname.endswith(f".{domain}") for domain in allowed):
            return v
        raise ValueError(f"APP_URL host '{hostname}' is not in ALLOWED_APP_URL_DOMAINS {allowed}")

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        return self.app_env == "testing"

    @property
    def uses_asyncpg(self) -> bool:
        return self.database_url.startswith("postgresql+asyncpg")

    @property
    def sync_database_url(self) -> str:
        """URL for synchronous drivers; Alembic runs on psycopg2."""
        if self.database_migrations_url:
            return self.database_migrations_url
        return self.database_url.replace("+asyncpg", "+psycopg2").replace("+aiosqlite", "")


@lru_cache
def get_settings() -> Settings:
    return Settings()
