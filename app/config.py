from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AnyHttpUrl, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BILLING_BASE_URL = "https://interviews-accounts.elevateapp.com/api/v1"
CREDENTIALS_DIR = Path(os.getenv("CREDENTIALS_DIR", "/run/secrets"))


class Settings(BaseSettings):
    """Application settings loaded from environment variables with validation.

    Lookup order per field: constructor arguments, process environment,
    ``.env`` file, credential store (one file per secret under
    ``CREDENTIALS_DIR``), then the default declared here.
    """

    model_config = SettingsConfigDict(
        env_file=(str(Path(__file__).resolve().parents[1] / ".env"), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        secrets_dir=str(CREDENTIALS_DIR) if CREDENTIALS_DIR.is_dir() else None,
    )

    app_name: str = Field(default="Game Tracker Billing API", alias="APP_NAME")
    app_env: Literal["development", "staging", "production", "test"] = Field(
        default="production",
        alias="APP_ENV",
    )
    app_debug: bool = Field(default=False, alias="APP_DEBUG")
    api_v1_prefix: str = Field(default="/api/v1", alias="API_V1_PREFIX")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    secret_key: SecretStr = Field(
        default=SecretStr("change-me-in-production"),
        alias="SECRET_KEY",
    )
    admin_email: str = Field(default="admin@example.com", alias="ADMIN_EMAIL")
    admin_name: str = Field(default="Administrator", alias="ADMIN_NAME")

    billing_service_base_url: AnyHttpUrl = Field(
        default=DEFAULT_BILLING_BASE_URL,
        alias="BILLING_SERVICE_BASE_URL",
    )
    billing_service_jwt_token: SecretStr | None = Field(
        default=None,
        alias="BILLING_SERVICE_JWT_TOKEN",
    )
    billing_service_cache_expiration_hours: float = Field(
        default=24, ge=0, alias="BILLING_SERVICE_CACHE_EXPIRATION_HOURS"
    )
    billing_service_timeout_seconds: float = Field(
        default=10, gt=0, le=300, alias="BILLING_SERVICE_TIMEOUT_SECONDS"
    )
    billing_service_open_timeout_seconds: float = Field(
        default=5, gt=0, le=300, alias="BILLING_SERVICE_OPEN_TIMEOUT_SECONDS"
    )
    billing_cache_max_entries: int | None = Field(
        default=None, ge=1, alias="BILLING_CACHE_MAX_ENTRIES"
    )

    @field_validator("api_v1_prefix")
    @classmethod
    def validate_api_prefix(cls, value: str) -> str:
        """Ensure the API prefix starts with a slash and has no trailing slash."""
        normalized = value.strip()
        if not normalized.startswith("/"):
            raise ValueError("API_V1_PREFIX must start with '/'.")
        if len(normalized) > 1 and normalized.endswith("/"):
            normalized = normalized.rstrip("/")
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError("LOG_LEVEL must be a standard logging level name.")
        return normalized

    @field_validator("billing_service_jwt_token", mode="before")
    @classmethod
    def blank_token_is_missing(cls, value: object) -> object:
        """Treat an empty credential the same as an absent one."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


@dataclass(frozen=True)
class BillingConfig:
    """Billing provider settings, resolved once and passed by value."""

    base_url: str
    jwt_token: str | None
    cache_ttl_seconds: float
    open_timeout: float
    read_timeout: float
    cache_max_entries: int | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "BillingConfig":
        token = settings.billing_service_jwt_token
        return cls(
            base_url=str(settings.billing_service_base_url).rstrip("/"),
            jwt_token=token.get_secret_value() if token is not None else None,
            cache_ttl_seconds=settings.billing_service_cache_expiration_hours * 3600,
            open_timeout=settings.billing_service_open_timeout_seconds,
            read_timeout=settings.billing_service_timeout_seconds,
            cache_max_entries=settings.billing_cache_max_entries,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.jwt_token)


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()


settings: Settings = get_settings()
