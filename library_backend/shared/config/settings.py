# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

TOKEN_TTL_SECONDS = 60 * 60
PASSWORD_HASH_METHOD = "scrypt:32768:8:1"

_WEAK_SECRETS = ("dev", "development", "test", "secret", "supersecretjwtkey", "")

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    validate_by_name=True,
    extra="ignore",
)


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class AuthConfig(BaseSettings):
    jwt_secret: SecretStr | None = Field(None, alias="JWT_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    hash_workers: int = Field(4, ge=1, alias="HASH_WORKERS")
    default_username: str = Field("admin", min_length=1, alias="DEFAULT_ACCOUNT_USERNAME")
    default_password: SecretStr = Field(
        SecretStr("admin123"), alias="DEFAULT_ACCOUNT_PASSWORD"
    )

    model_config = _SECTION_CONFIG

    @property
    def token_ttl_seconds(self) -> int:
        return TOKEN_TTL_SECONDS

    @property
    def password_hash_method(self) -> str:
        return PASSWORD_HASH_METHOD


class SecurityConfig(BaseSettings):
    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, ge=0.1, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SECTION_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class MailConfig(BaseSettings):
    smtp_host: str | None = Field(None, alias="SMTP_HOST")
    smtp_port: int = Field(587, ge=1, le=65535, alias="SMTP_PORT")
    smtp_username: str | None = Field(None, alias="SMTP_USERNAME")
    smtp_password: SecretStr | None = Field(None, alias="SMTP_PASSWORD")
    smtp_use_tls: bool = Field(True, alias="SMTP_USE_TLS")
    smtp_timeout: float = Field(10.0, ge=0.1, alias="SMTP_TIMEOUT")
    mail_from: str = Field("library@localhost", alias="MAIL_FROM")
    max_retries: int = Field(2, ge=0, alias="SMTP_RETRIES")
    backoff_base: float = Field(0.5, ge=0.0, alias="SMTP_BACKOFF_BASE")
    backoff_cap: float = Field(8.0, ge=0.0, alias="SMTP_BACKOFF_CAP")

    model_config = _SECTION_CONFIG

    @field_validator("smtp_use_tls", mode="before")
    @classmethod
    def _parse_tls(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @property
    def enabled(self) -> bool:
        return bool(self.smtp_host)


class ObservabilityConfig(BaseSettings):
    metrics_enabled: bool = Field(True, alias="METRICS_ENABLED")

    model_config = _SECTION_CONFIG

    @field_validator("metrics_enabled", mode="before")
    @classmethod
    def _parse_metrics(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _auth_config_factory() -> AuthConfig:
    return AuthConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _mail_config_factory() -> MailConfig:
    return MailConfig()  # type: ignore[call-arg]


def _observability_config_factory() -> ObservabilityConfig:
    return ObservabilityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    auth: AuthConfig = Field(default_factory=_auth_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    mail: MailConfig = Field(default_factory=_mail_config_factory)
    observability: ObservabilityConfig = Field(default_factory=_observability_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        secret = self.auth.jwt_secret.get_secret_value() if self.auth.jwt_secret else ""
        if secret.lower() in _WEAK_SECRETS or len(secret) < 32:
            print(
                "\n❌ CRITICAL SECURITY ERROR: Missing or weak JWT_SECRET in production!\n"
                "   JWT_SECRET must be a random value of at least 32 characters.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")
        if self.auth.default_password.get_secret_value() == "admin123":
            warnings.append("⚠️  Default account still uses the demo password")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def jwt_secret_value(self) -> str | None:
        if self.auth.jwt_secret is None:
            return None
        return self.auth.jwt_secret.get_secret_value() or None

    def redacted(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude={"auth": {"jwt_secret", "default_password"}})


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = [
    "AppConfig",
    "AuthConfig",
    "MailConfig",
    "ObservabilityConfig",
    "SecurityConfig",
    "load_config",
]
