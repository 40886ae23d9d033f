# python
# app/core/config.py
"""Configuration settings for the Team Task Manager API.

Uses Pydantic BaseSettings for environment variable management.
"""
import secrets
from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


class NotificationBackendEnum(str, Enum):
    inline = "inline"
    celery = "celery"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="Team Task Manager API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Security Settings =====
    secret_key: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        description="Secret key for JWT encoding",
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7, description="JWT token expiration time"
    )

    # ===== Database Settings =====
    database_url: str | None = Field(default=None, description="Database connection URL")
    db_pool_size: int = Field(default=20, description="Database connection pool size")
    db_max_overflow: int = Field(default=0, description="Database max overflow connections")

    # Test database URL
    test_database_url: str | None = Field(default=None, description="Test database URL")

    # ===== File Storage Settings (Cloudflare R2 / S3 compatible) =====
    r2_endpoint: str | None = Field(default=None, description="R2/S3 endpoint URL")
    r2_access_key_id: str | None = Field(default=None, description="R2 access key")
    r2_secret_access_key: str | None = Field(default=None, description="R2 secret key")
    r2_bucket_name: str | None = Field(default=None, description="R2 bucket name")
    r2_public_url: str | None = Field(default=None, description="Public base URL for objects")
    attachment_prefix: str = Field(default="attachments", description="Object key prefix")
    max_attachment_size: int = Field(
        default=10 * 1024 * 1024, description="Maximum attachment size in bytes (10MB)"
    )
    presigned_url_ttl: int = Field(default=3600, description="Presigned URL lifetime in seconds")

    # ===== Email Configuration =====
    smtp_host: str | None = Field(default="smtp-relay.brevo.com", description="SMTP host")
    smtp_port: int = Field(default=587, description="SMTP port")
    smtp_user: str | None = Field(default=None, description="SMTP username")
    smtp_password: str | None = Field(default=None, description="SMTP password")
    email_from: str | None = Field(default=None, description="Email from address")
    email_from_name: str = Field(default="Team Task Manager", description="Email sender name")

    # ===== Notifications =====
    notification_backend: NotificationBackendEnum = Field(
        default=NotificationBackendEnum.inline,
        description="Where assignment emails are delivered from",
    )
    notification_timeout_seconds: float = Field(
        default=8.0, description="Upper bound for a single notification delivery"
    )

    # ===== Background Tasks (Celery) =====
    celery_broker_url: str = Field(
        default="redis://localhost:6379/1", description="Celery broker URL"
    )
    celery_result_backend: str = Field(
        default="redis://localhost:6379/2", description="Celery result backend"
    )

    # ===== Application Limits =====
    activity_feed_limit: int = Field(default=50, description="Maximum activities per page")
    user_search_limit: int = Field(default=20, description="Maximum users per search")

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:3001",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        if isinstance(self.allowed_origins, str):
            return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]
        return self.allowed_origins if isinstance(self.allowed_origins, list) else []

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.simple, description="Log format")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def has_file_storage(self) -> bool:
        return bool(
            self.r2_endpoint
            and self.r2_access_key_id
            and self.r2_secret_access_key
            and self.r2_bucket_name
        )

    @property
    def has_email(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator("r2_endpoint", "r2_access_key_id", "r2_secret_access_key", "r2_bucket_name",
                     "r2_public_url", mode="before")
    @classmethod
    def strip_storage_values(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("max_attachment_size")
    @classmethod
    def validate_attachment_size(cls, v):
        if v > 100 * 1024 * 1024:
            raise ValueError("Maximum attachment size cannot exceed 100MB")
        return v

    @field_validator("activity_feed_limit")
    @classmethod
    def validate_feed_limit(cls, v):
        if v < 1 or v > 50:
            raise ValueError("Activity feed limit must be between 1 and 50")
        return v

    @model_validator(mode="after")
    def set_computed_fields(self):
        if not self.email_from and self.smtp_user:
            self.email_from = self.smtp_user
        return self


settings = Settings()


class ConfigValidator:
    @staticmethod
    def validate_required_settings():
        errors = []
        if not settings.database_url:
            errors.append("DATABASE_URL is required")
        if settings.is_production and not settings.has_file_storage:
            errors.append("R2 storage settings are required in production")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

    @staticmethod
    def get_feature_status() -> dict:
        return {
            "file_storage": settings.has_file_storage,
            "email_enabled": settings.has_email,
            "notification_backend": settings.notification_backend,
            "environment": settings.environment,
        }


def get_config_summary() -> dict:
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "features": ConfigValidator.get_feature_status(),
        "database_configured": bool(settings.database_url),
    }


__all__ = [
    "settings",
    "Settings",
    "ConfigValidator",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
    "NotificationBackendEnum",
]
