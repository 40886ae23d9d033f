"""Unit tests for settings parsing and validation."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from app.core.config import ConfigValidator, EnvironmentEnum, Settings, get_config_summary


def make_settings(**overrides):
    return Settings(_env_file=None, **overrides)


def test_defaults():
    config = make_settings()

    assert config.algorithm == "HS256"
    assert config.max_attachment_size == 10 * 1024 * 1024
    assert config.activity_feed_limit == 50
    assert config.notification_backend == "inline"


@pytest.mark.parametrize("raw,expected", [("dev", EnvironmentEnum.development), ("PROD", EnvironmentEnum.production)])
def test_environment_aliases(raw, expected):
    assert make_settings(environment=raw).environment == expected


def test_allowed_origins_list():
    config = make_settings(allowed_origins=" http://a.test , ,http://b.test")

    assert config.allowed_origins_list == ["http://a.test", "http://b.test"]


def test_blank_storage_values_mean_unconfigured():
    config = make_settings(
        r2_endpoint="  ", r2_access_key_id="key", r2_secret_access_key="secret", r2_bucket_name="bucket"
    )

    assert config.r2_endpoint is None
    assert config.has_file_storage is False


def test_email_from_defaults_to_smtp_user():
    config = make_settings(smtp_user="mailer@example.com", smtp_password="pw")

    assert config.email_from == "mailer@example.com"
    assert config.has_email is True


@pytest.mark.parametrize("field,value", [("activity_feed_limit", 51), ("max_attachment_size", 200 * 1024 * 1024)])
def test_limits_validated(field, value):
    with pytest.raises(ValidationError):
        make_settings(**{field: value})


def test_feature_status_and_summary():
    status = ConfigValidator.get_feature_status()

    assert set(status) == {"file_storage", "email_enabled", "notification_backend", "environment"}
    assert get_config_summary()["features"] == status


def test_validate_required_settings_success():
    with patch("app.core.config.settings", make_settings(database_url="sqlite+aiosqlite:///./app.db")):
        ConfigValidator.validate_required_settings()


def test_validate_required_settings_production_needs_storage():
    production = make_settings(environment="production", database_url="postgresql+asyncpg://db/tasks")

    with patch("app.core.config.settings", production):
        with pytest.raises(ValueError, match="R2 storage settings are required in production"):
            ConfigValidator.validate_required_settings()
