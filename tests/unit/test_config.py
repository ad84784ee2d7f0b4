"""Unit tests for configuration management."""

import os
from collections.abc import Generator

import pytest
from pydantic import ValidationError

from billing.config import Settings, get_settings


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Clean BILLING_* environment variables before and after test."""
    original_env = dict(os.environ)
    for var in [k for k in os.environ if k.upper().startswith("BILLING_")]:
        del os.environ[var]
    yield
    os.environ.clear()
    os.environ.update(original_env)


def test_settings_defaults(clean_env: None) -> None:
    """Test that settings have correct default values."""
    settings = Settings(jwt_secret="s3cret")

    assert settings.database_url == "sqlite:///db.sqlite"
    assert settings.jwt_algorithm == "HS256"
    assert settings.token_ttl_hours == 24
    assert settings.log_level == "INFO"
    assert settings.service_name == "billing-saas-backend"


def test_settings_from_env_vars(clean_env: None) -> None:
    """Test that settings can be overridden via environment variables."""
    os.environ["BILLING_JWT_SECRET"] = "from-env"
    os.environ["BILLING_DATABASE_URL"] = "postgresql://billing@db/billing"
    os.environ["BILLING_PORT"] = "8080"
    os.environ["BILLING_LOG_LEVEL"] = "ERROR"

    settings = get_settings()

    assert settings.jwt_secret.get_secret_value() == "from-env"
    assert settings.database_url == "postgresql://billing@db/billing"
    assert settings.port == 8080
    assert settings.log_level == "ERROR"


def test_signing_secret_is_required(clean_env: None, tmp_path, monkeypatch) -> None:
    """The signing secret has no default and must be injected."""
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ValidationError):
        Settings()


def test_secret_is_not_shown_in_repr(clean_env: None) -> None:
    settings = Settings(jwt_secret="do-not-print")

    assert "do-not-print" not in repr(settings)
