from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.config import DEFAULT_BILLING_BASE_URL, BillingConfig, Settings

BILLING_VARS = [
    "BILLING_SERVICE_BASE_URL",
    "BILLING_SERVICE_JWT_TOKEN",
    "BILLING_SERVICE_CACHE_EXPIRATION_HOURS",
    "BILLING_SERVICE_TIMEOUT_SECONDS",
    "BILLING_SERVICE_OPEN_TIMEOUT_SECONDS",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in BILLING_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def load(tmp_path, **kwargs) -> BillingConfig:
    settings = Settings(_env_file=None, _secrets_dir=tmp_path, **kwargs)
    return BillingConfig.from_settings(settings)


def test_defaults(clean_env, tmp_path):
    config = load(tmp_path)
    assert config.base_url == DEFAULT_BILLING_BASE_URL
    assert config.jwt_token is None
    assert not config.has_credentials
    assert config.cache_ttl_seconds == 24 * 3600
    assert config.open_timeout == 5
    assert config.read_timeout == 10


def test_credential_store_used_when_env_missing(clean_env, tmp_path):
    (tmp_path / "BILLING_SERVICE_JWT_TOKEN").write_text("from-store\n")
    (tmp_path / "BILLING_SERVICE_BASE_URL").write_text("https://store.example/api")

    config = load(tmp_path)

    assert config.jwt_token == "from-store"
    assert config.base_url == "https://store.example/api"


def test_environment_beats_credential_store(clean_env, tmp_path):
    (tmp_path / "BILLING_SERVICE_JWT_TOKEN").write_text("from-store")
    clean_env.setenv("BILLING_SERVICE_JWT_TOKEN", "from-env")

    assert load(tmp_path).jwt_token == "from-env"


def test_explicit_argument_beats_environment(clean_env, tmp_path):
    clean_env.setenv("BILLING_SERVICE_JWT_TOKEN", "from-env")
    config = load(tmp_path, BILLING_SERVICE_JWT_TOKEN="explicit")
    assert config.jwt_token == "explicit"


def test_blank_token_counts_as_missing(clean_env, tmp_path):
    clean_env.setenv("BILLING_SERVICE_JWT_TOKEN", "   ")
    assert not load(tmp_path).has_credentials


def test_numeric_overrides_and_trailing_slash(clean_env, tmp_path):
    clean_env.setenv("BILLING_SERVICE_BASE_URL", "https://billing.example/api/v2/")
    clean_env.setenv("BILLING_SERVICE_CACHE_EXPIRATION_HOURS", "2")
    clean_env.setenv("BILLING_SERVICE_TIMEOUT_SECONDS", "3")
    clean_env.setenv("BILLING_SERVICE_OPEN_TIMEOUT_SECONDS", "1")

    config = load(tmp_path)

    assert config.base_url == "https://billing.example/api/v2"
    assert config.cache_ttl_seconds == 7200
    assert config.read_timeout == 3
    assert config.open_timeout == 1


def test_non_positive_timeout_rejected(clean_env, tmp_path):
    clean_env.setenv("BILLING_SERVICE_TIMEOUT_SECONDS", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None, _secrets_dir=tmp_path)


def test_config_is_frozen(clean_env, tmp_path):
    config = load(tmp_path)
    with pytest.raises(AttributeError):
        config.jwt_token = "changed"
