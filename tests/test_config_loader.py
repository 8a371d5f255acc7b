"""Tests for the marketplace config loader."""

import pytest
from pydantic import ValidationError

from src.utils.config_loader import load_marketplace_config

_ENV_VARS = (
    "STRIPE_SECRET_KEY",
    "STRIPE_MAX_NETWORK_RETRIES",
    "CATALOG_CURRENCY",
    "DATABASE_URL",
    "USE_POSTGRES_PRODUCTS",
    "INTEGRATIONS_MODE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr("src.utils.config_loader.load_dotenv", lambda *a, **k: False)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_yaml_values_are_loaded(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("integrations_mode: mock\nstripe:\n  max_network_retries: 2\n  currency: eur\n")

    config = load_marketplace_config(path)

    assert config.integrations_mode == "mock"
    assert config.stripe.max_network_retries == 2
    assert config.stripe.currency == "eur"
    assert config.use_real_catalog() is False


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "config.yml"
    path.write_text("stripe:\n  currency: eur\ndatabase:\n  use_postgres: false\n")
    monkeypatch.setenv("CATALOG_CURRENCY", "USD")
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_1")
    monkeypatch.setenv("USE_POSTGRES_PRODUCTS", "true")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///x.db")

    config = load_marketplace_config(path)

    assert config.stripe.currency == "usd"
    assert config.database.use_postgres is True
    assert config.database.url == "sqlite:///x.db"
    # auto mode follows the presence of a secret key
    assert config.use_real_catalog() is True


def test_missing_explicit_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_marketplace_config(tmp_path / "nope.yml")


def test_invalid_values_are_rejected(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("integrations_mode: sometimes\n")
    with pytest.raises(ValidationError):
        load_marketplace_config(path)
