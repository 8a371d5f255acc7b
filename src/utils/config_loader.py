"""
Configuration loader for the marketplace products service
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "marketplace_config.yml"


class StripeConfig(BaseModel):
    """Payment catalog (Stripe) configuration"""

    secret_key: str = ""
    max_network_retries: int = Field(default=0, ge=0, le=5)
    currency: str = Field(default="usd", min_length=3, max_length=3)


class DatabaseConfig(BaseModel):
    """Record store configuration"""

    url: str = ""
    use_postgres: bool = False


class MarketplaceConfig(BaseModel):
    """Complete service configuration"""

    integrations_mode: str = Field(default="auto", pattern="^(auto|mock|real)$")
    stripe: StripeConfig = Field(default_factory=StripeConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    def use_real_catalog(self) -> bool:
        if self.integrations_mode == "real":
            return True
        if self.integrations_mode == "mock":
            return False
        return bool(self.stripe.secret_key)


def _env_overrides() -> Dict[str, Any]:
    """Environment variables win over the YAML file."""
    stripe: Dict[str, Any] = {}
    database: Dict[str, Any] = {}
    overrides: Dict[str, Any] = {}

    if os.getenv("STRIPE_SECRET_KEY"):
        stripe["secret_key"] = os.environ["STRIPE_SECRET_KEY"]
    if os.getenv("STRIPE_MAX_NETWORK_RETRIES"):
        stripe["max_network_retries"] = os.environ["STRIPE_MAX_NETWORK_RETRIES"]
    if os.getenv("CATALOG_CURRENCY"):
        stripe["currency"] = os.environ["CATALOG_CURRENCY"].strip().lower()
    if os.getenv("DATABASE_URL"):
        database["url"] = os.environ["DATABASE_URL"]
    if os.getenv("USE_POSTGRES_PRODUCTS"):
        database["use_postgres"] = os.environ["USE_POSTGRES_PRODUCTS"].lower() in ("1", "true", "yes")
    if os.getenv("INTEGRATIONS_MODE"):
        overrides["integrations_mode"] = os.environ["INTEGRATIONS_MODE"].strip().lower()

    if stripe:
        overrides["stripe"] = stripe
    if database:
        overrides["database"] = database
    return overrides


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_marketplace_config(config_path: Optional[Path] = None) -> MarketplaceConfig:
    """
    Load and validate service configuration.

    Args:
        config_path: Path to a YAML config file. Defaults to
            config/marketplace_config.yml; a missing default file is not an error.

    Returns:
        Validated MarketplaceConfig object

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    load_dotenv()

    config_data: Dict[str, Any] = {}
    path = config_path or DEFAULT_CONFIG_PATH
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    elif config_path is not None:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        config = MarketplaceConfig(**_merge(config_data, _env_overrides()))
        logger.info(f"Loaded marketplace config (integrations_mode={config.integrations_mode})")
        return config
    except ValidationError as e:
        logger.error(f"Config validation failed: {e}")
        raise
