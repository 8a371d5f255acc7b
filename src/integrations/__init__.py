"""
Integrations layer.
This package contains all code used to communicate with external systems such as:
- The payment provider's product/price catalog (Stripe)

Key rule:
- The lifecycle coordinator MUST NOT call Stripe directly.
- It calls a PaymentCatalogClient (under src/integrations/clients).
- We use MOCK clients during development and swap to real clients when credentials are available.

Switching implementations:
- The selection of mock vs real clients should happen in ONE place (src/api/main.py).
"""

from .contracts.interfaces import CatalogProduct, PaymentCatalogClient, PaymentCatalogError
from .contracts.payment_catalog import (
    DEFAULT_CURRENCY,
    to_minor_units,
    validate_catalog_price,
)

__all__ = [
    # interfaces
    "CatalogProduct", "PaymentCatalogClient", "PaymentCatalogError",
    # payment catalog
    "DEFAULT_CURRENCY", "to_minor_units", "validate_catalog_price",
]
