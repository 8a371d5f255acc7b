"""
Payment catalog: MOCK client.

Mock implementation for development and testing. Does NOT make any network
calls. Ids are sequential (prod_1, price_1, ...) so tests can assert on them,
and every call is recorded in `calls`.

Swap:
Replace with the Stripe client in clients/real_http/stripe_catalog.py when
STRIPE_SECRET_KEY is configured (selection happens in src/api/main.py).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from src.integrations.contracts.interfaces import CatalogProduct, PaymentCatalogClient, PaymentCatalogError

logger = logging.getLogger(__name__)


@dataclass
class MockCatalogEntry:
    product_id: str
    name: str
    default_price_id: str


# ---------------------------------------------------------------------------
# Mock client
# ---------------------------------------------------------------------------

class MockPaymentCatalogClient(PaymentCatalogClient):
    """
    Mock payment catalog client.

    Parameters
    ----------
    fail_operations : set of str
        Operation names ("create_product", "update_product", "create_price")
        that raise PaymentCatalogError instead of succeeding.
    """

    def __init__(self, fail_operations: Optional[set] = None):
        self.fail_operations = set(fail_operations or ())

        # In-memory stores (reset on restart)
        self.products: Dict[str, MockCatalogEntry] = {}
        self.prices: Dict[str, Tuple[str, int, str]] = {}
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

        self._product_seq = 0
        self._price_seq = 0

        logger.info("[CATALOG MOCK] Client initialised")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _record(self, operation: str, **kwargs: Any) -> None:
        self.calls.append((operation, kwargs))
        if operation in self.fail_operations:
            logger.info("[CATALOG MOCK] Simulating provider failure for %s", operation)
            raise PaymentCatalogError(f"[CATALOG MOCK] {operation} failed", provider_code="mock_failure")

    def _new_price(self, product_id: str, unit_amount_minor: int, currency: str) -> str:
        if unit_amount_minor < 0:
            raise PaymentCatalogError("unit_amount must be >= 0", provider_code="parameter_invalid_integer")
        self._price_seq += 1
        price_id = f"price_{self._price_seq}"
        self.prices[price_id] = (product_id, unit_amount_minor, currency)
        return price_id

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    async def create_product(self, name: str, unit_amount_minor: int, currency: str) -> CatalogProduct:
        self._record("create_product", name=name, unit_amount_minor=unit_amount_minor, currency=currency)

        self._product_seq += 1
        product_id = f"prod_{self._product_seq}"
        price_id = self._new_price(product_id, unit_amount_minor, currency)
        self.products[product_id] = MockCatalogEntry(product_id=product_id, name=name, default_price_id=price_id)

        logger.info("[CATALOG MOCK] Created %s (%s) at %s %s", product_id, name, unit_amount_minor, currency)
        return CatalogProduct(external_product_id=product_id, external_price_id=price_id)

    async def update_product(self, external_product_id: str, name: str, default_price_id: str) -> CatalogProduct:
        self._record(
            "update_product",
            external_product_id=external_product_id,
            name=name,
            default_price_id=default_price_id,
        )

        entry = self.products.get(external_product_id)
        if entry is None:
            raise PaymentCatalogError(f"No such product: '{external_product_id}'", provider_code="resource_missing")
        if default_price_id not in self.prices:
            raise PaymentCatalogError(f"No such price: '{default_price_id}'", provider_code="resource_missing")

        entry.name = name
        entry.default_price_id = default_price_id
        logger.info("[CATALOG MOCK] Updated %s → name=%s price=%s", external_product_id, name, default_price_id)
        return CatalogProduct(external_product_id=entry.product_id, external_price_id=entry.default_price_id)

    async def create_price(self, external_product_id: str, unit_amount_minor: int, currency: str) -> str:
        self._record(
            "create_price",
            external_product_id=external_product_id,
            unit_amount_minor=unit_amount_minor,
            currency=currency,
        )
        if external_product_id not in self.products:
            raise PaymentCatalogError(f"No such product: '{external_product_id}'", provider_code="resource_missing")
        return self._new_price(external_product_id, unit_amount_minor, currency)
