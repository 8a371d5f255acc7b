from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass
class CatalogProduct:
    external_product_id: str
    external_price_id: str
    timestamp: datetime = field(default_factory=datetime.utcnow)
    metadata: Dict[str, Any] = field(default_factory=dict)


class PaymentCatalogError(Exception):
    """Any failure talking to the payment catalog (network, provider, bad response)."""

    def __init__(self, message: str, *, provider_code: str = "") -> None:
        super().__init__(message)
        self.provider_code = provider_code


# ---------------------------------------------------------------------------
# Abstract provider interface
# ---------------------------------------------------------------------------

class PaymentCatalogClient(ABC):
    """Every payment catalog client (mock or real) must implement this interface."""

    @abstractmethod
    async def create_product(self, name: str, unit_amount_minor: int, currency: str) -> CatalogProduct:
        """Create a product with a default price. Returns both external ids."""

    @abstractmethod
    async def update_product(self, external_product_id: str, name: str, default_price_id: str) -> CatalogProduct:
        """Rename a product and point it at `default_price_id`."""

    @abstractmethod
    async def create_price(self, external_product_id: str, unit_amount_minor: int, currency: str) -> str:
        """Attach a new price to an existing product. Provider prices are immutable."""
