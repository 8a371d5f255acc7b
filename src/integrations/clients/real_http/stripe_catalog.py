"""
Stripe payment catalog client.

Used when STRIPE_SECRET_KEY is configured. The Stripe SDK is blocking, so each
call runs in a worker thread; from the coordinator's point of view it is one
awaited request/response. Retries are left to the SDK's
`max_network_retries` setting.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

import stripe

from src.integrations.contracts.interfaces import CatalogProduct, PaymentCatalogClient, PaymentCatalogError
from src.integrations.policy.response_wrappers import (
    IntegrationResponseError,
    as_payload,
    normalize_catalog_price_response,
    normalize_catalog_product_response,
)

logger = logging.getLogger(__name__)


class StripeCatalogClient(PaymentCatalogClient):
    def __init__(
        self,
        api_key: Optional[str] = None,
        max_network_retries: int = 0,
    ) -> None:
        self.api_key = api_key or os.getenv("STRIPE_SECRET_KEY", "")
        if not self.api_key:
            raise ValueError("STRIPE_SECRET_KEY is not configured.")
        stripe.api_key = self.api_key
        stripe.max_network_retries = max_network_retries

    async def create_product(self, name: str, unit_amount_minor: int, currency: str) -> CatalogProduct:
        logger.info("Creating Stripe product name=%s unit_amount=%s %s", name, unit_amount_minor, currency)
        try:
            created = await asyncio.to_thread(
                stripe.Product.create,
                name=name,
                default_price_data={
                    "currency": currency,
                    "unit_amount": unit_amount_minor,
                },
            )
            normalized = normalize_catalog_product_response(as_payload(created))
        except stripe.StripeError as e:
            logger.error(f"Stripe create_product error: {e}")
            raise PaymentCatalogError(str(e), provider_code=e.code or "") from e
        except IntegrationResponseError as e:
            logger.error(f"Unexpected Stripe create_product response: {e}")
            raise PaymentCatalogError(str(e)) from e

        logger.info("Stripe product created: %s (price %s)", normalized.external_product_id, normalized.external_price_id)
        return CatalogProduct(
            external_product_id=normalized.external_product_id,
            external_price_id=normalized.external_price_id,
        )

    async def update_product(self, external_product_id: str, name: str, default_price_id: str) -> CatalogProduct:
        logger.info("Updating Stripe product %s name=%s default_price=%s", external_product_id, name, default_price_id)
        try:
            updated = await asyncio.to_thread(
                stripe.Product.modify,
                external_product_id,
                name=name,
                default_price=default_price_id,
            )
            normalized = normalize_catalog_product_response(as_payload(updated), fallback_price_id=default_price_id)
        except stripe.StripeError as e:
            logger.error(f"Stripe update_product error: {e}")
            raise PaymentCatalogError(str(e), provider_code=e.code or "") from e
        except IntegrationResponseError as e:
            logger.error(f"Unexpected Stripe update_product response: {e}")
            raise PaymentCatalogError(str(e)) from e

        return CatalogProduct(
            external_product_id=normalized.external_product_id,
            external_price_id=normalized.external_price_id,
        )

    async def create_price(self, external_product_id: str, unit_amount_minor: int, currency: str) -> str:
        logger.info("Creating Stripe price for %s unit_amount=%s %s", external_product_id, unit_amount_minor, currency)
        try:
            price = await asyncio.to_thread(
                stripe.Price.create,
                product=external_product_id,
                unit_amount=unit_amount_minor,
                currency=currency,
            )
            normalized = normalize_catalog_price_response(as_payload(price))
        except stripe.StripeError as e:
            logger.error(f"Stripe create_price error: {e}")
            raise PaymentCatalogError(str(e), provider_code=e.code or "") from e
        except IntegrationResponseError as e:
            logger.error(f"Unexpected Stripe create_price response: {e}")
            raise PaymentCatalogError(str(e)) from e

        return normalized.external_price_id
