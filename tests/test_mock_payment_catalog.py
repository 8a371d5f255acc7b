"""Tests for the mock payment catalog client."""

import pytest

from src.integrations.clients.mocks.payment_catalog import MockPaymentCatalogClient
from src.integrations.contracts.interfaces import PaymentCatalogError


@pytest.mark.asyncio
async def test_ids_are_sequential_and_calls_recorded():
    client = MockPaymentCatalogClient()

    first = await client.create_product("A", 100, "usd")
    second = await client.create_product("B", 200, "usd")

    assert (first.external_product_id, first.external_price_id) == ("prod_1", "price_1")
    assert (second.external_product_id, second.external_price_id) == ("prod_2", "price_2")
    assert [op for op, _ in client.calls] == ["create_product", "create_product"]


@pytest.mark.asyncio
async def test_update_unknown_product_fails():
    client = MockPaymentCatalogClient()
    with pytest.raises(PaymentCatalogError) as excinfo:
        await client.update_product("prod_404", "A", "price_1")
    assert excinfo.value.provider_code == "resource_missing"


@pytest.mark.asyncio
async def test_configured_failures():
    client = MockPaymentCatalogClient(fail_operations={"create_product"})
    with pytest.raises(PaymentCatalogError):
        await client.create_product("A", 100, "usd")
    assert client.products == {}
