"""Tests for the Stripe payment catalog client with the SDK calls stubbed."""

import pytest
import stripe

from src.integrations.clients.real_http.stripe_catalog import StripeCatalogClient
from src.integrations.contracts.interfaces import PaymentCatalogError


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(stripe, "api_key", None)
    monkeypatch.setattr(stripe, "max_network_retries", 0)
    return StripeCatalogClient(api_key="sk_test_123", max_network_retries=2)


def test_requires_a_secret_key(monkeypatch):
    monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
    with pytest.raises(ValueError):
        StripeCatalogClient(api_key="")


def test_configures_sdk(client):
    assert stripe.api_key == "sk_test_123"
    assert stripe.max_network_retries == 2


@pytest.mark.asyncio
async def test_create_product_sends_default_price_data(client, monkeypatch):
    captured = {}

    def fake_create(**kwargs):
        captured.update(kwargs)
        return {"id": "prod_abc", "name": kwargs["name"], "default_price": "price_abc"}

    monkeypatch.setattr(stripe.Product, "create", fake_create)

    out = await client.create_product("Icon Pack", 999, "usd")

    assert captured == {"name": "Icon Pack", "default_price_data": {"currency": "usd", "unit_amount": 999}}
    assert (out.external_product_id, out.external_price_id) == ("prod_abc", "price_abc")


@pytest.mark.asyncio
async def test_update_product_modifies_name_and_default_price(client, monkeypatch):
    captured = {}

    def fake_modify(product_id, **kwargs):
        captured["id"] = product_id
        captured.update(kwargs)
        return {"id": product_id, "name": kwargs["name"], "default_price": {"id": kwargs["default_price"]}}

    monkeypatch.setattr(stripe.Product, "modify", fake_modify)

    out = await client.update_product("prod_abc", "Renamed", "price_abc")

    assert captured == {"id": "prod_abc", "name": "Renamed", "default_price": "price_abc"}
    assert out.external_price_id == "price_abc"


@pytest.mark.asyncio
async def test_create_price(client, monkeypatch):
    monkeypatch.setattr(
        stripe.Price,
        "create",
        lambda **kwargs: {"id": "price_new", "unit_amount": kwargs["unit_amount"], "product": kwargs["product"]},
    )
    assert await client.create_price("prod_abc", 1450, "usd") == "price_new"


@pytest.mark.asyncio
async def test_stripe_errors_become_catalog_errors(client, monkeypatch):
    def fake_modify(product_id, **kwargs):
        raise stripe.InvalidRequestError("No such product: 'prod_x'", "id", code="resource_missing")

    monkeypatch.setattr(stripe.Product, "modify", fake_modify)

    with pytest.raises(PaymentCatalogError) as excinfo:
        await client.update_product("prod_x", "Name", "price_1")
    assert excinfo.value.provider_code == "resource_missing"


@pytest.mark.asyncio
async def test_malformed_response_becomes_catalog_error(client, monkeypatch):
    monkeypatch.setattr(stripe.Product, "create", lambda **kwargs: {"id": "prod_abc"})

    with pytest.raises(PaymentCatalogError):
        await client.create_product("Icon Pack", 999, "usd")
