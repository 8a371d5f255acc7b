"""Pytest fixtures for the products core and API tests."""

import pytest

from src.catalog.lifecycle import ProductLifecycleCoordinator
from src.catalog.models import Principal
from src.database.postgres import PostgresDB
from src.integrations.clients.mocks.payment_catalog import MockPaymentCatalogClient


@pytest.fixture
def db():
    """In-memory PostgresDB stub for tests."""
    return PostgresDB()


@pytest.fixture
def catalog():
    return MockPaymentCatalogClient()


@pytest.fixture
def coordinator(db, catalog):
    return ProductLifecycleCoordinator(db, catalog)


@pytest.fixture
def seller(db):
    return db.create_user(email="seller@example.com")


@pytest.fixture
def admin(db):
    return db.create_user(email="admin@example.com", role="admin")


@pytest.fixture
def principal_for(db):
    """Build a fresh principal from the stored user, like the API does per request."""

    def _build(user):
        return Principal.from_user(db.get_user_by_id(user.id))

    return _build


@pytest.fixture
def product_payload():
    def _build(**overrides):
        payload = {
            "name": "Icon Pack",
            "description": "200 hand-drawn icons",
            "price": 9.99,
            "category": "icons",
            "product_file_id": "file-1",
            "image_ids": ["img-1", "img-2"],
        }
        payload.update(overrides)
        return payload

    return _build
