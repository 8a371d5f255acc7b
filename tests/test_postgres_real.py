"""SQLAlchemy-backed store, exercised against a sqlite file."""

import pytest

from src.catalog.ownership import OwnershipIndex
from src.database.postgres_real import PostgresDB, _normalize_connection_string


@pytest.fixture
def real_db(tmp_path):
    db = PostgresDB(connection_string=f"sqlite:///{tmp_path / 'products.db'}")
    db.create_tables()
    return db


def _product(user_id, **overrides):
    data = {
        "user_id": user_id,
        "name": "Icon Pack",
        "price": 9.99,
        "category": "icons",
        "product_file_id": "file-1",
        "image_ids": ["img-1"],
        "stripe_id": "prod_1",
        "price_id": "price_1",
    }
    data.update(overrides)
    return data


def test_normalize_connection_string():
    assert _normalize_connection_string("psql 'postgresql://u@h/db'") == "postgresql://u@h/db"
    assert _normalize_connection_string('  "sqlite:///x.db" ') == "sqlite:///x.db"


def test_product_crud(real_db):
    user = real_db.create_user(email="s@example.com")
    product = real_db.create_product(_product(user.id, unknown_field="ignored"))

    assert product.approved_for_sale == "pending"
    assert real_db.get_product(product.id).image_ids == ["img-1"]

    updated = real_db.update_product(product.id, {"name": "Renamed", "id": "hijack"})
    assert updated.id == product.id
    assert updated.name == "Renamed"

    assert real_db.delete_product(product.id) is True
    assert real_db.get_product(product.id) is None
    assert real_db.delete_product(product.id) is False


def test_update_missing_product_raises(real_db):
    with pytest.raises(LookupError):
        real_db.update_product("missing", {"name": "x"})


def test_list_products_by_ids_and_owner(real_db):
    a = real_db.create_user(email="a@example.com")
    b = real_db.create_user(email="b@example.com")
    pa = real_db.create_product(_product(a.id, stripe_id="prod_a"))
    pb = real_db.create_product(_product(b.id, stripe_id="prod_b"))

    assert {p.id for p in real_db.list_products()} == {pa.id, pb.id}
    assert [p.id for p in real_db.list_products(ids=[pb.id])] == [pb.id]
    assert real_db.list_products(ids=[]) == []
    assert [p.id for p in real_db.list_products_by_owner(a.id)] == [pa.id]


def test_ownership_index_round_trip(real_db):
    user = real_db.create_user(email="s@example.com")
    product = real_db.create_product(_product(user.id))

    OwnershipIndex(real_db).reindex(user.id, product.id)
    OwnershipIndex(real_db).reindex(user.id, product.id)

    assert real_db.get_user_by_id(user.id).products == [product.id]


def test_set_products_for_missing_user(real_db):
    with pytest.raises(LookupError):
        real_db.set_user_products("missing", ["p1"])
