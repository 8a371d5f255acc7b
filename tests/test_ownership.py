"""Tests for the ownership index."""

from types import SimpleNamespace

import pytest

from src.catalog.ownership import OwnershipIndex, dedup, normalize_id, normalize_ids


def test_normalize_id_accepts_bare_and_embedded_forms():
    assert normalize_id("p1") == "p1"
    assert normalize_id(42) == "42"
    assert normalize_id({"id": "p2", "name": "Icons"}) == "p2"
    assert normalize_id(SimpleNamespace(id="p3")) == "p3"


@pytest.mark.parametrize("bad", [None, "", {"name": "no id"}, True, 1.5])
def test_normalize_id_rejects_values_without_an_id(bad):
    with pytest.raises(ValueError):
        normalize_id(bad)


def test_normalize_ids_treats_none_as_empty():
    assert normalize_ids(None) == []
    assert normalize_ids(["a", {"id": "b"}]) == ["a", "b"]


def test_dedup_keeps_first_occurrence_and_appends_new_id():
    assert dedup(["a", "b", "a", {"id": "c"}, "b"], "d") == ["a", "b", "c", "d"]


def test_dedup_does_not_duplicate_an_existing_id():
    assert dedup(["a", {"id": "b"}], "b") == ["a", "b"]
    assert dedup(None, "x") == ["x"]


@pytest.mark.parametrize(
    "existing,new_id",
    [
        ([], "x"),
        (["x"], "x"),
        (["a", "a", "b"], "c"),
        ([{"id": "a"}, "a", SimpleNamespace(id="b")], "a"),
    ],
)
def test_dedup_is_idempotent_and_bounded(existing, new_id):
    once = dedup(existing, new_id)
    assert dedup(once, new_id) == once
    assert len(once) <= len(set(normalize_ids(existing))) + 1
    assert once.count(new_id) == 1
    assert set(normalize_ids(existing)) <= set(once)


def test_reindex_appends_product_to_user(db, seller):
    index = OwnershipIndex(db)
    db.set_user_products(seller.id, ["old", {"id": "old"}])

    assert index.reindex(seller.id, "new") == ["old", "new"]
    assert db.get_user_by_id(seller.id).products == ["old", "new"]


def test_reindex_raises_for_missing_user(db):
    with pytest.raises(LookupError):
        OwnershipIndex(db).reindex("ghost", "p1")


def test_interleaved_reindex_drops_an_id_and_recompute_repairs_it(db, seller):
    """Two creations reading the same snapshot: last writer wins."""
    p1 = db.create_product({"user_id": seller.id, "name": "A", "price": 1, "category": "icons", "product_file_id": "f"})
    p2 = db.create_product({"user_id": seller.id, "name": "B", "price": 2, "category": "icons", "product_file_id": "f"})

    snapshot = list(db.get_user_by_id(seller.id).products)
    db.set_user_products(seller.id, dedup(snapshot, p1.id))
    db.set_user_products(seller.id, dedup(snapshot, p2.id))
    assert db.get_user_by_id(seller.id).products == [p2.id]

    repaired = OwnershipIndex(db).recompute(seller.id)
    assert sorted(repaired) == sorted([p1.id, p2.id])
    assert repaired[0] == p2.id


def test_recompute_drops_ids_the_user_does_not_own(db, seller, admin):
    theirs = db.create_product({"user_id": admin.id, "name": "X", "price": 1, "category": "icons", "product_file_id": "f"})
    mine = db.create_product({"user_id": seller.id, "name": "Y", "price": 1, "category": "icons", "product_file_id": "f"})
    db.set_user_products(seller.id, [theirs.id, mine.id])

    assert OwnershipIndex(db).recompute(seller.id) == [mine.id]
