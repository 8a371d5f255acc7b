"""Tests for product payload validation."""

import pytest

from src.catalog.errors import ProductValidationError
from src.catalog.validation import validate_product_payload


def _valid(**overrides):
    payload = {
        "name": "  UI Kit  ",
        "price": "49",
        "category": "ui_kits",
        "product_file_id": {"id": "file-9"},
        "image_ids": [{"image": "img-1"}, {"image": {"id": "img-2"}}, "img-3"],
    }
    payload.update(overrides)
    return payload


def test_valid_payload_is_cleaned():
    cleaned = validate_product_payload(_valid(description="   "))
    assert cleaned["name"] == "UI Kit"
    assert cleaned["price"] == 49.0
    assert cleaned["product_file_id"] == "file-9"
    assert cleaned["image_ids"] == ["img-1", "img-2", "img-3"]
    assert cleaned["description"] is None


def test_missing_required_fields_are_reported_together():
    with pytest.raises(ProductValidationError) as excinfo:
        validate_product_payload({})
    assert set(excinfo.value.field_errors) == {"name", "price", "category", "product_file_id", "image_ids"}
    assert excinfo.value.status_code == 422


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"price": -1}, "price"),
        ({"price": 1000.5}, "price"),
        ({"price": "cheap"}, "price"),
        ({"price": True}, "price"),
        ({"category": "fonts"}, "category"),
        ({"image_ids": ["a", "b", "c", "d", "e"]}, "image_ids"),
        ({"image_ids": "img-1"}, "image_ids"),
        ({"approved_for_sale": "maybe"}, "approved_for_sale"),
        ({"name": "   "}, "name"),
    ],
)
def test_invalid_fields(overrides, field):
    with pytest.raises(ProductValidationError) as excinfo:
        validate_product_payload(_valid(**overrides))
    assert field in excinfo.value.field_errors


def test_partial_update_only_checks_present_fields():
    assert validate_product_payload({"name": "New name"}, partial=True) == {"name": "New name"}
    with pytest.raises(ProductValidationError):
        validate_product_payload({"price": 2000}, partial=True)


def test_price_bounds_are_inclusive():
    assert validate_product_payload(_valid(price=0))["price"] == 0.0
    assert validate_product_payload(_valid(price=1000))["price"] == 1000.0
