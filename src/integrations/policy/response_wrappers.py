from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from src.catalog.ownership import normalize_id


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class CatalogProductResponseModel(BaseModel):
    external_product_id: str = Field(min_length=1)
    external_price_id: str = Field(min_length=1)
    name: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class CatalogPriceResponseModel(BaseModel):
    external_price_id: str = Field(min_length=1)
    unit_amount: Optional[int] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


def as_payload(obj: Any) -> Dict[str, Any]:
    """Provider SDK objects are dict-like; plain dicts pass through."""
    if isinstance(obj, Mapping):
        return dict(obj)
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return dict(to_dict())
    raise IntegrationResponseError(f"Unexpected catalog response type {type(obj).__name__}")


def normalize_catalog_product_response(
    raw: Dict[str, Any],
    *,
    fallback_price_id: Optional[str] = None,
) -> CatalogProductResponseModel:
    product_id = _first_non_empty(raw, "id", "product_id")
    # default_price comes back as an id, or as an object when the call expanded it.
    price_ref = _first_non_empty(raw, "default_price", "price_id", default=fallback_price_id)
    try:
        price_id = normalize_id(price_ref)
    except ValueError as exc:
        raise IntegrationResponseError(f"Invalid default_price: {price_ref!r}", payload=raw) from exc

    return _build_model(
        CatalogProductResponseModel,
        {
            "external_product_id": str(product_id),
            "external_price_id": price_id,
            "name": raw.get("name"),
            "raw": raw,
        },
        raw,
    )


def normalize_catalog_price_response(raw: Dict[str, Any]) -> CatalogPriceResponseModel:
    return _build_model(
        CatalogPriceResponseModel,
        {
            "external_price_id": str(_first_non_empty(raw, "id", "price_id")),
            "unit_amount": raw.get("unit_amount"),
            "raw": raw,
        },
        raw,
    )


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
