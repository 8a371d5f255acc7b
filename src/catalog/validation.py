"""Backend validation for product create/update payloads.

Payloads arrive as dictionaries. These validators ensure the fields the
product lifecycle depends on are present and well-formed, and return a cleaned
copy with related entities (file, images) reduced to bare ids.

On validation failure, raise `ProductValidationError` so the API can return
HTTP 422 with structured `field_errors`.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional

from src.catalog.errors import ProductValidationError
from src.catalog.models import MAX_IMAGES, PRICE_MAX, PRICE_MIN, PRODUCT_CATEGORIES, ApprovalStatus
from src.catalog.ownership import normalize_id


def _strip(v: Any) -> str:
    return "" if v is None else str(v).strip()


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def require_str(payload: Dict[str, Any], field: str, errors: Dict[str, str], *, label: Optional[str] = None) -> str:
    value = _strip(payload.get(field))
    if not value:
        add_error(errors, field, f"{label or field} is required")
    return value


def parse_price(payload: Dict[str, Any], field: str, errors: Dict[str, str]) -> float:
    raw = payload.get(field)
    if raw is None or _strip(raw) == "":
        add_error(errors, field, f"{field} is required")
        return 0.0
    if isinstance(raw, bool):
        add_error(errors, field, f"{field} must be a number")
        return 0.0
    try:
        val = float(raw)
    except (TypeError, ValueError):
        add_error(errors, field, f"{field} must be a number")
        return 0.0
    if math.isnan(val) or val < PRICE_MIN or val > PRICE_MAX:
        add_error(errors, field, f"{field} must be between {PRICE_MIN} and {PRICE_MAX}")
    return val


def validate_in(value: Any, allowed: Iterable[str], errors: Dict[str, str], field: str) -> str:
    raw = _strip(value)
    if not raw:
        add_error(errors, field, f"{field} is required")
        return raw
    if raw not in set(allowed):
        add_error(errors, field, f"{field} has an invalid value")
    return raw


def parse_related_id(value: Any, errors: Dict[str, str], field: str) -> str:
    if value is None or value == "":
        add_error(errors, field, f"{field} is required")
        return ""
    try:
        return normalize_id(value)
    except ValueError:
        add_error(errors, field, f"{field} must reference an uploaded file")
        return ""


def parse_image_ids(value: Any, errors: Dict[str, str], field: str = "image_ids") -> List[str]:
    """Accepts bare ids, `{"id": ...}` objects or `{"image": ...}` rows."""
    if not isinstance(value, list):
        add_error(errors, field, f"{field} must be a list")
        return []
    ids: List[str] = []
    for item in value:
        if isinstance(item, dict) and "image" in item:
            item = item["image"]
        try:
            ids.append(normalize_id(item))
        except ValueError:
            add_error(errors, field, f"{field} contains an invalid image reference")
            return []
    if not 1 <= len(ids) <= MAX_IMAGES:
        add_error(errors, field, f"{field} must contain between 1 and {MAX_IMAGES} images")
    return ids


def validate_product_payload(payload: Dict[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    """
    Validate a product payload and return the cleaned fields.

    With `partial=True` (updates) only the fields present are checked.
    Unknown keys pass through untouched. Callers drop fields the principal
    may not write before validating.
    """
    errors: Dict[str, str] = {}
    cleaned: Dict[str, Any] = dict(payload)

    def present(field: str) -> bool:
        return not partial or field in payload

    if present("name"):
        cleaned["name"] = require_str(payload, "name", errors, label="Name")
    if "description" in payload:
        cleaned["description"] = _strip(payload.get("description")) or None
    if present("price"):
        cleaned["price"] = parse_price(payload, "price", errors)
    if present("category"):
        cleaned["category"] = validate_in(payload.get("category"), PRODUCT_CATEGORIES, errors, "category")
    if present("product_file_id"):
        cleaned["product_file_id"] = parse_related_id(payload.get("product_file_id"), errors, "product_file_id")
    if present("image_ids"):
        cleaned["image_ids"] = parse_image_ids(payload.get("image_ids"), errors)
    if "approved_for_sale" in payload:
        cleaned["approved_for_sale"] = validate_in(
            payload.get("approved_for_sale"), [s.value for s in ApprovalStatus], errors, "approved_for_sale"
        )

    raise_if_errors(errors)
    return cleaned


def raise_if_errors(errors: Dict[str, str], message: str = "Please correct the highlighted fields") -> None:
    if errors:
        raise ProductValidationError(field_errors=errors, message=message)
