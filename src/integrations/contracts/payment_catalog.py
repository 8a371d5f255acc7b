"""
Payment catalog contract: conversion and validation helpers shared by the
mock and Stripe clients and by the lifecycle coordinator.

Prices are stored as decimal currency amounts (e.g. 19.99 USD). The catalog
only accepts integer minor units (cents). Conversion rounds half up, so
0.005 becomes 1 cent; this is the amount customers are charged.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, List

from src.catalog.models import PRICE_MAX, PRICE_MIN

DEFAULT_CURRENCY = "usd"


def to_minor_units(price: Any) -> int:
    """
    Convert a decimal price to minor units.

    Goes through the decimal string so 19.99 maps to 1999 rather than
    suffering float artefacts. Raises ValueError for non-numeric input.
    """
    if isinstance(price, bool):
        raise ValueError("price must be a number")
    try:
        amount = Decimal(str(price))
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"price '{price}' is not a number") from e
    if not amount.is_finite():
        raise ValueError(f"price '{price}' is not a finite number")
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def validate_catalog_price(price: Any) -> List[str]:
    """
    Return a list of validation errors.
    Empty list means the price can be sent to the catalog.
    """
    errors: List[str] = []
    try:
        minor = to_minor_units(price)
    except ValueError as e:
        return [str(e)]
    if minor < PRICE_MIN * 100 or minor > PRICE_MAX * 100:
        errors.append(f"price must be between {PRICE_MIN} and {PRICE_MAX}")
    return errors
