"""
Error taxonomy for the products core.

Every failure the core raises on purpose derives from `CatalogError`, so the
API layer can map it to a status code in one place (see src/error_handler.py).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


class CatalogError(Exception):
    status_code: int = 500

    def __init__(self, message: str, *, product_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.product_id = product_id


class SyncError(CatalogError):
    """The payment catalog rejected or failed a create/update. Nothing was persisted."""

    status_code = 502


class ConsistencyError(CatalogError):
    """An update reached a product that never went through the create path."""

    status_code = 409


class AuthorizationError(CatalogError):
    status_code = 403


class NotFoundError(CatalogError):
    status_code = 404


@dataclass
class ProductValidationError(CatalogError):
    """Raised for product payload validation failures.

    Attributes:
        field_errors: mapping of field name -> human-readable error message.
        message: optional top-level message.
    """

    field_errors: Dict[str, str] = field(default_factory=dict)
    message: str = "Validation failed"
    status_code = 422

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message
