"""
Domain types shared by the products core.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from src.catalog.ownership import normalize_ids


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class Operation(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


# value -> label, as shown in the storefront navigation
PRODUCT_CATEGORIES: Dict[str, str] = {
    "ui_kits": "UI Kits",
    "icons": "Icons",
}

PRICE_MIN = 0
PRICE_MAX = 1000
MAX_IMAGES = 4


@dataclass(frozen=True)
class Principal:
    """The authenticated identity making a request."""

    id: str
    role: Role = Role.USER
    product_ids: Tuple[str, ...] = ()

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user: Any) -> "Principal":
        # Any stored role other than admin is an ordinary user.
        role = Role.ADMIN if getattr(user, "role", None) == Role.ADMIN.value else Role.USER
        return cls(
            id=str(user.id),
            role=role,
            product_ids=tuple(normalize_ids(getattr(user, "products", None))),
        )


@dataclass
class WriteContext:
    """Per-request state threaded through the lifecycle stages."""

    operation: Operation
    principal: Principal
    existing: Optional[Any] = None
