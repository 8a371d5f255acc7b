"""
Lightweight in-memory PostgresDB replacement for local development.

This provides the record store interface expected by the products core and
the API so the system can run without a real database. It is NOT intended
for production use.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
import uuid


@dataclass
class User:
    id: str
    email: str
    role: str = "user"
    products: List[Any] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Product:
    id: str
    user_id: str
    name: str
    price: float
    category: str
    product_file_id: str
    image_ids: List[str] = field(default_factory=list)
    description: Optional[str] = None
    approved_for_sale: str = "pending"
    stripe_id: Optional[str] = None
    price_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_PRODUCT_FIELDS = set(Product.__dataclass_fields__) - {"id", "created_at", "updated_at"}


class PostgresDB:
    """
    In-memory stand‑in for a Postgres-backed data access layer.

    Methods are intentionally simple and only support what the products core
    and API require.
    """

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}
        self._products: Dict[str, Product] = {}

    # ------------------------------------------------------------------ #
    # Schema / lifecycle
    # ------------------------------------------------------------------ #
    def create_tables(self) -> None:
        """
        No-op for the in-memory implementation. Kept for compatibility
        with the startup hook in `src/api/main.py`.
        """
        return None

    # ------------------------------------------------------------------ #
    # Users
    # ------------------------------------------------------------------ #
    def create_user(self, email: str, role: str = "user", user_id: Optional[str] = None) -> User:
        user = User(id=user_id or str(uuid.uuid4()), email=email, role=role)
        self._users[user.id] = user
        return user

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(str(user_id))

    def set_user_products(self, user_id: str, product_ids: List[str]) -> User:
        user = self._users.get(str(user_id))
        if user is None:
            raise LookupError(f"User {user_id} not found")
        user.products = list(product_ids)
        return user

    def delete_user(self, user_id: str) -> bool:
        return self._users.pop(str(user_id), None) is not None

    # ------------------------------------------------------------------ #
    # Products
    # ------------------------------------------------------------------ #
    def create_product(self, data: Dict[str, Any]) -> Product:
        values = {k: v for k, v in data.items() if k in _PRODUCT_FIELDS}
        product = Product(id=str(uuid.uuid4()), **values)
        self._products[product.id] = product
        return product

    def get_product(self, product_id: str) -> Optional[Product]:
        return self._products.get(str(product_id))

    def update_product(self, product_id: str, data: Dict[str, Any]) -> Product:
        product = self._products.get(str(product_id))
        if product is None:
            raise LookupError(f"Product {product_id} not found")
        for key, value in data.items():
            if key in _PRODUCT_FIELDS:
                setattr(product, key, value)
        product.updated_at = datetime.utcnow()
        return product

    def delete_product(self, product_id: str) -> bool:
        return self._products.pop(str(product_id), None) is not None

    def list_products(self, ids: Optional[Iterable[str]] = None) -> List[Product]:
        if ids is None:
            products = list(self._products.values())
        else:
            products = [self._products[i] for i in dict.fromkeys(ids) if i in self._products]
        products.sort(key=lambda p: p.created_at)
        return products

    def list_products_by_owner(self, user_id: str) -> List[Product]:
        return [p for p in self.list_products() if p.user_id == str(user_id)]
