"""
Real Postgres-backed DB for production when USE_POSTGRES_PRODUCTS and DATABASE_URL are set.
Implements the same interface as src.database.postgres (in-memory stub).
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from src.database.models import Base, Product, User

_PRODUCT_FIELDS = {c.name for c in Product.__table__.columns} - {"id", "created_at", "updated_at"}


def _normalize_connection_string(s: str) -> str:
    """Strip common mistakes: 'psql \'...\'', extra quotes, whitespace."""
    s = s.strip()
    if re.match(r"^psql\s+", s, re.IGNORECASE):
        s = re.sub(r"^psql\s+", "", s, flags=re.IGNORECASE).strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        s = s[1:-1].strip()
    return s


class PostgresDB:
    """
    Postgres data access using SQLAlchemy. Use when DATABASE_URL is set and
    USE_POSTGRES_PRODUCTS=true.
    """

    def __init__(self, connection_string: str) -> None:
        connection_string = _normalize_connection_string(connection_string)
        engine_kwargs: Dict[str, Any] = {"pool_pre_ping": True}
        if not connection_string.startswith("sqlite"):
            engine_kwargs.update(pool_size=5, max_overflow=10)
        self.engine = create_engine(connection_string, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def _session(self) -> Session:
        s = self.SessionLocal()
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()

    # ------------------------------------------------------------------ #
    # Users
    # ------------------------------------------------------------------ #
    def create_user(self, email: str, role: str = "user", user_id: Optional[str] = None) -> User:
        with self._session() as s:
            u = User(id=user_id or str(uuid4()), email=email, role=role, products=[])
            s.add(u)
            s.flush()
            s.refresh(u)
            return u

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        with self._session() as s:
            stmt = select(User).where(User.id == str(user_id))
            return s.execute(stmt).scalar_one_or_none()

    def set_user_products(self, user_id: str, product_ids: List[str]) -> User:
        # Last writer wins; no version check (see OwnershipIndex.reindex).
        with self._session() as s:
            stmt = select(User).where(User.id == str(user_id))
            u = s.execute(stmt).scalar_one_or_none()
            if not u:
                raise LookupError(f"User {user_id} not found")
            u.products = list(product_ids)
            s.add(u)
            s.flush()
            s.refresh(u)
            return u

    def delete_user(self, user_id: str) -> bool:
        with self._session() as s:
            u = s.execute(select(User).where(User.id == str(user_id))).scalar_one_or_none()
            if not u:
                return False
            s.delete(u)
            return True

    # ------------------------------------------------------------------ #
    # Products
    # ------------------------------------------------------------------ #
    def create_product(self, data: Dict[str, Any]) -> Product:
        with self._session() as s:
            p = Product(id=str(uuid4()), **{k: v for k, v in data.items() if k in _PRODUCT_FIELDS})
            s.add(p)
            s.flush()
            s.refresh(p)
            return p

    def get_product(self, product_id: str) -> Optional[Product]:
        with self._session() as s:
            stmt = select(Product).where(Product.id == str(product_id))
            return s.execute(stmt).scalar_one_or_none()

    def update_product(self, product_id: str, data: Dict[str, Any]) -> Product:
        with self._session() as s:
            stmt = select(Product).where(Product.id == str(product_id))
            p = s.execute(stmt).scalar_one_or_none()
            if not p:
                raise LookupError(f"Product {product_id} not found")
            for k, v in data.items():
                if k in _PRODUCT_FIELDS:
                    setattr(p, k, v)
            p.updated_at = datetime.utcnow()
            s.add(p)
            s.flush()
            s.refresh(p)
            return p

    def delete_product(self, product_id: str) -> bool:
        with self._session() as s:
            stmt = select(Product).where(Product.id == str(product_id))
            p = s.execute(stmt).scalar_one_or_none()
            if not p:
                return False
            s.delete(p)
            return True

    def list_products(self, ids: Optional[Iterable[str]] = None) -> List[Product]:
        with self._session() as s:
            stmt = select(Product)
            if ids is not None:
                stmt = stmt.where(Product.id.in_([str(i) for i in ids]))
            stmt = stmt.order_by(Product.created_at.asc())
            return list(s.execute(stmt).scalars().all())

    def list_products_by_owner(self, user_id: str) -> List[Product]:
        with self._session() as s:
            stmt = select(Product).where(Product.user_id == str(user_id)).order_by(Product.created_at.asc())
            return list(s.execute(stmt).scalars().all())
