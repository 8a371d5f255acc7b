"""
SQLAlchemy models for users and products.
Used by postgres_real when USE_POSTGRES_PRODUCTS and DATABASE_URL are set.
"""
from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import uuid4
from sqlalchemy import JSON, DateTime, Float, String, Text, ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(16), default="user", nullable=False)
    # Ownership index: product ids only, never embedded rows.
    products: Mapped[list] = mapped_column(JSON, default=list, nullable=False)  # list[str]
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class Product(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)  # USD, 0..1000
    category: Mapped[str] = mapped_column(String(32), nullable=False)

    product_file_id: Mapped[str] = mapped_column(String(64), nullable=False)
    image_ids: Mapped[list] = mapped_column(JSON, default=list, nullable=False)  # list[str], 1..4

    approved_for_sale: Mapped[str] = mapped_column(String(16), default="pending", nullable=False)

    # Payment catalog twin; both null until the first successful sync
    stripe_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, unique=True)
    price_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}
