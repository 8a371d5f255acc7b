"""
Ownership index.

Keeps, per user, the deduplicated list of product ids they created. The list
lives on the user record (`User.products`) so access filtering never has to
scan the products table.

Related entities may reach us either as bare ids or as expanded objects
(`{"id": ...}` dicts or ORM rows) depending on how they were loaded. Everything
is normalized to bare string ids before any dedup or filtering happens.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

logger = logging.getLogger(__name__)


def normalize_id(value: Any) -> str:
    if isinstance(value, str):
        if not value:
            raise ValueError("Empty id")
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, dict):
        if value.get("id") is None:
            raise ValueError(f"Related object has no id: {value!r}")
        return normalize_id(value["id"])
    related_id = getattr(value, "id", None)
    if related_id is None:
        raise ValueError(f"Cannot normalize {type(value).__name__} to an id")
    return normalize_id(related_id)


def normalize_ids(values: Optional[Iterable[Any]]) -> List[str]:
    return [normalize_id(v) for v in (values or [])]


def dedup(existing_ids: Optional[Iterable[Any]], new_id: Any) -> List[str]:
    """
    Collapse duplicates (first occurrence wins, order kept) and append
    `new_id` unless it is already present.
    """
    seen = set()
    result: List[str] = []
    for pid in normalize_ids(existing_ids) + [normalize_id(new_id)]:
        if pid in seen:
            continue
        seen.add(pid)
        result.append(pid)
    return result


class OwnershipIndex:
    def __init__(self, store) -> None:
        self.store = store

    def reindex(self, user_id: str, product_id: str) -> List[str]:
        """
        Read-modify-write of the user's product list.

        Not atomic: two concurrent creations by the same user both read the
        same snapshot and the later write wins, dropping the other id.
        `recompute` repairs such a list from the products table.
        """
        user = self.store.get_user_by_id(user_id)
        if user is None:
            raise LookupError(f"User {user_id} not found")

        updated = dedup(user.products, product_id)
        self.store.set_user_products(user_id, updated)
        logger.info("Ownership index for user %s now holds %d product(s)", user_id, len(updated))
        return updated

    def recompute(self, user_id: str) -> List[str]:
        user = self.store.get_user_by_id(user_id)
        if user is None:
            raise LookupError(f"User {user_id} not found")

        owned = {normalize_id(p) for p in self.store.list_products_by_owner(user_id)}
        indexed = normalize_ids(user.products)

        # Keep the existing order for ids that are still owned, then append the missing ones.
        repaired: List[str] = []
        for pid in indexed + sorted(owned):
            if pid in owned and pid not in repaired:
                repaired.append(pid)

        if repaired != indexed:
            logger.warning("Ownership index for user %s was out of date; repaired", user_id)
            self.store.set_user_products(user_id, repaired)
        return repaired
