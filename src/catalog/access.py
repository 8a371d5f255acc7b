"""
Access policy for products.

Record level: one decision per (principal, operation), shared by read, update
and delete. Ordinary users get a filter over their own product ids instead of
a per-record callback, so the same decision can be applied to a whole batch.

Field level: a declarative table of fields that only admins may see or set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union

from src.catalog.errors import AuthorizationError, NotFoundError
from src.catalog.models import Operation, Principal, Role
from src.catalog.ownership import normalize_id, normalize_ids

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Deny:
    def permits(self, product_id: Any) -> bool:
        return False

    def apply(self, records: Iterable[Any]) -> List[Any]:
        return []


@dataclass(frozen=True)
class AllowAll:
    def permits(self, product_id: Any) -> bool:
        return True

    def apply(self, records: Iterable[Any]) -> List[Any]:
        return list(records)


@dataclass(frozen=True)
class AllowFiltered:
    id_in: FrozenSet[str]

    def permits(self, product_id: Any) -> bool:
        return normalize_id(product_id) in self.id_in

    def apply(self, records: Iterable[Any]) -> List[Any]:
        return [r for r in records if normalize_id(r) in self.id_in]


Decision = Union[Deny, AllowAll, AllowFiltered]


def evaluate(principal: Optional[Principal], operation: Operation) -> Decision:
    if principal is None:
        logger.debug("No principal for %s; denying", operation.value)
        return Deny()
    if principal.is_admin:
        return AllowAll()
    return AllowFiltered(id_in=frozenset(normalize_ids(principal.product_ids)))


def can_read(principal: Optional[Principal]) -> Decision:
    return evaluate(principal, Operation.READ)


def can_update(principal: Optional[Principal]) -> Decision:
    return evaluate(principal, Operation.UPDATE)


def can_delete(principal: Optional[Principal]) -> Decision:
    return evaluate(principal, Operation.DELETE)


def require(decision: Decision, product_id: str) -> None:
    """
    Raise unless `decision` covers `product_id`.

    A filtered decision that excludes the id answers "not found", the same as
    for a product that does not exist.
    """
    if isinstance(decision, Deny):
        raise AuthorizationError("Authentication required", product_id=product_id)
    if not decision.permits(product_id):
        raise NotFoundError(f"Product {product_id} not found", product_id=product_id)


# ---------------------------------------------------------------------------
# Field-level policy
# ---------------------------------------------------------------------------

FIELD_ACCESS: Dict[str, Role] = {
    "approved_for_sale": Role.ADMIN,
    "stripe_id": Role.ADMIN,
    "price_id": Role.ADMIN,
}

# Server-managed; no principal may write these directly.
READ_ONLY_FIELDS = frozenset({"id", "user_id", "created_at", "updated_at"})


def field_allowed(field_name: str, principal: Optional[Principal]) -> bool:
    required = FIELD_ACCESS.get(field_name)
    if required is None:
        return True
    return principal is not None and (principal.is_admin or principal.role == required)


def visible_fields(record: Dict[str, Any], principal: Optional[Principal]) -> Dict[str, Any]:
    return {k: v for k, v in record.items() if field_allowed(k, principal)}


def writable_changes(changes: Dict[str, Any], principal: Optional[Principal]) -> Dict[str, Any]:
    allowed: Dict[str, Any] = {}
    for key, value in changes.items():
        if key in READ_ONLY_FIELDS or not field_allowed(key, principal):
            logger.debug("Dropping non-writable field %r", key)
            continue
        allowed[key] = value
    return allowed
