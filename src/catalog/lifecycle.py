"""
Product lifecycle coordinator.

Every product write runs the same fixed pipeline:

    attribute -> sync_external -> persist -> reindex_owner

`attribute` and `sync_external` take `(data, ctx)` and return a new dict (or
raise); nothing reaches the store unless both succeed. `reindex_owner` runs
after the product is committed and only on create. A failure there is logged
and the product stays created.

On a price change the update sync creates a new catalog price before pointing
the catalog product at it. If that second call fails the record keeps its old
`price_id` and the new price is left unused in the catalog.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from src.catalog.access import AllowFiltered, Deny, can_delete, can_read, can_update, require, writable_changes
from src.catalog.errors import AuthorizationError, ConsistencyError, NotFoundError, SyncError
from src.catalog.models import ApprovalStatus, Operation, Principal, WriteContext
from src.catalog.ownership import OwnershipIndex
from src.catalog.validation import validate_product_payload
from src.integrations.contracts.interfaces import PaymentCatalogClient, PaymentCatalogError
from src.integrations.contracts.payment_catalog import DEFAULT_CURRENCY, to_minor_units, validate_catalog_price

logger = logging.getLogger(__name__)


def attribute(data: Dict[str, Any], principal: Principal, existing: Optional[Any] = None) -> Dict[str, Any]:
    """
    Set the owner server-side. Any client-supplied `user_id` is ignored.

    On create the owner is the requesting principal; afterwards the stored
    owner is kept, so an admin editing someone else's product does not take
    it over.
    """
    owner = existing.user_id if existing is not None else principal.id
    return {**data, "user_id": str(owner)}


class ProductLifecycleCoordinator:
    def __init__(self, store, catalog_client: PaymentCatalogClient, currency: str = DEFAULT_CURRENCY) -> None:
        self.store = store
        self.catalog = catalog_client
        self.currency = currency
        self.ownership = OwnershipIndex(store)

    # ------------------------------------------------------------------ #
    # Stages
    # ------------------------------------------------------------------ #
    def attribute(self, data: Dict[str, Any], ctx: WriteContext) -> Dict[str, Any]:
        return attribute(data, ctx.principal, ctx.existing)

    async def sync_external(self, data: Dict[str, Any], ctx: WriteContext) -> Dict[str, Any]:
        if ctx.operation == Operation.CREATE:
            return await self._sync_create(data)
        if ctx.operation == Operation.UPDATE:
            return await self._sync_update(data, ctx)
        return data

    def persist(self, data: Dict[str, Any], ctx: WriteContext):
        if ctx.operation == Operation.CREATE:
            return self.store.create_product(data)
        return self.store.update_product(ctx.existing.id, data)

    def reindex_owner(self, product: Any, ctx: WriteContext) -> Optional[List[str]]:
        if ctx.operation != Operation.CREATE:
            return None
        try:
            return self.ownership.reindex(product.user_id, product.id)
        except Exception as e:
            # The product is already committed; it is not rolled back.
            logger.warning(
                "Product %s created but ownership index for user %s was not updated: %s",
                product.id,
                product.user_id,
                e,
            )
            return None

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #
    async def create_product(self, payload: Dict[str, Any], principal: Optional[Principal]):
        if principal is None:
            raise AuthorizationError("Authentication required")

        # Fields the principal may not write are dropped, not validated.
        data = validate_product_payload(writable_changes(payload, principal))
        data.setdefault("approved_for_sale", ApprovalStatus.PENDING.value)

        ctx = WriteContext(operation=Operation.CREATE, principal=principal)
        data = self.attribute(data, ctx)
        data = await self.sync_external(data, ctx)
        product = self.persist(data, ctx)
        logger.info("Product %s created by user %s (stripe_id=%s)", product.id, principal.id, product.stripe_id)

        self.reindex_owner(product, ctx)
        return product

    async def update_product(self, product_id: str, changes: Dict[str, Any], principal: Optional[Principal]):
        require(can_update(principal), product_id)
        existing = self._get_or_404(product_id)

        cleaned = validate_product_payload(writable_changes(changes, principal), partial=True)
        data = {**self._record_fields(existing), **cleaned}

        ctx = WriteContext(operation=Operation.UPDATE, principal=principal, existing=existing)
        data = self.attribute(data, ctx)
        data = await self.sync_external(data, ctx)
        product = self.persist(data, ctx)
        logger.info("Product %s updated by user %s", product.id, principal.id)
        return product

    def delete_product(self, product_id: str, principal: Optional[Principal]) -> None:
        require(can_delete(principal), product_id)
        self._get_or_404(product_id)
        self.store.delete_product(product_id)
        logger.info("Product %s deleted by user %s", product_id, principal.id)

    def get_product(self, product_id: str, principal: Optional[Principal]):
        require(can_read(principal), product_id)
        return self._get_or_404(product_id)

    def list_products(self, principal: Optional[Principal]) -> List[Any]:
        decision = can_read(principal)
        if isinstance(decision, Deny):
            raise AuthorizationError("Authentication required")
        if isinstance(decision, AllowFiltered):
            return self.store.list_products(ids=decision.id_in)
        return decision.apply(self.store.list_products())

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _get_or_404(self, product_id: str):
        product = self.store.get_product(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found", product_id=product_id)
        return product

    @staticmethod
    def _record_fields(product: Any) -> Dict[str, Any]:
        record = product.to_dict()
        for key in ("id", "created_at", "updated_at"):
            record.pop(key, None)
        return record

    def _minor_amount(self, price: Any) -> int:
        errors = validate_catalog_price(price)
        if errors:
            raise SyncError(f"Cannot sync price {price!r}: {'; '.join(errors)}")
        return to_minor_units(price)

    async def _sync_create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        unit_amount = self._minor_amount(data.get("price"))
        try:
            created = await self.catalog.create_product(data["name"], unit_amount, self.currency)
        except PaymentCatalogError as e:
            logger.error(f"Payment catalog create failed for '{data.get('name')}': {e}")
            raise SyncError(f"Payment catalog create failed: {e}") from e

        logger.info("Synced new product to catalog: %s / %s", created.external_product_id, created.external_price_id)
        return {**data, "stripe_id": created.external_product_id, "price_id": created.external_price_id}

    async def _sync_update(self, data: Dict[str, Any], ctx: WriteContext) -> Dict[str, Any]:
        stripe_id = data.get("stripe_id")
        price_id = data.get("price_id")
        product_id = ctx.existing.id
        if not stripe_id or not price_id:
            raise ConsistencyError(
                f"Product {product_id} has no payment catalog twin; it never went through create",
                product_id=product_id,
            )

        unit_amount = self._minor_amount(data.get("price"))
        try:
            # Catalog prices are immutable; a new amount needs a new price object.
            if unit_amount != to_minor_units(ctx.existing.price):
                price_id = await self.catalog.create_price(stripe_id, unit_amount, self.currency)
                logger.info("Created catalog price %s for %s at %s", price_id, stripe_id, unit_amount)
            updated = await self.catalog.update_product(stripe_id, data["name"], price_id)
        except PaymentCatalogError as e:
            logger.error(f"Payment catalog update failed for {stripe_id}: {e}")
            raise SyncError(f"Payment catalog update failed: {e}", product_id=product_id) from e

        return {**data, "stripe_id": updated.external_product_id, "price_id": updated.external_price_id}
