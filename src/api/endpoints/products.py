from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from pydantic import BaseModel, Field

from src.catalog.access import visible_fields
from src.catalog.errors import CatalogError
from src.catalog.lifecycle import ProductLifecycleCoordinator
from src.catalog.models import Principal
from src.error_handler import ErrorHandler

api = APIRouter()
products_api = api

# Will be set by main.py after import
store = None
coordinator: ProductLifecycleCoordinator = None

error_handler = ErrorHandler()


class ProductCreateRequest(BaseModel):
    name: str
    description: Optional[str] = None
    price: float = Field(..., description="Price in USD, 0 to 1000")
    category: str
    product_file_id: Any = Field(..., description="Uploaded product file id (or object with an id)")
    image_ids: List[Any] = Field(default_factory=list, description="1 to 4 uploaded image ids")
    approved_for_sale: Optional[str] = Field(default=None, description="Admins only")
    user_id: Optional[str] = Field(default=None, description="Ignored; the owner is always the caller")


class ProductUpdateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    product_file_id: Optional[Any] = None
    image_ids: Optional[List[Any]] = None
    approved_for_sale: Optional[str] = None
    stripe_id: Optional[str] = None
    price_id: Optional[str] = None


def get_principal(x_user_id: Optional[str] = Header(default=None, alias="X-User-Id")) -> Optional[Principal]:
    """Resolve the caller from the X-User-Id header. Unknown or missing → anonymous."""
    if not x_user_id:
        return None
    user = store.get_user_by_id(x_user_id.strip())
    if user is None:
        return None
    return Principal.from_user(user)


def _raise_http(exc: Exception) -> None:
    payload = error_handler.handle_exception(exc)
    status_code = payload.pop("status_code")
    raise HTTPException(status_code=status_code, detail=payload) from exc


def _present(product: Any, principal: Optional[Principal]) -> Dict[str, Any]:
    record = product.to_dict()
    for key in ("created_at", "updated_at"):
        if record.get(key) is not None:
            record[key] = record[key].isoformat()
    return visible_fields(record, principal)


@api.post("", status_code=status.HTTP_201_CREATED, tags=["Products"])
async def create_product(request: ProductCreateRequest, principal: Optional[Principal] = Depends(get_principal)):
    try:
        product = await coordinator.create_product(request.model_dump(exclude_none=True), principal)
    except CatalogError as e:
        _raise_http(e)
    return _present(product, principal)


@api.get("", tags=["Products"])
async def list_products(principal: Optional[Principal] = Depends(get_principal)):
    try:
        products = coordinator.list_products(principal)
    except CatalogError as e:
        _raise_http(e)
    return {"docs": [_present(p, principal) for p in products], "total": len(products)}


@api.get("/{product_id}", tags=["Products"])
async def get_product(product_id: str, principal: Optional[Principal] = Depends(get_principal)):
    try:
        product = coordinator.get_product(product_id, principal)
    except CatalogError as e:
        _raise_http(e)
    return _present(product, principal)


@api.patch("/{product_id}", tags=["Products"])
async def update_product(
    product_id: str,
    request: ProductUpdateRequest,
    principal: Optional[Principal] = Depends(get_principal),
):
    try:
        product = await coordinator.update_product(product_id, request.model_dump(exclude_unset=True), principal)
    except CatalogError as e:
        _raise_http(e)
    return _present(product, principal)


@api.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Products"])
async def delete_product(product_id: str, principal: Optional[Principal] = Depends(get_principal)):
    try:
        coordinator.delete_product(product_id, principal)
    except CatalogError as e:
        _raise_http(e)
