# storefront/routes/cart.py
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request

from storefront.config import Settings, get_app_settings
from storefront.schemas.cart import CartAddItem, CartLineOut, CartOut, CartSessionOut, CartUpdateItem
from storefront.schemas.common import SuccessResponse
from storefront.services.pricing import compute_totals
from storefront.storage import Storage, get_storage
from storefront.utils.cart_session import resolve_cart_session

router = APIRouter(prefix="/cart", tags=["Cart"])
logger = logging.getLogger(__name__)


# Only lines belonging to the caller's cart can be touched
def _owned_line(storage: Storage, line_id: int, session_id: str) -> CartLineOut:
    line = storage.get_line(line_id)
    if not line or line.session_id != session_id:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return line


# Issue a random cart token for an anonymous browser
@router.post("/session", response_model=CartSessionOut)
def new_cart_session():
    return CartSessionOut(session_id=uuid.uuid4().hex)


@router.get("", response_model=CartOut)
def get_cart(
    session_id: str = Depends(resolve_cart_session),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    items = storage.list_cart(session_id)
    totals = compute_totals(items, settings.TAX_RATE)
    return CartOut(items=items, subtotal=totals.subtotal, tax=totals.tax, total=totals.total)


@router.post("", response_model=CartLineOut)
def add_to_cart(
    payload: CartAddItem,
    session_id: str = Depends(resolve_cart_session),
    storage: Storage = Depends(get_storage),
):
    if not storage.get_product(payload.product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    line = storage.add_line(session_id, payload.product_id, payload.quantity)
    logger.debug("Cart %s: product %s now x%s", session_id, line.product_id, line.quantity)
    return line


@router.put("/{item_id}", response_model=CartLineOut)
def update_cart_item(
    item_id: int,
    payload: CartUpdateItem,
    session_id: str = Depends(resolve_cart_session),
    storage: Storage = Depends(get_storage),
):
    if payload.quantity is None or payload.quantity < 1:
        raise HTTPException(status_code=400, detail="Invalid quantity")

    _owned_line(storage, item_id, session_id)
    line = storage.update_quantity(item_id, payload.quantity)
    if not line:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return line


@router.delete("/{item_id}", response_model=SuccessResponse)
def delete_cart_item(
    item_id: int,
    session_id: str = Depends(resolve_cart_session),
    storage: Storage = Depends(get_storage),
):
    _owned_line(storage, item_id, session_id)
    if not storage.remove_line(item_id):
        raise HTTPException(status_code=404, detail="Cart item not found")
    return SuccessResponse()


@router.delete("", response_model=SuccessResponse)
def clear_cart(
    request: Request,
    session_id: str = Depends(resolve_cart_session),
    storage: Storage = Depends(get_storage),
):
    storage.clear_cart(session_id)
    logger.info("Cart %s cleared by %s", session_id, request.client.host if request.client else None)
    return SuccessResponse()
