# storefront/routes/orders.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from storefront.config import Settings, get_app_settings
from storefront.schemas.order import CheckoutData, OrderOut
from storefront.schemas.user import UserRecord
from storefront.services.checkout import CheckoutError, CheckoutService, get_checkout_service
from storefront.storage import Storage, get_storage
from storefront.utils.cart_session import resolve_cart_session
from storefront.utils.tokenJWT import get_current_user
from storefront.utils.uploads import PaymentProof

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger(__name__)


# Back-office accounts may read every order
def _is_back_office(user: UserRecord, settings: Settings) -> bool:
    return user.email.lower() in settings.back_office_emails


async def _read_proof(upload: Optional[UploadFile]) -> Optional[PaymentProof]:
    if upload is None or not upload.filename:
        return None
    try:
        content = await upload.read()
    finally:
        await upload.close()
    return PaymentProof(
        filename=upload.filename,
        content_type=upload.content_type or "",
        content=content,
    )


# Place an order for the caller's cart with a payment screenshot attached
@router.post("", response_model=OrderOut)
async def create_order(
    first_name: Optional[str] = Form(None, alias="firstName"),
    last_name: Optional[str] = Form(None, alias="lastName"),
    email: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    zip_code: Optional[str] = Form(None, alias="zip"),
    payment_screenshot: Optional[UploadFile] = File(None, alias="paymentScreenshot"),
    session_id: str = Depends(resolve_cart_session),
    current_user: UserRecord = Depends(get_current_user),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    try:
        billing = CheckoutData(
            first_name=first_name, last_name=last_name, email=email,
            address=address, city=city, state=state, zip=zip_code,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    proof = await _read_proof(payment_screenshot)

    try:
        return await checkout.place_order(session_id, current_user, billing, proof)
    except CheckoutError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception:
        logger.exception("Order creation failed for user %s", current_user.id)
        raise HTTPException(status_code=500, detail="Failed to create order")


# List the caller's orders; back-office accounts see the whole ledger
@router.get("", response_model=List[OrderOut])
def list_orders(
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    if _is_back_office(current_user, settings):
        return storage.list_orders()
    return storage.list_user_orders(current_user.id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order_detail(
    order_id: int,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    order = storage.get_order(order_id)
    if not order or (order.user_id != current_user.id and not _is_back_office(current_user, settings)):
        raise HTTPException(status_code=404, detail="Order not found")
    return order
