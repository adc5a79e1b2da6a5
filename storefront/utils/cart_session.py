# storefront/utils/cart_session.py
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException

from storefront.schemas.user import UserRecord
from storefront.storage import Storage, get_storage
from storefront.utils.tokenJWT import get_optional_user

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Id"
USER_CART_PREFIX = "user-"


def user_cart_key(user_id: int) -> str:
    return f"{USER_CART_PREFIX}{user_id}"


def resolve_cart_session(
    x_session_id: Optional[str] = Header(None, alias=SESSION_HEADER),
    user: Optional[UserRecord] = Depends(get_optional_user),
    storage: Storage = Depends(get_storage),
) -> str:
    """Pick the cart a request works on.

    Signed-in users own the cart keyed by their id. Anything an anonymous
    browser collected under its session header is folded into that cart the
    first time the two are seen together.
    """
    anonymous = (x_session_id or "").strip() or None
    if anonymous and anonymous.startswith(USER_CART_PREFIX):
        raise HTTPException(status_code=400, detail="Invalid session id")

    if user is not None:
        owner = user_cart_key(user.id)
        if anonymous:
            moved = storage.merge_carts(anonymous, owner)
            if moved:
                logger.info("Merged %s cart line(s) from anonymous session into user %s", moved, user.id)
        return owner

    if not anonymous:
        raise HTTPException(status_code=400, detail="Session id required")
    return anonymous
