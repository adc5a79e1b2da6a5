# storefront/utils/tokenJWT.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from storefront.config import Settings, get_app_settings
from storefront.schemas.user import UserRecord
from storefront.storage import Storage, get_storage

# Authorization scheme; missing headers are reported by get_current_user itself
bearer_scheme = HTTPBearer(auto_error=False)


# Generate a new JWT access token carrying the user id
def create_access_token(user_id: int, settings: Settings, expires_delta: timedelta = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# Verify signature and expiry, return the user id or None
def decode_access_token(token: str, settings: Settings) -> Optional[int]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


# Retrieve the currently authenticated user based on the bearer token
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
) -> UserRecord:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = decode_access_token(credentials.credentials, settings)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # A valid token for an account that is gone is a permission problem
    user = storage.get_user_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User not found")
    return user


# Same as get_current_user, but anonymous callers get None instead of an error
def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
) -> Optional[UserRecord]:
    if credentials is None or not credentials.credentials:
        return None
    user_id = decode_access_token(credentials.credentials, settings)
    if user_id is None:
        return None
    return storage.get_user_by_id(user_id)
