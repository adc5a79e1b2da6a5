# storefront/routes/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from storefront.config import Settings, get_app_settings
from storefront.schemas import user as schemas
from storefront.storage import Storage, get_storage
from storefront.utils.hashing import get_password_hash, verify_password
from storefront.utils.tokenJWT import create_access_token, get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(__name__)


def _client_ip(request: Request):
    return request.client.host if request.client else None


def _auth_response(user: schemas.UserRecord, settings: Settings) -> schemas.AuthResponse:
    return schemas.AuthResponse(
        user=schemas.UserResponse.model_validate(user),
        access_token=create_access_token(user.id, settings),
    )


# Register a new user
@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user: schemas.UserCreate,
    request: Request,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    # Normalize email input
    normalized_email = user.email.strip().lower()

    if storage.get_user_by_email(normalized_email):
        logger.info("Registration rejected for existing email %s from %s", normalized_email, _client_ip(request))
        raise HTTPException(status_code=400, detail="User already exists")

    new_user = storage.create_user(
        email=normalized_email,
        password_hash=get_password_hash(user.password),
        first_name=user.first_name.strip(),
        last_name=user.last_name.strip(),
    )
    logger.info("User %s registered from %s", new_user.id, _client_ip(request))
    return _auth_response(new_user, settings)


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.AuthResponse)
def login(
    payload: schemas.UserLogin,
    request: Request,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    db_user = storage.get_user_by_email(payload.email)

    # Same answer for unknown email and wrong password
    if not db_user or not verify_password(payload.password, db_user.password_hash):
        logger.info("Failed login for %s from %s", payload.email, _client_ip(request))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    logger.info("User %s logged in from %s", db_user.id, _client_ip(request))
    return _auth_response(db_user, settings)


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: schemas.UserRecord = Depends(get_current_user)):
    return schemas.UserResponse.model_validate(current_user)
