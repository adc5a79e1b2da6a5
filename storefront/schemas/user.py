# storefront/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from storefront.schemas.common import ORMBase


# Schema for user authentication credentials
class UserLogin(ORMBase):
    email: EmailStr
    password: str = Field(min_length=1)


# Schema for user registration requests
class UserCreate(ORMBase):
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)


# Stored account, password hash included. Never returned to clients.
class UserRecord(ORMBase):
    id: int
    email: str
    password_hash: str
    first_name: str
    last_name: str
    created_at: Optional[datetime] = None


# Output schema for user profile details
class UserResponse(ORMBase):
    id: int
    email: str
    first_name: str
    last_name: str
    created_at: Optional[datetime] = None


# Issued on registration and login
class AuthResponse(ORMBase):
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
