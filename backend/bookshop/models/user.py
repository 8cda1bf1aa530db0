# backend/bookshop/models/user.py

from enum import Enum
from typing import Optional
from datetime import datetime

from pydantic import EmailStr, Field

from bookshop.models.common import CamelModel


class UserType(str, Enum):
    ADMIN = "Admin"
    STAFF = "Staff"
    CUSTOMER = "Customer"


class UserBase(CamelModel):
    user_email: EmailStr
    username: str = Field(..., min_length=1)
    phone_number: Optional[str] = None

class UserRegister(UserBase):
    phone_number: str
    password: str = Field(..., min_length=6)

class UserCreate(UserRegister):
    # Admin-created accounts may carry any role and a home branch
    user_type: UserType = UserType.CUSTOMER
    branch: Optional[str] = None

class UserUpdate(CamelModel):
    username: Optional[str] = None
    phone_number: Optional[str] = None
    user_type: Optional[UserType] = None
    branch: Optional[str] = None

class User(UserBase):
    user_id: str
    user_type: UserType = UserType.CUSTOMER
    branch: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.user_type == UserType.ADMIN
