from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from aromasouq.models.user import UserRole, UserStatus


class User(BaseModel):
    id: str
    email: EmailStr
    first_name: str
    last_name: str
    phone: Optional[str] = None
    avatar: Optional[str] = None
    role: UserRole
    status: UserStatus
    preferred_language: str = "en"
    email_verified: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_admin(self) -> bool:
        return UserRole.is_admin(self.role)

    @property
    def is_vendor(self) -> bool:
        return UserRole.is_vendor(self.role)

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE


class UserWithPassword(User):
    """Internal only; never returned from a route."""

    password_hash: str


class UserWallet(BaseModel):
    balance: int
    lifetime_earned: int
    lifetime_spent: int

    class Config:
        from_attributes = True


class UserProfile(User):
    wallet: Optional[UserWallet] = None


class UserProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=2, max_length=100)
    last_name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = Field(None, min_length=10, max_length=20)
    avatar: Optional[str] = None
    preferred_language: Optional[Literal["en", "ar"]] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)


class UserStatusUpdate(BaseModel):
    status: UserStatus


class UserFilter(BaseModel):
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None
    search: Optional[str] = Field(None, description="Matches email, first or last name")
