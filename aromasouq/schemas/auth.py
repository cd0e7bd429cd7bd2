from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from aromasouq.models.user import UserRole
from aromasouq.schemas.user import User


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    phone: Optional[str] = Field(None, min_length=10, max_length=20)
    role: Optional[UserRole] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenPayload(BaseModel):
    sub: str
    email: EmailStr
    role: UserRole


class AuthResponse(BaseModel):
    user: User
    access_token: str
