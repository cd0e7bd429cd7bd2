import logging

from fastapi import APIRouter, Depends, Response, status

from aromasouq.config import settings
from aromasouq.core.auth_middleware import get_current_user
from aromasouq.deps import get_auth_service
from aromasouq.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.user import User as UserSchema
from aromasouq.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="none",
        path="/",
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Create an account (CUSTOMER or VENDOR) and sign in."""
    result = auth_service.register(payload)
    _set_auth_cookie(response, result.access_token)
    return result


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    result = auth_service.login(payload)
    _set_auth_cookie(response, result.access_token)
    return result


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    response.delete_cookie(
        key=settings.COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="none",
    )
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserSchema)
def me(current_user: UserSchema = Depends(get_current_user)) -> UserSchema:
    return current_user
