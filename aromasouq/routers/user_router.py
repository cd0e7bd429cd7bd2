from fastapi import APIRouter, Depends

from aromasouq.core.auth_middleware import get_current_user
from aromasouq.deps import get_user_service, pagination_params
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.pagination import Page, PaginationParams
from aromasouq.schemas.user import (
    ChangePasswordRequest,
    User as UserSchema,
    UserProfile,
    UserProfileUpdate,
)
from aromasouq.schemas.wallet import CoinTransaction
from aromasouq.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=UserProfile)
def get_profile(
    current_user: UserSchema = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserProfile:
    """Current user with wallet balance"""
    return user_service.get_profile(current_user.id)


@router.patch("/profile", response_model=UserSchema)
def update_profile(
    payload: UserProfileUpdate,
    current_user: UserSchema = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserSchema:
    return user_service.update_profile(current_user.id, payload)


@router.patch("/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    current_user: UserSchema = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    return user_service.change_password(current_user.id, payload)


@router.get("/coins-history", response_model=Page[CoinTransaction])
def coins_history(
    pagination: PaginationParams = Depends(pagination_params),
    current_user: UserSchema = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> Page[CoinTransaction]:
    return user_service.get_coins_history(current_user.id, pagination.page, pagination.limit)
