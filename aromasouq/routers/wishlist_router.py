from typing import List

from fastapi import APIRouter, Depends, status

from aromasouq.core.auth_middleware import get_current_user
from aromasouq.deps import get_wishlist_service
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.user import User as UserSchema
from aromasouq.schemas.wishlist import WishlistAdd, WishlistItem
from aromasouq.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.get("", response_model=List[WishlistItem])
def list_wishlist(
    current_user: UserSchema = Depends(get_current_user),
    wishlist_service: WishlistService = Depends(get_wishlist_service),
) -> List[WishlistItem]:
    return wishlist_service.list(current_user.id)


@router.post("", response_model=WishlistItem, status_code=status.HTTP_201_CREATED)
def add_to_wishlist(
    payload: WishlistAdd,
    current_user: UserSchema = Depends(get_current_user),
    wishlist_service: WishlistService = Depends(get_wishlist_service),
) -> WishlistItem:
    return wishlist_service.add(current_user.id, payload.product_id)


@router.delete("/{product_id}", response_model=MessageResponse)
def remove_from_wishlist(
    product_id: str,
    current_user: UserSchema = Depends(get_current_user),
    wishlist_service: WishlistService = Depends(get_wishlist_service),
) -> MessageResponse:
    return wishlist_service.remove(current_user.id, product_id)
