from fastapi import APIRouter, Depends, status

from aromasouq.core.auth_middleware import get_current_user
from aromasouq.deps import get_cart_service
from aromasouq.schemas.cart import CartItem, CartItemAdd, CartItemUpdate, CartWithSummary
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.user import User as UserSchema
from aromasouq.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartWithSummary)
def get_cart(
    current_user: UserSchema = Depends(get_current_user),
    cart_service: CartService = Depends(get_cart_service),
) -> CartWithSummary:
    """Cart lines priced live, with subtotal/tax/shipping/total/coins_earnable."""
    return cart_service.get_cart(current_user.id)


@router.post("/items", response_model=CartItem, status_code=status.HTTP_201_CREATED)
def add_cart_item(
    payload: CartItemAdd,
    current_user: UserSchema = Depends(get_current_user),
    cart_service: CartService = Depends(get_cart_service),
) -> CartItem:
    return cart_service.add_item(current_user.id, payload)


@router.patch("/items/{item_id}", response_model=CartItem)
def update_cart_item(
    item_id: str,
    payload: CartItemUpdate,
    current_user: UserSchema = Depends(get_current_user),
    cart_service: CartService = Depends(get_cart_service),
) -> CartItem:
    return cart_service.update_item(current_user.id, item_id, payload)


@router.delete("/items/{item_id}", response_model=MessageResponse)
def remove_cart_item(
    item_id: str,
    current_user: UserSchema = Depends(get_current_user),
    cart_service: CartService = Depends(get_cart_service),
) -> MessageResponse:
    return cart_service.remove_item(current_user.id, item_id)


@router.delete("", response_model=MessageResponse)
def clear_cart(
    current_user: UserSchema = Depends(get_current_user),
    cart_service: CartService = Depends(get_cart_service),
) -> MessageResponse:
    return cart_service.clear_cart(current_user.id)
