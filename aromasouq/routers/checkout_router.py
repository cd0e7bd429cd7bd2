from fastapi import APIRouter, Depends, status

from aromasouq.core.auth_middleware import get_current_user
from aromasouq.deps import get_checkout_service
from aromasouq.schemas.checkout import QuickCheckoutRequest, QuickCheckoutResponse
from aromasouq.schemas.user import User as UserSchema
from aromasouq.services.checkout_service import CheckoutService

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("/quick", response_model=QuickCheckoutResponse, status_code=status.HTTP_201_CREATED)
def quick_checkout(
    payload: QuickCheckoutRequest,
    current_user: UserSchema = Depends(get_current_user),
    checkout_service: CheckoutService = Depends(get_checkout_service),
) -> QuickCheckoutResponse:
    """Buy a single product without going through the cart."""
    return checkout_service.quick_checkout(current_user.id, payload)
