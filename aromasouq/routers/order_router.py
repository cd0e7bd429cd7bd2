from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from aromasouq.core.auth_middleware import get_current_user, require_vendor_or_admin
from aromasouq.deps import get_order_service, pagination_params
from aromasouq.models.order import OrderStatus
from aromasouq.schemas.order import Order, OrderCreate, OrderStatusUpdate
from aromasouq.schemas.pagination import Page, PaginationParams
from aromasouq.schemas.user import User as UserSchema
from aromasouq.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    current_user: UserSchema = Depends(get_current_user),
    order_service: OrderService = Depends(get_order_service),
) -> Order:
    """Check out the current cart."""
    return order_service.create(current_user.id, payload)


@router.get("", response_model=Page[Order])
def list_orders(
    order_status: Optional[OrderStatus] = Query(None),
    pagination: PaginationParams = Depends(pagination_params),
    current_user: UserSchema = Depends(get_current_user),
    order_service: OrderService = Depends(get_order_service),
) -> Page[Order]:
    return order_service.list(current_user.id, order_status, pagination.page, pagination.limit)


@router.get("/{order_id}", response_model=Order)
def get_order(
    order_id: str,
    current_user: UserSchema = Depends(get_current_user),
    order_service: OrderService = Depends(get_order_service),
) -> Order:
    return order_service.get(current_user.id, order_id)


@router.post("/{order_id}/cancel", response_model=Order)
def cancel_order(
    order_id: str,
    current_user: UserSchema = Depends(get_current_user),
    order_service: OrderService = Depends(get_order_service),
) -> Order:
    """Customer cancellation, PENDING orders only."""
    return order_service.cancel(current_user.id, order_id)


@router.patch("/{order_id}/status", response_model=Order)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    order_service: OrderService = Depends(get_order_service),
) -> Order:
    return order_service.update_status(current_user, order_id, payload)
