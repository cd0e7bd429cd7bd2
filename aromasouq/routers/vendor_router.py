"""
Vendor self-service routes (role VENDOR).

- POST/GET/PATCH /vendor/profile
- GET /vendor/products
- GET /vendor/orders, /vendor/orders/{id}
- PUT /vendor/orders/{id}/status, POST /vendor/orders/{id}/advance
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from aromasouq.core.auth_middleware import get_current_user, require_vendor
from aromasouq.deps import get_vendor_service, pagination_params
from aromasouq.models.order import OrderStatus
from aromasouq.schemas.order import Order, OrderAdvanceRequest, OrderStatusUpdate, VendorOrder
from aromasouq.schemas.pagination import Page, PaginationParams
from aromasouq.schemas.product import Product, VendorProductStatus
from aromasouq.schemas.user import User as UserSchema
from aromasouq.schemas.vendor import Vendor, VendorProfileCreate, VendorProfileUpdate
from aromasouq.services.vendor_service import VendorService

router = APIRouter(prefix="/vendor", tags=["vendor"])


@router.post("/profile", response_model=Vendor)
def create_profile(
    payload: VendorProfileCreate,
    current_user: UserSchema = Depends(get_current_user),
    vendor_service: VendorService = Depends(get_vendor_service),
) -> Vendor:
    """Create the vendor profile, or update it in place when it exists."""
    return vendor_service.create_profile(current_user, payload)


@router.get("/profile", response_model=Vendor)
def get_profile(
    current_user: UserSchema = Depends(require_vendor),
    vendor_service: VendorService = Depends(get_vendor_service),
) -> Vendor:
    return vendor_service.get_profile(current_user.id)


@router.patch("/profile", response_model=Vendor)
def update_profile(
    payload: VendorProfileUpdate,
    current_user: UserSchema = Depends(require_vendor),
    vendor_service: VendorService = Depends(get_vendor_service),
) -> Vendor:
    return vendor_service.update_profile(current_user.id, payload)


@router.get("/products", response_model=Page[Product])
def list_products(
    search: Optional[str] = Query(None),
    status: VendorProductStatus = Query(VendorProductStatus.ALL),
    pagination: PaginationParams = Depends(pagination_params),
    current_user: UserSchema = Depends(require_vendor),
    vendor_service: VendorService = Depends(get_vendor_service),
) -> Page[Product]:
    return vendor_service.list_products(
        current_user.id, status, search, pagination.page, pagination.limit
    )


@router.get("/orders", response_model=Page[VendorOrder])
def list_orders(
    order_status: Optional[OrderStatus] = Query(None),
    pagination: PaginationParams = Depends(pagination_params),
    current_user: UserSchema = Depends(require_vendor),
    vendor_service: VendorService = Depends(get_vendor_service),
) -> Page[VendorOrder]:
    return vendor_service.list_orders(
        current_user, order_status, pagination.page, pagination.limit
    )


@router.get("/orders/{order_id}", response_model=VendorOrder)
def get_order(
    order_id: str,
    current_user: UserSchema = Depends(require_vendor),
    vendor_service: VendorService = Depends(get_vendor_service),
) -> VendorOrder:
    return vendor_service.get_order(current_user, order_id)


@router.put("/orders/{order_id}/status", response_model=Order)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    current_user: UserSchema = Depends(require_vendor),
    vendor_service: VendorService = Depends(get_vendor_service),
) -> Order:
    return vendor_service.update_order_status(current_user, order_id, payload)


@router.post("/orders/{order_id}/advance", response_model=Order)
def advance_order(
    order_id: str,
    payload: Optional[OrderAdvanceRequest] = None,
    current_user: UserSchema = Depends(require_vendor),
    vendor_service: VendorService = Depends(get_vendor_service),
) -> Order:
    """Move the order to the next status of the fulfilment chain."""
    return vendor_service.advance_order(
        current_user, order_id, payload or OrderAdvanceRequest()
    )
