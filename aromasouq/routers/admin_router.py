"""
Admin moderation routes (role ADMIN).

Every list takes typed query filters and is paginated.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from aromasouq.core.auth_middleware import require_admin
from aromasouq.deps import get_admin_service, pagination_params
from aromasouq.models.order import OrderStatus
from aromasouq.models.user import UserRole, UserStatus
from aromasouq.models.vendor import VendorStatus
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.order import Order, OrderFilter
from aromasouq.schemas.pagination import Page, PaginationParams
from aromasouq.schemas.product import Product, ProductFilter, ProductStatusUpdate
from aromasouq.schemas.review import Review, ReviewFilter
from aromasouq.schemas.user import User as UserSchema
from aromasouq.schemas.user import UserFilter, UserStatusUpdate
from aromasouq.schemas.vendor import Vendor, VendorFilter, VendorStatusResult, VendorStatusUpdate
from aromasouq.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/users", response_model=Page[UserSchema])
def list_users(
    role: Optional[UserRole] = Query(None),
    status: Optional[UserStatus] = Query(None),
    search: Optional[str] = Query(None),
    pagination: PaginationParams = Depends(pagination_params),
    admin_service: AdminService = Depends(get_admin_service),
) -> Page[UserSchema]:
    filters = UserFilter(role=role, status=status, search=search)
    return admin_service.list_users(filters, pagination.page, pagination.limit)


@router.patch("/users/{user_id}/status", response_model=UserSchema)
def update_user_status(
    user_id: str,
    payload: UserStatusUpdate,
    admin_service: AdminService = Depends(get_admin_service),
) -> UserSchema:
    return admin_service.update_user_status(user_id, payload)


@router.get("/vendors", response_model=Page[Vendor])
def list_vendors(
    status: Optional[VendorStatus] = Query(None),
    pagination: PaginationParams = Depends(pagination_params),
    admin_service: AdminService = Depends(get_admin_service),
) -> Page[Vendor]:
    return admin_service.list_vendors(
        VendorFilter(status=status), pagination.page, pagination.limit
    )


@router.get("/vendors/{vendor_id}", response_model=Vendor)
def get_vendor(
    vendor_id: str, admin_service: AdminService = Depends(get_admin_service)
) -> Vendor:
    return admin_service.get_vendor(vendor_id)


@router.patch("/vendors/{vendor_id}/status", response_model=VendorStatusResult)
def update_vendor_status(
    vendor_id: str,
    payload: VendorStatusUpdate,
    admin_service: AdminService = Depends(get_admin_service),
) -> VendorStatusResult:
    """Approve, reject or suspend a vendor. Products follow the vendor's status."""
    return admin_service.update_vendor_status(vendor_id, payload)


@router.get("/orders", response_model=Page[Order])
def list_orders(
    order_status: Optional[OrderStatus] = Query(None),
    user_id: Optional[str] = Query(None),
    pagination: PaginationParams = Depends(pagination_params),
    admin_service: AdminService = Depends(get_admin_service),
) -> Page[Order]:
    filters = OrderFilter(order_status=order_status, user_id=user_id)
    return admin_service.list_orders(filters, pagination.page, pagination.limit)


@router.get("/products", response_model=Page[Product])
def list_products(
    is_active: Optional[bool] = Query(None),
    is_featured: Optional[bool] = Query(None),
    vendor_id: Optional[str] = Query(None),
    pagination: PaginationParams = Depends(pagination_params),
    admin_service: AdminService = Depends(get_admin_service),
) -> Page[Product]:
    filters = ProductFilter(is_active=is_active, is_featured=is_featured, vendor_id=vendor_id)
    return admin_service.list_products(filters, pagination.page, pagination.limit)


@router.patch("/products/{product_id}/status", response_model=Product)
def update_product_status(
    product_id: str,
    payload: ProductStatusUpdate,
    admin_service: AdminService = Depends(get_admin_service),
) -> Product:
    return admin_service.update_product_flags(product_id, payload)


@router.get("/reviews", response_model=Page[Review])
def list_reviews(
    is_published: Optional[bool] = Query(None),
    product_id: Optional[str] = Query(None),
    pagination: PaginationParams = Depends(pagination_params),
    admin_service: AdminService = Depends(get_admin_service),
) -> Page[Review]:
    filters = ReviewFilter(is_published=is_published, product_id=product_id)
    return admin_service.list_reviews(filters, pagination.page, pagination.limit)


@router.delete("/reviews/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: str, admin_service: AdminService = Depends(get_admin_service)
) -> MessageResponse:
    return admin_service.delete_review(review_id)
