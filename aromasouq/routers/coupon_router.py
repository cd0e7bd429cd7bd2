from typing import List

from fastapi import APIRouter, Depends, status

from aromasouq.core.auth_middleware import get_current_user, require_vendor_or_admin
from aromasouq.deps import get_coupon_service
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.coupon import (
    Coupon,
    CouponCreate,
    CouponUpdate,
    CouponValidateRequest,
    CouponValidation,
)
from aromasouq.schemas.user import User as UserSchema
from aromasouq.services.coupon_service import CouponService

router = APIRouter(prefix="/coupons", tags=["coupons"])


@router.post("", response_model=Coupon, status_code=status.HTTP_201_CREATED)
def create_coupon(
    payload: CouponCreate,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    coupon_service: CouponService = Depends(get_coupon_service),
) -> Coupon:
    return coupon_service.create(current_user, payload)


@router.get("", response_model=List[Coupon])
def list_coupons(
    current_user: UserSchema = Depends(require_vendor_or_admin),
    coupon_service: CouponService = Depends(get_coupon_service),
) -> List[Coupon]:
    return coupon_service.list(current_user)


@router.get("/public/vendor/{vendor_id}", response_model=List[Coupon])
def list_vendor_public_coupons(
    vendor_id: str, coupon_service: CouponService = Depends(get_coupon_service)
) -> List[Coupon]:
    return coupon_service.list_public_for_vendor(vendor_id)


@router.post("/validate", response_model=CouponValidation)
def validate_coupon(
    payload: CouponValidateRequest,
    _: UserSchema = Depends(get_current_user),
    coupon_service: CouponService = Depends(get_coupon_service),
) -> CouponValidation:
    return coupon_service.validate(payload.code, payload.order_amount)


@router.get("/{coupon_id}", response_model=Coupon)
def get_coupon(
    coupon_id: str,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    coupon_service: CouponService = Depends(get_coupon_service),
) -> Coupon:
    return coupon_service.get(current_user, coupon_id)


@router.patch("/{coupon_id}", response_model=Coupon)
def update_coupon(
    coupon_id: str,
    payload: CouponUpdate,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    coupon_service: CouponService = Depends(get_coupon_service),
) -> Coupon:
    return coupon_service.update(current_user, coupon_id, payload)


@router.delete("/{coupon_id}", response_model=MessageResponse)
def delete_coupon(
    coupon_id: str,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    coupon_service: CouponService = Depends(get_coupon_service),
) -> MessageResponse:
    return coupon_service.remove(current_user, coupon_id)
