import logging
from typing import List

from sqlalchemy.orm import Session

from aromasouq.core.exceptions import (
    AuthorizationError,
    BadRequestError,
    ConflictError,
    NotFoundError,
)
from aromasouq.models.coupon import DiscountType
from aromasouq.models.vendor import VendorStatus
from aromasouq.repositories.coupon_repository import CouponRepository
from aromasouq.repositories.vendor_repository import VendorRepository
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.coupon import (
    Coupon,
    CouponCreate,
    CouponUpdate,
    CouponValidation,
)
from aromasouq.schemas.user import User
from aromasouq.schemas.vendor import Vendor
from aromasouq.services.pricing import money
from aromasouq.utils.timezone_utils import ensure_utc, utc_now

logger = logging.getLogger(__name__)


def compute_discount(coupon: Coupon, order_amount: float) -> float:
    """Percentage (capped by max_discount) or fixed amount, never above the order amount."""
    if coupon.discount_type == DiscountType.PERCENTAGE:
        discount = order_amount * coupon.discount_value / 100
        if coupon.max_discount is not None:
            discount = min(discount, coupon.max_discount)
    else:
        discount = coupon.discount_value
    return money(min(discount, order_amount))


class CouponService:
    def __init__(self, db: Session):
        self.db = db
        self.coupon_repo = CouponRepository(db)
        self.vendor_repo = VendorRepository(db)

    def _vendor_for(self, user: User) -> Vendor:
        vendor = self.vendor_repo.get_by_user_id(user.id)
        if vendor is None:
            raise AuthorizationError("Vendor profile not found")
        return vendor

    def _get_owned(self, user: User, coupon_id: str) -> Coupon:
        coupon = self.coupon_repo.get_by_id(coupon_id)
        if coupon is None:
            raise NotFoundError(f"Coupon with ID {coupon_id} not found")
        if user.is_admin:
            return coupon
        vendor = self._vendor_for(user)
        if coupon.vendor_id != vendor.id:
            raise AuthorizationError("You can only manage your own coupons")
        return coupon

    def create(self, user: User, request: CouponCreate) -> Coupon:
        if not user.is_vendor or user.is_admin:
            raise AuthorizationError("Only vendors can create coupons")
        vendor = self._vendor_for(user)
        if vendor.status != VendorStatus.APPROVED:
            raise AuthorizationError("Vendor account is not approved")

        if self.coupon_repo.get_by_code(request.code) is not None:
            raise ConflictError("Coupon code already exists")
        if ensure_utc(request.start_date) >= ensure_utc(request.end_date):
            raise BadRequestError("End date must be after start date")
        if request.discount_type == DiscountType.PERCENTAGE and request.discount_value > 100:
            raise BadRequestError("Percentage discount cannot exceed 100")

        coupon = self.coupon_repo.create(vendor_id=vendor.id, **request.model_dump())
        logger.info(f"Vendor {vendor.id} created coupon {coupon.code}")
        return coupon

    def list(self, user: User) -> List[Coupon]:
        if user.is_admin:
            return self.coupon_repo.list_active()
        return self.coupon_repo.list_active(vendor_id=self._vendor_for(user).id)

    def get(self, user: User, coupon_id: str) -> Coupon:
        return self._get_owned(user, coupon_id)

    def update(self, user: User, coupon_id: str, request: CouponUpdate) -> Coupon:
        coupon = self._get_owned(user, coupon_id)
        changes = request.model_dump(exclude_unset=True)

        start = ensure_utc(changes.get("start_date") or coupon.start_date)
        end = ensure_utc(changes.get("end_date") or coupon.end_date)
        if start >= end:
            raise BadRequestError("End date must be after start date")
        value = changes.get("discount_value", coupon.discount_value)
        if coupon.discount_type == DiscountType.PERCENTAGE and value > 100:
            raise BadRequestError("Percentage discount cannot exceed 100")
        usage_limit = changes.get("usage_limit")
        if usage_limit is not None and usage_limit < coupon.usage_count:
            raise BadRequestError(
                f"Usage limit cannot be lower than current usage ({coupon.usage_count})"
            )

        return self.coupon_repo.update(coupon_id, **changes)

    def remove(self, user: User, coupon_id: str) -> MessageResponse:
        self._get_owned(user, coupon_id)
        self.coupon_repo.update(coupon_id, is_active=False)
        return MessageResponse(message="Coupon deleted successfully")

    def list_public_for_vendor(self, vendor_id: str) -> List[Coupon]:
        return self.coupon_repo.list_public_for_vendor(vendor_id)

    def check(self, code: str, order_amount: float) -> Coupon:
        """Load a coupon and verify it can be applied to ``order_amount``."""
        coupon = self.coupon_repo.get_by_code(code)
        if coupon is None:
            raise NotFoundError("Invalid coupon code")
        if not coupon.is_active:
            raise BadRequestError("Coupon is not active")

        now = utc_now()
        if now < ensure_utc(coupon.start_date):
            raise BadRequestError("Coupon is not yet valid")
        if now > ensure_utc(coupon.end_date):
            raise BadRequestError("Coupon has expired")
        if coupon.usage_limit is not None and coupon.usage_count >= coupon.usage_limit:
            raise BadRequestError("Coupon usage limit reached")
        if coupon.min_order_amount is not None and order_amount < coupon.min_order_amount:
            raise BadRequestError(
                f"Minimum order amount of {coupon.min_order_amount} AED required"
            )
        return coupon

    def validate(self, code: str, order_amount: float) -> CouponValidation:
        coupon = self.check(code, order_amount)
        discount = compute_discount(coupon, order_amount)
        return CouponValidation(
            valid=True,
            coupon=coupon,
            discount_amount=discount,
            final_amount=money(order_amount - discount),
        )

    def consume(self, coupon: Coupon) -> None:
        """Take one use of the coupon inside the caller's transaction."""
        if not self.coupon_repo.consume(coupon.id):
            logger.warning(f"Coupon {coupon.code} usage limit reached at consumption")
            raise BadRequestError("Coupon usage limit reached")
