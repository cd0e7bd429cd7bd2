from datetime import timedelta

import pytest

from aromasouq.core.exceptions import (
    AuthorizationError,
    BadRequestError,
    ConflictError,
    NotFoundError,
)
from aromasouq.models import UserRole, VendorStatus
from aromasouq.models.coupon import DiscountType
from aromasouq.repositories.coupon_repository import CouponRepository
from aromasouq.schemas.coupon import Coupon, CouponCreate, CouponUpdate
from aromasouq.services.coupon_service import CouponService, compute_discount
from aromasouq.utils.timezone_utils import utc_now


@pytest.fixture
def coupon_service(db_session):
    return CouponService(db_session)


@pytest.fixture
def make_coupon(db_session):
    def _make_coupon(code="SAVE10", **overrides):
        now = utc_now()
        fields = dict(
            code=code,
            discount_type=DiscountType.PERCENTAGE,
            discount_value=10.0,
            start_date=now - timedelta(days=1),
            end_date=now + timedelta(days=30),
            is_active=True,
        )
        fields.update(overrides)
        return CouponRepository(db_session).create(**fields)

    return _make_coupon


def coupon_create(**overrides):
    now = utc_now()
    data = dict(
        code="summer25",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=25,
        start_date=now,
        end_date=now + timedelta(days=10),
    )
    data.update(overrides)
    return CouponCreate(**data)


class TestComputeDiscount:
    def _coupon(self, **fields):
        now = utc_now()
        base = dict(
            id="c1",
            code="X",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=50.0,
            start_date=now,
            end_date=now,
            is_active=True,
        )
        base.update(fields)
        return Coupon(**base)

    def test_percentage_respects_max_discount(self):
        assert compute_discount(self._coupon(max_discount=30.0), 200.0) == 30.0

    def test_fixed_never_exceeds_order_amount(self):
        coupon = self._coupon(discount_type=DiscountType.FIXED, discount_value=500.0)
        assert compute_discount(coupon, 100.0) == 100.0


class TestValidate:
    def test_valid_coupon(self, coupon_service, make_coupon):
        make_coupon()

        result = coupon_service.validate("save10", 200.0)

        assert result.valid is True
        assert result.discount_amount == 20.0
        assert result.final_amount == 180.0

    def test_unknown_code(self, coupon_service):
        with pytest.raises(NotFoundError, match="Invalid coupon code"):
            coupon_service.validate("NOPE", 100.0)

    def test_expired(self, coupon_service, make_coupon):
        make_coupon(end_date=utc_now() - timedelta(hours=1))

        with pytest.raises(BadRequestError, match="Coupon has expired"):
            coupon_service.validate("SAVE10", 100.0)

    def test_not_started(self, coupon_service, make_coupon):
        make_coupon(start_date=utc_now() + timedelta(days=1))

        with pytest.raises(BadRequestError, match="not yet valid"):
            coupon_service.validate("SAVE10", 100.0)

    def test_minimum_order_amount(self, coupon_service, make_coupon):
        make_coupon(min_order_amount=150.0)

        with pytest.raises(BadRequestError, match="Minimum order amount"):
            coupon_service.validate("SAVE10", 100.0)

    def test_usage_limit_is_enforced_at_consumption(self, db_session, coupon_service, make_coupon):
        coupon = make_coupon(usage_limit=1)

        coupon_service.consume(coupon)
        db_session.commit()

        with pytest.raises(BadRequestError, match="usage limit reached"):
            coupon_service.consume(coupon)
        with pytest.raises(BadRequestError, match="usage limit reached"):
            coupon_service.validate("SAVE10", 100.0)


class TestVendorCoupons:
    def test_approved_vendor_creates_coupon(self, coupon_service, make_vendor):
        user, vendor = make_vendor()

        coupon = coupon_service.create(user, coupon_create())

        assert coupon.code == "SUMMER25"
        assert coupon.vendor_id == vendor.id
        assert coupon.usage_count == 0

    def test_duplicate_code(self, coupon_service, make_vendor, make_coupon):
        user, _ = make_vendor()
        make_coupon(code="SUMMER25")

        with pytest.raises(ConflictError):
            coupon_service.create(user, coupon_create())

    def test_pending_vendor_is_forbidden(self, coupon_service, make_vendor):
        user, _ = make_vendor(status=VendorStatus.PENDING)

        with pytest.raises(AuthorizationError):
            coupon_service.create(user, coupon_create())

    def test_admin_cannot_create_coupons(self, coupon_service, make_user):
        admin = make_user(role=UserRole.ADMIN)

        with pytest.raises(AuthorizationError, match="Only vendors"):
            coupon_service.create(admin, coupon_create())

    def test_end_date_must_follow_start(self, coupon_service, make_vendor):
        user, _ = make_vendor()
        now = utc_now()

        with pytest.raises(BadRequestError, match="End date must be after start date"):
            coupon_service.create(user, coupon_create(start_date=now, end_date=now))

    def test_vendor_only_sees_own_coupons(self, coupon_service, make_vendor):
        first_user, _ = make_vendor()
        second_user, _ = make_vendor()
        coupon_service.create(first_user, coupon_create(code="FIRST10"))
        coupon_service.create(second_user, coupon_create(code="SECOND10"))

        assert [c.code for c in coupon_service.list(first_user)] == ["FIRST10"]
        theirs = coupon_service.list(second_user)[0]
        with pytest.raises(AuthorizationError):
            coupon_service.remove(first_user, theirs.id)

    def test_usage_limit_cannot_drop_below_usage(self, coupon_service, make_vendor, make_coupon):
        user, vendor = make_vendor()
        coupon = make_coupon(code="BUSY", vendor_id=vendor.id, usage_limit=10, usage_count=5)

        with pytest.raises(BadRequestError, match="lower than current usage"):
            coupon_service.update(user, coupon.id, CouponUpdate(usage_limit=2))

        assert coupon_service.get(user, coupon.id).usage_limit == 10
        updated = coupon_service.update(user, coupon.id, CouponUpdate(usage_limit=5))
        assert updated.usage_limit == updated.usage_count == 5
