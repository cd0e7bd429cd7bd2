import pytest

from aromasouq.core.exceptions import (
    AuthorizationError,
    BadRequestError,
    InvalidStatusTransitionError,
)
from aromasouq.models import Product, UserRole, UserStatus, VendorStatus
from aromasouq.schemas.product import ProductStatusUpdate
from aromasouq.schemas.user import UserFilter, UserStatusUpdate
from aromasouq.schemas.vendor import (
    VendorFilter,
    VendorProfileCreate,
    VendorProfileUpdate,
    VendorStatusUpdate,
)
from aromasouq.services.admin_service import AdminService
from aromasouq.services.vendor_service import VendorService


@pytest.fixture
def admin_service(db_session):
    return AdminService(db_session)


class TestVendorModeration:
    def test_suspension_deactivates_every_product(
        self, db_session, admin_service, make_vendor, make_product
    ):
        _, vendor = make_vendor()
        first = make_product(vendor.id)
        second = make_product(vendor.id)

        result = admin_service.update_vendor_status(
            vendor.id, VendorStatusUpdate(status=VendorStatus.SUSPENDED)
        )

        assert result.vendor.status == VendorStatus.SUSPENDED
        assert result.products_updated == 2
        assert db_session.get(Product, first.id).is_active is False
        assert db_session.get(Product, second.id).is_active is False

    def test_reapproval_reactivates_products(
        self, db_session, admin_service, make_vendor, make_product
    ):
        _, vendor = make_vendor(status=VendorStatus.SUSPENDED)
        product = make_product(vendor.id, is_active=False)

        result = admin_service.update_vendor_status(
            vendor.id, VendorStatusUpdate(status=VendorStatus.APPROVED)
        )

        assert result.vendor.verified_at is not None
        assert db_session.get(Product, product.id).is_active is True

    def test_invalid_vendor_transition(self, admin_service, make_vendor):
        _, vendor = make_vendor(status=VendorStatus.PENDING)

        with pytest.raises(InvalidStatusTransitionError):
            admin_service.update_vendor_status(
                vendor.id, VendorStatusUpdate(status=VendorStatus.SUSPENDED)
            )

    def test_list_vendors_by_status(self, admin_service, make_vendor):
        make_vendor(status=VendorStatus.PENDING)
        make_vendor()

        page = admin_service.list_vendors(
            VendorFilter(status=VendorStatus.PENDING), page=1, limit=20
        )

        assert page.meta.total == 1
        assert page.data[0].status == VendorStatus.PENDING


class TestUserModeration:
    def test_suspend_customer(self, admin_service, make_user):
        customer = make_user()

        updated = admin_service.update_user_status(
            customer.id, UserStatusUpdate(status=UserStatus.SUSPENDED)
        )

        assert updated.status == UserStatus.SUSPENDED

    def test_admins_cannot_be_suspended(self, admin_service, make_user):
        admin = make_user(role=UserRole.ADMIN)

        with pytest.raises(BadRequestError, match="Cannot suspend admin users"):
            admin_service.update_user_status(
                admin.id, UserStatusUpdate(status=UserStatus.SUSPENDED)
            )

    def test_list_users_by_role(self, admin_service, make_user):
        make_user()
        make_user(role=UserRole.ADMIN)

        page = admin_service.list_users(UserFilter(role=UserRole.ADMIN), page=1, limit=20)

        assert page.meta.total == 1
        assert page.data[0].role == UserRole.ADMIN

    def test_product_flags(self, admin_service, make_vendor, make_product):
        _, vendor = make_vendor()
        product = make_product(vendor.id)

        updated = admin_service.update_product_flags(
            product.id, ProductStatusUpdate(is_featured=True)
        )

        assert updated.is_featured is True
        assert updated.is_active is True


class TestVendorProfile:
    def _profile(self, **overrides):
        data = dict(
            business_name="Desert Bloom",
            business_email="shop@example.com",
            business_phone="+971500000009",
        )
        data.update(overrides)
        return VendorProfileCreate(**data)

    def test_new_profile_starts_pending(self, db_session, make_user):
        user = make_user(role=UserRole.VENDOR)

        vendor = VendorService(db_session).create_profile(user, self._profile())

        assert vendor.status == VendorStatus.PENDING
        assert VendorService(db_session).get_profile(user.id).id == vendor.id

    def test_customers_cannot_create_profile(self, db_session, make_user):
        customer = make_user()

        with pytest.raises(AuthorizationError):
            VendorService(db_session).create_profile(customer, self._profile())

    def test_suspended_vendor_cannot_edit_profile(self, db_session, make_vendor):
        user, _ = make_vendor(status=VendorStatus.SUSPENDED)

        with pytest.raises(AuthorizationError):
            VendorService(db_session).update_profile(
                user.id, VendorProfileUpdate(business_name="New Name")
            )
