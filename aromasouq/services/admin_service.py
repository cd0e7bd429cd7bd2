"""
Admin moderation.

Lists take typed filter models. Vendor status changes go through the vendor
allow-list, and the product fan-out shares the status change's transaction.
"""

import logging
from sqlalchemy.orm import Session

from aromasouq.core.exceptions import BadRequestError, NotFoundError
from aromasouq.models.user import UserRole, UserStatus
from aromasouq.models.vendor import VendorStatus
from aromasouq.repositories.product_repository import ProductRepository
from aromasouq.repositories.review_repository import ReviewRepository
from aromasouq.repositories.user_repository import UserRepository
from aromasouq.repositories.vendor_repository import VendorRepository
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.order import Order, OrderFilter
from aromasouq.schemas.pagination import Page
from aromasouq.schemas.product import Product, ProductFilter, ProductStatusUpdate
from aromasouq.schemas.review import Review, ReviewFilter
from aromasouq.schemas.user import User, UserFilter, UserStatusUpdate
from aromasouq.schemas.vendor import Vendor, VendorFilter, VendorStatusResult, VendorStatusUpdate
from aromasouq.services.order_service import OrderService
from aromasouq.services.order_status import ensure_vendor_transition
from aromasouq.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.vendor_repo = VendorRepository(db)
        self.product_repo = ProductRepository(db)
        self.review_repo = ReviewRepository(db)
        self.order_service = OrderService(db)

    # Users

    def list_users(self, filters: UserFilter, page: int, limit: int) -> Page[User]:
        users, total = self.user_repo.search(filters, page, limit)
        return Page[User].build(users, total, page, limit)

    def update_user_status(self, user_id: str, request: UserStatusUpdate) -> User:
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found")
        if user.role == UserRole.ADMIN and request.status != UserStatus.ACTIVE:
            raise BadRequestError("Cannot suspend admin users")

        updated = self.user_repo.update(user_id, status=request.status)
        logger.info(f"User {user_id} status {user.status.value} -> {request.status.value}")
        return updated

    # Vendors

    def list_vendors(self, filters: VendorFilter, page: int, limit: int) -> Page[Vendor]:
        vendors, total = self.vendor_repo.search(filters, page, limit)
        return Page[Vendor].build(vendors, total, page, limit)

    def get_vendor(self, vendor_id: str) -> Vendor:
        vendor = self.vendor_repo.get_by_id(vendor_id)
        if vendor is None:
            raise NotFoundError(f"Vendor with ID {vendor_id} not found")
        return vendor

    def update_vendor_status(
        self, vendor_id: str, request: VendorStatusUpdate
    ) -> VendorStatusResult:
        vendor = self.get_vendor(vendor_id)
        ensure_vendor_transition(vendor.status, request.status)

        changes = {"status": request.status}
        if request.status == VendorStatus.APPROVED and vendor.verified_at is None:
            changes["verified_at"] = utc_now()

        try:
            updated = self.vendor_repo.update(vendor_id, commit=False, **changes)
            products_updated = self.product_repo.set_active_for_vendor(
                vendor_id, is_active=request.status == VendorStatus.APPROVED
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Vendor {vendor_id} {vendor.status.value} -> {request.status.value}, "
            f"{products_updated} products updated"
        )
        return VendorStatusResult(vendor=updated, products_updated=products_updated)

    # Orders, products, reviews

    def list_orders(self, filters: OrderFilter, page: int, limit: int) -> Page[Order]:
        return self.order_service.search(filters, page, limit)

    def list_products(self, filters: ProductFilter, page: int, limit: int) -> Page[Product]:
        products, total = self.product_repo.search(filters, page, limit)
        return Page[Product].build(products, total, page, limit)

    def update_product_flags(self, product_id: str, request: ProductStatusUpdate) -> Product:
        changes = request.model_dump(exclude_none=True)
        product = self.product_repo.update(product_id, **changes)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found")
        return product

    def list_reviews(self, filters: ReviewFilter, page: int, limit: int) -> Page[Review]:
        reviews, total = self.review_repo.search(filters, page, limit)
        return Page[Review].build(reviews, total, page, limit)

    def delete_review(self, review_id: str) -> MessageResponse:
        review = self.review_repo.get_by_id(review_id)
        if review is None:
            raise NotFoundError(f"Review with ID {review_id} not found")
        try:
            self.review_repo.delete(review_id, commit=False)
            self.review_repo.refresh_product_rating(review.product_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return MessageResponse(message="Review deleted successfully")
