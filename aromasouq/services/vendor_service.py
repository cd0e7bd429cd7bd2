import logging
from typing import Optional

from sqlalchemy.orm import Session

from aromasouq.config import Settings, get_settings
from aromasouq.core.exceptions import AuthorizationError, NotFoundError
from aromasouq.models.order import OrderStatus
from aromasouq.models.user import UserRole
from aromasouq.models.vendor import VendorStatus
from aromasouq.repositories.product_repository import ProductRepository
from aromasouq.repositories.vendor_repository import VendorRepository
from aromasouq.schemas.order import Order, OrderAdvanceRequest, OrderStatusUpdate, VendorOrder
from aromasouq.schemas.pagination import Page
from aromasouq.schemas.product import Product, VendorProductStatus
from aromasouq.schemas.user import User
from aromasouq.schemas.vendor import Vendor, VendorProfileCreate, VendorProfileUpdate
from aromasouq.services.order_service import OrderService

logger = logging.getLogger(__name__)


class VendorService:
    """Vendor self-service: profile, own catalogue and own orders"""

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.vendor_repo = VendorRepository(db)
        self.product_repo = ProductRepository(db)
        self.order_service = OrderService(db, self.settings)

    def get_profile(self, user_id: str) -> Vendor:
        vendor = self.vendor_repo.get_by_user_id(user_id)
        if vendor is None:
            raise NotFoundError("Vendor profile not found")
        return vendor

    def create_profile(self, user: User, request: VendorProfileCreate) -> Vendor:
        if user.role != UserRole.VENDOR:
            raise AuthorizationError("Only vendor accounts can create a vendor profile")

        existing = self.vendor_repo.get_by_user_id(user.id)
        if existing is not None:
            return self.vendor_repo.update(existing.id, **request.model_dump())

        vendor = self.vendor_repo.create(
            user_id=user.id, status=VendorStatus.PENDING, **request.model_dump()
        )
        logger.info(f"Vendor profile {vendor.id} created for user {user.id}")
        return vendor

    def update_profile(self, user_id: str, request: VendorProfileUpdate) -> Vendor:
        vendor = self.get_profile(user_id)
        if vendor.status == VendorStatus.SUSPENDED:
            raise AuthorizationError("Suspended vendors cannot update their profile")
        return self.vendor_repo.update(vendor.id, **request.model_dump(exclude_unset=True))

    def list_products(
        self,
        user_id: str,
        status: VendorProductStatus,
        search: Optional[str],
        page: int,
        limit: int,
    ) -> Page[Product]:
        vendor = self.get_profile(user_id)
        products, total = self.product_repo.vendor_products(
            vendor.id, status, search, page, limit
        )
        return Page[Product].build(products, total, page, limit)

    def list_orders(
        self, user: User, order_status: Optional[OrderStatus], page: int, limit: int
    ) -> Page[VendorOrder]:
        return self.order_service.list_for_vendor(user, order_status, page, limit)

    def get_order(self, user: User, order_id: str) -> VendorOrder:
        return self.order_service.get_for_vendor(user, order_id)

    def update_order_status(
        self, user: User, order_id: str, request: OrderStatusUpdate
    ) -> Order:
        return self.order_service.update_status(user, order_id, request)

    def advance_order(self, user: User, order_id: str, request: OrderAdvanceRequest) -> Order:
        return self.order_service.advance(user, order_id, request)
