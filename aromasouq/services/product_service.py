import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from aromasouq.core.exceptions import (
    AuthorizationError,
    BadRequestError,
    ConflictError,
    NotFoundError,
)
from aromasouq.models.vendor import VendorStatus
from aromasouq.repositories.brand_repository import BrandRepository
from aromasouq.repositories.category_repository import CategoryRepository
from aromasouq.repositories.product_repository import ProductRepository, VariantRepository
from aromasouq.repositories.vendor_repository import VendorRepository
from aromasouq.schemas.common import BulkUpdateResponse, MessageResponse
from aromasouq.schemas.pagination import Page
from aromasouq.schemas.product import (
    FlashSaleBulkAdd,
    FlashSaleBulkRemove,
    Product,
    ProductCreate,
    ProductFilter,
    ProductUpdate,
    SetDiscountRequest,
    StockUpdate,
    Variant,
    VariantCreate,
    VariantUpdate,
)
from aromasouq.schemas.user import User
from aromasouq.schemas.vendor import Vendor
from aromasouq.services.pricing import money

logger = logging.getLogger(__name__)


class ProductService:
    """Catalogue reads plus vendor/admin product management"""

    def __init__(self, db: Session):
        self.db = db
        self.product_repo = ProductRepository(db)
        self.variant_repo = VariantRepository(db)
        self.vendor_repo = VendorRepository(db)
        self.category_repo = CategoryRepository(db)
        self.brand_repo = BrandRepository(db)

    # Public reads

    def list(self, filters: ProductFilter, page: int, limit: int) -> Page[Product]:
        filters = filters.model_copy(update={"is_active": True})
        items, total = self.product_repo.search(filters, page, limit)
        return Page[Product].build(items, total, page, limit)

    def featured(self, limit: int = 10) -> List[Product]:
        return self.product_repo.featured(limit)

    def get(self, product_id: str) -> Product:
        product = self.product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found")
        return product

    def get_by_slug(self, slug: str) -> Product:
        product = self.product_repo.get_by_slug(slug)
        if product is None:
            raise NotFoundError(f"Product {slug} not found")
        return product

    def flash_sale(self) -> List[Product]:
        return self.product_repo.flash_sale()

    # Ownership

    def _vendor_for(self, user: User) -> Vendor:
        vendor = self.vendor_repo.get_by_user_id(user.id)
        if vendor is None:
            raise AuthorizationError("Vendor profile not found")
        return vendor

    def _get_managed(self, user: User, product_id: str) -> Product:
        """Load a product the caller may modify: any for admins, own for vendors."""
        product = self.get(product_id)
        if user.is_admin:
            return product
        vendor = self._vendor_for(user)
        if product.vendor_id != vendor.id:
            raise AuthorizationError("You can only manage your own products")
        return product

    def _ensure_references(
        self, category_id: Optional[str], brand_id: Optional[str]
    ) -> None:
        if category_id and self.category_repo.get_by_id(category_id) is None:
            raise NotFoundError(f"Category with ID {category_id} not found")
        if brand_id and self.brand_repo.get_by_id(brand_id) is None:
            raise NotFoundError(f"Brand with ID {brand_id} not found")

    # Management

    def create(self, user: User, request: ProductCreate) -> Product:
        data = request.model_dump()

        if user.is_admin:
            if not request.vendor_id:
                raise BadRequestError("vendor_id is required when an admin creates a product")
            if self.vendor_repo.get_by_id(request.vendor_id) is None:
                raise NotFoundError(f"Vendor with ID {request.vendor_id} not found")
        else:
            vendor = self._vendor_for(user)
            if vendor.status != VendorStatus.APPROVED:
                raise AuthorizationError("Vendor account is not approved")
            data["vendor_id"] = vendor.id

        self._ensure_references(request.category_id, request.brand_id)

        if self.product_repo.exists({"slug": request.slug}):
            raise ConflictError("Product with this slug already exists")
        if self.product_repo.exists({"sku": request.sku}):
            raise ConflictError("Product with this SKU already exists")

        product = self.product_repo.create(**data)
        logger.info(f"Created product {product.id} for vendor {product.vendor_id}")
        return product

    def update(self, user: User, product_id: str, request: ProductUpdate) -> Product:
        self._get_managed(user, product_id)
        changes = request.model_dump(exclude_unset=True)
        self._ensure_references(changes.get("category_id"), changes.get("brand_id"))
        return self.product_repo.update(product_id, **changes)

    def remove(self, user: User, product_id: str) -> MessageResponse:
        self._get_managed(user, product_id)
        self.product_repo.update(product_id, is_active=False)
        logger.info(f"Deactivated product {product_id}")
        return MessageResponse(message="Product deleted successfully")

    def update_stock(self, user: User, product_id: str, request: StockUpdate) -> Product:
        product = self._get_managed(user, product_id)
        new_stock = product.stock + request.quantity
        if new_stock < 0:
            raise BadRequestError(
                "Insufficient stock",
                details={"available": product.stock, "adjustment": request.quantity},
            )
        return self.product_repo.update(product_id, stock=new_stock)

    # Variants

    def list_variants(self, product_id: str) -> List[Variant]:
        self.get(product_id)
        return self.variant_repo.list_for_product(product_id)

    def _get_managed_variant(self, user: User, variant_id: str) -> Variant:
        variant = self.variant_repo.get_by_id(variant_id)
        if variant is None:
            raise NotFoundError(f"Variant with ID {variant_id} not found")
        self._get_managed(user, variant.product_id)
        return variant

    def create_variant(self, user: User, product_id: str, request: VariantCreate) -> Variant:
        self._get_managed(user, product_id)
        if self.variant_repo.exists({"sku": request.sku}):
            raise ConflictError("Variant with this SKU already exists")
        return self.variant_repo.create_for_product(product_id, **request.model_dump())

    def update_variant(self, user: User, variant_id: str, request: VariantUpdate) -> Variant:
        variant = self._get_managed_variant(user, variant_id)
        changes = request.model_dump(exclude_unset=True)
        if changes.get("sku") and changes["sku"] != variant.sku:
            if self.variant_repo.exists({"sku": changes["sku"]}):
                raise ConflictError("Variant with this SKU already exists")
        return self.variant_repo.update(variant_id, **changes)

    def delete_variant(self, user: User, variant_id: str) -> MessageResponse:
        self._get_managed_variant(user, variant_id)
        self.variant_repo.delete_variant(variant_id)
        return MessageResponse(message="Variant deleted successfully")

    # Flash sale

    def _managed_products(self, user: User, product_ids: List[str]) -> List[Product]:
        return [self._get_managed(user, product_id) for product_id in product_ids]

    def bulk_add_flash_sale(self, user: User, request: FlashSaleBulkAdd) -> BulkUpdateResponse:
        if request.sale_price is None and request.discount_percent is None:
            raise BadRequestError("Either sale_price or discount_percent is required")

        products = self._managed_products(user, request.product_ids)
        try:
            for product in products:
                if request.sale_price is not None:
                    sale_price = request.sale_price
                    if sale_price >= product.price:
                        raise BadRequestError(
                            f'Sale price must be lower than the regular price of "{product.name}"'
                        )
                    percent = request.discount_percent
                    if percent is None:
                        percent = round((product.price - sale_price) / product.price * 100)
                else:
                    percent = request.discount_percent
                    sale_price = money(product.price * (1 - percent / 100))

                self.product_repo.update(
                    product.id,
                    commit=False,
                    is_on_sale=True,
                    sale_price=sale_price,
                    discount_percent=percent,
                    sale_end_date=request.sale_end_date,
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Added {len(products)} products to flash sale")
        return BulkUpdateResponse(
            message=f"{len(products)} products added to flash sale",
            updated_count=len(products),
        )

    def bulk_remove_flash_sale(
        self, user: User, request: FlashSaleBulkRemove
    ) -> BulkUpdateResponse:
        products = self._managed_products(user, request.product_ids)
        try:
            for product in products:
                self.product_repo.update(
                    product.id,
                    commit=False,
                    is_on_sale=False,
                    sale_price=None,
                    discount_percent=None,
                    sale_end_date=None,
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return BulkUpdateResponse(
            message=f"{len(products)} products removed from flash sale",
            updated_count=len(products),
        )

    def set_discount(self, user: User, request: SetDiscountRequest) -> BulkUpdateResponse:
        products = self._managed_products(user, request.product_ids)
        try:
            for product in products:
                self.product_repo.update(
                    product.id,
                    commit=False,
                    is_on_sale=True,
                    discount_percent=request.discount_percent,
                    sale_price=money(product.price * (1 - request.discount_percent / 100)),
                    sale_end_date=request.sale_end_date,
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return BulkUpdateResponse(
            message=f"Discount applied to {len(products)} products",
            updated_count=len(products),
        )

    def my_flash_sales(self, user: User) -> List[Product]:
        vendor = self._vendor_for(user)
        return self.product_repo.flash_sale(vendor_id=vendor.id)
