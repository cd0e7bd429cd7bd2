from typing import List, Optional, Tuple

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from aromasouq.models.category import Category as CategoryModel
from aromasouq.models.product import Product as ProductModel
from aromasouq.models.product import ProductVariant as VariantModel
from aromasouq.repositories.base import BaseRepository
from aromasouq.schemas.product import (
    Product,
    ProductFilter,
    SortOrder,
    Variant,
    VendorProductStatus,
)
from aromasouq.utils.timezone_utils import utc_now


class ProductRepository(BaseRepository[ProductModel, Product]):
    def __init__(self, db: Session):
        super().__init__(ProductModel, Product, db)

    def get_by_slug(self, slug: str) -> Optional[Product]:
        return self.get_by_field("slug", slug)

    def search(
        self, filters: ProductFilter, page: int, limit: int
    ) -> Tuple[List[Product], int]:
        query = self.db.query(ProductModel)

        if filters.is_active is not None:
            query = query.filter(ProductModel.is_active.is_(filters.is_active))
        if filters.category_id:
            query = query.filter(ProductModel.category_id == filters.category_id)
        if filters.category_slug:
            query = query.join(CategoryModel, ProductModel.category).filter(
                CategoryModel.slug == filters.category_slug
            )
        if filters.brand_id:
            query = query.filter(ProductModel.brand_id == filters.brand_id)
        if filters.vendor_id:
            query = query.filter(ProductModel.vendor_id == filters.vendor_id)
        if filters.gender is not None:
            query = query.filter(ProductModel.gender == filters.gender)
        if filters.is_featured is not None:
            query = query.filter(ProductModel.is_featured.is_(filters.is_featured))
        if filters.min_price is not None:
            query = query.filter(ProductModel.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.filter(ProductModel.price <= filters.max_price)
        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.filter(
                or_(
                    ProductModel.name.ilike(pattern),
                    ProductModel.description.ilike(pattern),
                    ProductModel.sku.ilike(pattern),
                )
            )

        column = getattr(ProductModel, filters.sort_by.value)
        column = column.asc() if filters.order == SortOrder.ASC else column.desc()
        query = query.order_by(column, ProductModel.id)
        return self.paginate(query, page, limit)

    def vendor_products(
        self,
        vendor_id: str,
        status: VendorProductStatus,
        search: Optional[str],
        page: int,
        limit: int,
    ) -> Tuple[List[Product], int]:
        query = self.db.query(ProductModel).filter(ProductModel.vendor_id == vendor_id)
        if status == VendorProductStatus.ACTIVE:
            query = query.filter(ProductModel.is_active.is_(True))
        elif status == VendorProductStatus.INACTIVE:
            query = query.filter(ProductModel.is_active.is_(False))
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(ProductModel.name.ilike(pattern), ProductModel.sku.ilike(pattern))
            )
        return self.paginate(query.order_by(ProductModel.created_at.desc()), page, limit)

    def featured(self, limit: int = 10) -> List[Product]:
        rows = (
            self.db.query(ProductModel)
            .filter(ProductModel.is_active.is_(True), ProductModel.is_featured.is_(True))
            .order_by(ProductModel.sales_count.desc())
            .limit(limit)
            .all()
        )
        return self._to_schemas(rows)

    def flash_sale(self, vendor_id: Optional[str] = None) -> List[Product]:
        query = self.db.query(ProductModel).filter(ProductModel.is_on_sale.is_(True))
        if vendor_id is not None:
            query = query.filter(ProductModel.vendor_id == vendor_id)
        else:
            query = query.filter(
                ProductModel.is_active.is_(True),
                or_(
                    ProductModel.sale_end_date.is_(None),
                    ProductModel.sale_end_date > utc_now(),
                ),
            )
        return self._to_schemas(query.order_by(ProductModel.sale_end_date).all())

    def get_many(self, product_ids: List[str]) -> List[Product]:
        rows = self.db.query(ProductModel).filter(ProductModel.id.in_(product_ids)).all()
        return self._to_schemas(rows)

    def set_active_for_vendor(self, vendor_id: str, is_active: bool) -> int:
        """Flip is_active on every product of a vendor. Does not commit."""
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.vendor_id == vendor_id)
            .values(is_active=is_active)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """stock -= quantity only when enough is left. Does not commit."""
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(
                stock=ProductModel.stock - quantity,
                sales_count=ProductModel.sales_count + quantity,
            )
            .execution_options(synchronize_session="fetch")
        )
        return (result.rowcount or 0) == 1

    def adjust_sales_count(self, product_id: str, delta: int) -> None:
        self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(sales_count=ProductModel.sales_count + delta)
            .execution_options(synchronize_session="fetch")
        )

    def restore_stock(self, product_id: str, quantity: int) -> None:
        self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(
                stock=ProductModel.stock + quantity,
                sales_count=ProductModel.sales_count - quantity,
            )
            .execution_options(synchronize_session="fetch")
        )


class VariantRepository(BaseRepository[VariantModel, Variant]):
    def __init__(self, db: Session):
        super().__init__(VariantModel, Variant, db)

    def list_for_product(self, product_id: str) -> List[Variant]:
        return self.find_all(filters={"product_id": product_id}, order_by="price")

    def create_for_product(self, product_id: str, commit: bool = True, **kwargs) -> Variant:
        # Append through the relationship so a loaded product.variants stays in sync
        product = self.db.get(ProductModel, product_id)
        variant = VariantModel(**kwargs)
        product.variants.append(variant)
        self._finish(commit)
        self.db.refresh(variant)
        return self._to_schema(variant)

    def delete_variant(self, variant_id: str, commit: bool = True) -> bool:
        variant = self._get_model(variant_id)
        if variant is None:
            return False
        variant.product.variants.remove(variant)
        self._finish(commit)
        return True

    def decrement_stock(self, variant_id: str, quantity: int) -> bool:
        result = self.db.execute(
            update(VariantModel)
            .where(VariantModel.id == variant_id, VariantModel.stock >= quantity)
            .values(stock=VariantModel.stock - quantity)
            .execution_options(synchronize_session="fetch")
        )
        return (result.rowcount or 0) == 1

    def restore_stock(self, variant_id: str, quantity: int) -> None:
        self.db.execute(
            update(VariantModel)
            .where(VariantModel.id == variant_id)
            .values(stock=VariantModel.stock + quantity)
            .execution_options(synchronize_session="fetch")
        )
