"""
Product catalogue routes.

Public:
- GET /products, /products/featured, /products/flash-sale
- GET /products/slug/{slug}, /products/{id}, /products/{id}/variants

Vendor / admin (owner-checked for vendors):
- POST/PATCH/DELETE /products, PATCH /products/{id}/stock
- variants CRUD
- flash sale bulk operations
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from aromasouq.core.auth_middleware import require_vendor, require_vendor_or_admin
from aromasouq.deps import get_product_service, pagination_params
from aromasouq.models.product import ProductGender
from aromasouq.schemas.common import BulkUpdateResponse, MessageResponse
from aromasouq.schemas.pagination import Page, PaginationParams
from aromasouq.schemas.product import (
    FlashSaleBulkAdd,
    FlashSaleBulkRemove,
    Product,
    ProductCreate,
    ProductFilter,
    ProductSortField,
    ProductUpdate,
    SetDiscountRequest,
    SortOrder,
    StockUpdate,
    Variant,
    VariantCreate,
    VariantUpdate,
)
from aromasouq.schemas.user import User as UserSchema
from aromasouq.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=Page[Product])
def list_products(
    category_id: Optional[str] = Query(None),
    category_slug: Optional[str] = Query(None),
    brand_id: Optional[str] = Query(None),
    vendor_id: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    gender: Optional[ProductGender] = Query(None),
    is_featured: Optional[bool] = Query(None),
    sort_by: ProductSortField = Query(ProductSortField.CREATED_AT),
    order: SortOrder = Query(SortOrder.DESC),
    pagination: PaginationParams = Depends(pagination_params),
    product_service: ProductService = Depends(get_product_service),
) -> Page[Product]:
    filters = ProductFilter(
        category_id=category_id,
        category_slug=category_slug,
        brand_id=brand_id,
        vendor_id=vendor_id,
        search=search,
        min_price=min_price,
        max_price=max_price,
        gender=gender,
        is_featured=is_featured,
        sort_by=sort_by,
        order=order,
    )
    return product_service.list(filters, pagination.page, pagination.limit)


@router.get("/featured", response_model=List[Product])
def featured_products(
    limit: int = Query(10, ge=1, le=50),
    product_service: ProductService = Depends(get_product_service),
) -> List[Product]:
    return product_service.featured(limit)


@router.get("/flash-sale", response_model=List[Product])
def flash_sale_products(
    product_service: ProductService = Depends(get_product_service),
) -> List[Product]:
    return product_service.flash_sale()


@router.get("/flash-sale/my", response_model=List[Product])
def my_flash_sales(
    current_user: UserSchema = Depends(require_vendor),
    product_service: ProductService = Depends(get_product_service),
) -> List[Product]:
    return product_service.my_flash_sales(current_user)


@router.post("/flash-sale/bulk-add", response_model=BulkUpdateResponse)
def bulk_add_flash_sale(
    payload: FlashSaleBulkAdd,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    product_service: ProductService = Depends(get_product_service),
) -> BulkUpdateResponse:
    return product_service.bulk_add_flash_sale(current_user, payload)


@router.post("/flash-sale/bulk-remove", response_model=BulkUpdateResponse)
def bulk_remove_flash_sale(
    payload: FlashSaleBulkRemove,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    product_service: ProductService = Depends(get_product_service),
) -> BulkUpdateResponse:
    return product_service.bulk_remove_flash_sale(current_user, payload)


@router.post("/flash-sale/set-discount", response_model=BulkUpdateResponse)
def set_discount(
    payload: SetDiscountRequest,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    product_service: ProductService = Depends(get_product_service),
) -> BulkUpdateResponse:
    return product_service.set_discount(current_user, payload)


@router.get("/slug/{slug}", response_model=Product)
def get_product_by_slug(
    slug: str, product_service: ProductService = Depends(get_product_service)
) -> Product:
    return product_service.get_by_slug(slug)


@router.patch("/variants/{variant_id}", response_model=Variant)
def update_variant(
    variant_id: str,
    payload: VariantUpdate,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    product_service: ProductService = Depends(get_product_service),
) -> Variant:
    return product_service.update_variant(current_user, variant_id, payload)


@router.delete("/variants/{variant_id}", response_model=MessageResponse)
def delete_variant(
    variant_id: str,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    product_service: ProductService = Depends(get_product_service),
) -> MessageResponse:
    return product_service.delete_variant(current_user, variant_id)


@router.get("/{product_id}", response_model=Product)
def get_product(
    product_id: str, product_service: ProductService = Depends(get_product_service)
) -> Product:
    return product_service.get(product_id)


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    product_service: ProductService = Depends(get_product_service),
) -> Product:
    return product_service.create(current_user, payload)


@router.patch("/{product_id}", response_model=Product)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    product_service: ProductService = Depends(get_product_service),
) -> Product:
    return product_service.update(current_user, product_id, payload)


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: str,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    product_service: ProductService = Depends(get_product_service),
) -> MessageResponse:
    return product_service.remove(current_user, product_id)


@router.patch("/{product_id}/stock", response_model=Product)
def update_stock(
    product_id: str,
    payload: StockUpdate,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    product_service: ProductService = Depends(get_product_service),
) -> Product:
    return product_service.update_stock(current_user, product_id, payload)


@router.get("/{product_id}/variants", response_model=List[Variant])
def list_variants(
    product_id: str, product_service: ProductService = Depends(get_product_service)
) -> List[Variant]:
    return product_service.list_variants(product_id)


@router.post(
    "/{product_id}/variants", response_model=Variant, status_code=status.HTTP_201_CREATED
)
def create_variant(
    product_id: str,
    payload: VariantCreate,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    product_service: ProductService = Depends(get_product_service),
) -> Variant:
    return product_service.create_variant(current_user, product_id, payload)
