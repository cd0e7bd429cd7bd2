from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from aromasouq.models.product import ProductGender
from aromasouq.schemas.category import SLUG_PATTERN


class ProductSortField(str, Enum):
    CREATED_AT = "created_at"
    PRICE = "price"
    NAME = "name"
    SALES_COUNT = "sales_count"
    AVERAGE_RATING = "average_rating"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class VendorProductStatus(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    slug: str = Field(..., min_length=2, max_length=220, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    sku: str = Field(..., min_length=2, max_length=100)
    price: float = Field(..., gt=0)
    compare_at_price: Optional[float] = Field(None, gt=0)
    stock: int = Field(0, ge=0)
    low_stock_alert: int = Field(5, ge=0)
    category_id: str
    brand_id: Optional[str] = None
    vendor_id: Optional[str] = Field(None, description="Required when an admin creates a product")
    gender: Optional[ProductGender] = None
    scent_family: Optional[str] = None
    product_type: Optional[str] = None
    concentration: Optional[str] = None
    size: Optional[str] = None
    is_featured: bool = False


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    compare_at_price: Optional[float] = Field(None, gt=0)
    low_stock_alert: Optional[int] = Field(None, ge=0)
    category_id: Optional[str] = None
    brand_id: Optional[str] = None
    gender: Optional[ProductGender] = None
    scent_family: Optional[str] = None
    product_type: Optional[str] = None
    concentration: Optional[str] = None
    size: Optional[str] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None


class StockUpdate(BaseModel):
    quantity: int = Field(..., description="Signed stock adjustment")


class VariantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    sku: str = Field(..., min_length=2, max_length=100)
    price: float = Field(..., gt=0)
    stock: int = Field(0, ge=0)


class VariantUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    sku: Optional[str] = Field(None, min_length=2, max_length=100)
    price: Optional[float] = Field(None, gt=0)
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class Variant(BaseModel):
    id: str
    product_id: str
    name: str
    sku: str
    price: float
    stock: int
    is_active: bool

    class Config:
        from_attributes = True


class ProductSummary(BaseModel):
    id: str
    name: str
    slug: str
    price: float
    stock: int
    vendor_id: str
    is_active: bool
    is_on_sale: bool = False
    sale_price: Optional[float] = None

    class Config:
        from_attributes = True


class Product(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    sku: str
    price: float
    compare_at_price: Optional[float] = None
    stock: int
    low_stock_alert: int
    category_id: str
    brand_id: Optional[str] = None
    vendor_id: str
    gender: Optional[ProductGender] = None
    scent_family: Optional[str] = None
    product_type: Optional[str] = None
    concentration: Optional[str] = None
    size: Optional[str] = None
    is_active: bool
    is_featured: bool
    is_on_sale: bool
    sale_price: Optional[float] = None
    discount_percent: Optional[int] = None
    sale_end_date: Optional[datetime] = None
    sales_count: int = 0
    average_rating: float = 0.0
    review_count: int = 0
    variants: List[Variant] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductFilter(BaseModel):
    """Catalogue search predicates. Every field narrows the result set."""

    category_id: Optional[str] = None
    category_slug: Optional[str] = None
    brand_id: Optional[str] = None
    vendor_id: Optional[str] = None
    search: Optional[str] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    gender: Optional[ProductGender] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = True
    sort_by: ProductSortField = ProductSortField.CREATED_AT
    order: SortOrder = SortOrder.DESC


class FlashSaleBulkAdd(BaseModel):
    product_ids: List[str] = Field(..., min_length=1)
    sale_price: Optional[float] = Field(None, gt=0)
    discount_percent: Optional[int] = Field(None, ge=1, le=99)
    sale_end_date: Optional[datetime] = None


class FlashSaleBulkRemove(BaseModel):
    product_ids: List[str] = Field(..., min_length=1)


class SetDiscountRequest(BaseModel):
    product_ids: List[str] = Field(..., min_length=1)
    discount_percent: int = Field(..., ge=1, le=99)
    sale_end_date: Optional[datetime] = None


class ProductStatusUpdate(BaseModel):
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
