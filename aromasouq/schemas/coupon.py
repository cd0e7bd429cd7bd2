from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from aromasouq.models.coupon import DiscountType

COUPON_CODE_PATTERN = r"^[A-Z0-9_-]+$"


class CouponCreate(BaseModel):
    code: str = Field(..., min_length=3, max_length=50, pattern=COUPON_CODE_PATTERN)
    discount_type: DiscountType
    discount_value: float = Field(..., gt=0)
    min_order_amount: Optional[float] = Field(None, ge=0)
    max_discount: Optional[float] = Field(None, gt=0)
    usage_limit: Optional[int] = Field(None, ge=1)
    start_date: datetime
    end_date: datetime

    @field_validator("code", mode="before")
    @classmethod
    def normalize_code(cls, value):
        if isinstance(value, str):
            value = value.strip().upper()
        return value


class CouponUpdate(BaseModel):
    discount_value: Optional[float] = Field(None, gt=0)
    min_order_amount: Optional[float] = Field(None, ge=0)
    max_discount: Optional[float] = Field(None, gt=0)
    usage_limit: Optional[int] = Field(None, ge=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None


class Coupon(BaseModel):
    id: str
    code: str
    discount_type: DiscountType
    discount_value: float
    min_order_amount: Optional[float] = None
    max_discount: Optional[float] = None
    usage_limit: Optional[int] = None
    usage_count: int = 0
    start_date: datetime
    end_date: datetime
    is_active: bool
    vendor_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CouponValidateRequest(BaseModel):
    code: str = Field(..., min_length=1)
    order_amount: float = Field(..., ge=0)


class CouponValidation(BaseModel):
    valid: bool
    coupon: Coupon
    discount_amount: float
    final_amount: float
