from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from aromasouq.models.order import (
    DeliveryMethod,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from aromasouq.schemas.address import Address


class OrderCreate(BaseModel):
    address_id: str
    payment_method: PaymentMethod
    coins_to_use: int = Field(0, ge=0)
    coupon_code: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    order_status: OrderStatus
    tracking_number: Optional[str] = Field(None, min_length=1, max_length=100)


class OrderAdvanceRequest(BaseModel):
    tracking_number: Optional[str] = Field(None, min_length=1, max_length=100)


class OrderItem(BaseModel):
    id: str
    product_id: str
    variant_id: Optional[str] = None
    product_name: str
    quantity: int
    price: float
    total: float
    has_reviewed: bool = False

    class Config:
        from_attributes = True


class Order(BaseModel):
    id: str
    order_number: str
    user_id: str
    address_id: str
    subtotal: float
    shipping_fee: float
    gift_wrapping_fee: float
    coupon_discount: float
    discount: float
    tax: float
    total: float
    coins_used: int
    coins_earned: int
    coupon_code: Optional[str] = None
    order_status: OrderStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    delivery_method: Optional[DeliveryMethod] = None
    gift_wrapping: Optional[str] = None
    tracking_number: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItem] = Field(default_factory=list)
    address: Optional[Address] = None

    class Config:
        from_attributes = True


class VendorOrder(Order):
    """Order as seen by one vendor: only its lines count toward vendor_total."""

    vendor_items: List[OrderItem] = Field(default_factory=list)
    vendor_total: float = 0.0


class OrderFilter(BaseModel):
    order_status: Optional[OrderStatus] = None
    user_id: Optional[str] = None
