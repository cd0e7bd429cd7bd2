from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from aromasouq.models.order import DeliveryMethod, PaymentMethod


class GiftWrapping(str, Enum):
    BASIC = "BASIC"
    PREMIUM = "PREMIUM"
    LUXURY = "LUXURY"


class QuickCheckoutRequest(BaseModel):
    product_id: str
    variant_id: Optional[str] = None
    quantity: int = Field(1, ge=1)
    address_id: str
    delivery_method: DeliveryMethod = DeliveryMethod.STANDARD
    payment_method: PaymentMethod
    gift_wrapping: Optional[GiftWrapping] = None
    coupon_code: Optional[str] = None
    coins_to_use: int = Field(0, ge=0)


class QuickCheckoutResponse(BaseModel):
    id: str
    order_number: str
