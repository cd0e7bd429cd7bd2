from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from aromasouq.schemas.product import ProductSummary


class WishlistAdd(BaseModel):
    product_id: str


class WishlistItem(BaseModel):
    id: str
    user_id: str
    product_id: str
    created_at: Optional[datetime] = None
    product: ProductSummary

    class Config:
        from_attributes = True
