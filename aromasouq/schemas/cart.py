from typing import List, Optional

from pydantic import BaseModel, Field

from aromasouq.schemas.product import ProductSummary, Variant


class CartItemAdd(BaseModel):
    product_id: str
    variant_id: Optional[str] = None
    quantity: int = Field(1, ge=1)
    notes: Optional[str] = Field(None, max_length=500)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1)
    notes: Optional[str] = Field(None, max_length=500)


class CartItem(BaseModel):
    id: str
    cart_id: str
    product_id: str
    variant_id: Optional[str] = None
    quantity: int
    notes: Optional[str] = None
    product: ProductSummary
    variant: Optional[Variant] = None

    class Config:
        from_attributes = True

    @property
    def unit_price(self) -> float:
        """Live price: the variant's when present, otherwise the product's."""
        if self.variant is not None:
            return self.variant.price
        return self.product.price


class CartSummary(BaseModel):
    subtotal: float
    tax: float
    shipping: float
    total: float
    coins_earnable: int
    item_count: int


class Cart(BaseModel):
    id: str
    user_id: str
    items: List[CartItem] = Field(default_factory=list)

    class Config:
        from_attributes = True


class CartWithSummary(Cart):
    summary: CartSummary
