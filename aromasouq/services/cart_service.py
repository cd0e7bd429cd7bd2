"""
Cart service.

Prices are never stored on cart rows: every read prices the lines from the
live product/variant rows, so a price change affects carts not yet checked out.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from aromasouq.config import Settings, get_settings
from aromasouq.core.exceptions import BadRequestError, NotFoundError
from aromasouq.repositories.cart_repository import CartRepository
from aromasouq.repositories.product_repository import ProductRepository, VariantRepository
from aromasouq.schemas.cart import (
    Cart,
    CartItem,
    CartItemAdd,
    CartItemUpdate,
    CartSummary,
    CartWithSummary,
)
from aromasouq.schemas.common import MessageResponse
from aromasouq.services.pricing import cart_totals

logger = logging.getLogger(__name__)


class CartService:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.cart_repo = CartRepository(db)
        self.product_repo = ProductRepository(db)
        self.variant_repo = VariantRepository(db)

    def summarize(self, cart: Cart) -> CartSummary:
        totals = cart_totals(
            ((item.unit_price, item.quantity) for item in cart.items), self.settings
        )
        return CartSummary(
            subtotal=totals.subtotal,
            tax=totals.tax,
            shipping=totals.shipping,
            total=totals.total,
            coins_earnable=totals.coins_earnable,
            item_count=totals.item_count,
        )

    def get_cart(self, user_id: str) -> CartWithSummary:
        cart = self.cart_repo.get_or_create(user_id)
        return CartWithSummary(**cart.model_dump(), summary=self.summarize(cart))

    def add_item(self, user_id: str, request: CartItemAdd) -> CartItem:
        product = self.product_repo.get_by_id(request.product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {request.product_id} not found")
        if not product.is_active:
            raise BadRequestError("Product is not available")

        if request.variant_id:
            variant = self.variant_repo.get_by_id(request.variant_id)
            if variant is None or variant.product_id != product.id:
                raise NotFoundError(f"Variant with ID {request.variant_id} not found")
            if not variant.is_active:
                raise BadRequestError("Variant is not available")

        cart = self.cart_repo.get_or_create(user_id)
        existing = self.cart_repo.find_line(cart.id, product.id, request.variant_id)
        if existing is not None:
            return self.cart_repo.update_item(
                existing.id, quantity=existing.quantity + request.quantity
            )

        item = self.cart_repo.add_item(
            cart.id, product.id, request.variant_id, request.quantity, request.notes
        )
        logger.info(f"User {user_id} added product {product.id} x{request.quantity} to cart")
        return item

    def _ensure_owned_item(self, user_id: str, item_id: str) -> None:
        owner_id = self.cart_repo.get_item_owner(item_id)
        if owner_id is None:
            raise NotFoundError("Cart item not found")
        if owner_id != user_id:
            raise BadRequestError("Cart item does not belong to user")

    def update_item(self, user_id: str, item_id: str, request: CartItemUpdate) -> CartItem:
        self._ensure_owned_item(user_id, item_id)
        return self.cart_repo.update_item(item_id, **request.model_dump(exclude_unset=True))

    def remove_item(self, user_id: str, item_id: str) -> MessageResponse:
        self._ensure_owned_item(user_id, item_id)
        self.cart_repo.remove_item(item_id)
        return MessageResponse(message="Item removed from cart")

    def clear_cart(self, user_id: str) -> MessageResponse:
        cart = self.cart_repo.get_for_user(user_id)
        if cart is None:
            raise NotFoundError("Cart not found")
        self.cart_repo.clear(cart.id)
        return MessageResponse(message="Cart cleared successfully")
