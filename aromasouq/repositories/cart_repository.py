from typing import Optional

from sqlalchemy.orm import Session

from aromasouq.models.cart import Cart as CartModel
from aromasouq.models.cart import CartItem as CartItemModel
from aromasouq.repositories.base import BaseRepository
from aromasouq.schemas.cart import Cart, CartItem


class CartRepository(BaseRepository[CartModel, Cart]):
    """Cart rows are mutated through Cart.items so the collection stays in sync."""

    def __init__(self, db: Session):
        super().__init__(CartModel, Cart, db)

    def _get_cart_model(self, user_id: str) -> Optional[CartModel]:
        return self.db.query(CartModel).filter(CartModel.user_id == user_id).first()

    def get_for_user(self, user_id: str) -> Optional[Cart]:
        return self._to_schema(self._get_cart_model(user_id))

    def get_or_create(self, user_id: str, commit: bool = True) -> Cart:
        cart = self._get_cart_model(user_id)
        if cart is None:
            cart = CartModel(user_id=user_id)
            self.db.add(cart)
            self._finish(commit)
        return self._to_schema(cart)

    def get_item_owner(self, item_id: str) -> Optional[str]:
        item = self.db.get(CartItemModel, item_id)
        return item.cart.user_id if item is not None else None

    def find_line(
        self, cart_id: str, product_id: str, variant_id: Optional[str]
    ) -> Optional[CartItem]:
        query = self.db.query(CartItemModel).filter(
            CartItemModel.cart_id == cart_id, CartItemModel.product_id == product_id
        )
        if variant_id is None:
            query = query.filter(CartItemModel.variant_id.is_(None))
        else:
            query = query.filter(CartItemModel.variant_id == variant_id)
        item = query.first()
        return CartItem.model_validate(item) if item is not None else None

    def add_item(
        self,
        cart_id: str,
        product_id: str,
        variant_id: Optional[str],
        quantity: int,
        notes: Optional[str],
        commit: bool = True,
    ) -> CartItem:
        cart = self.db.get(CartModel, cart_id)
        item = CartItemModel(
            product_id=product_id,
            variant_id=variant_id,
            quantity=quantity,
            notes=notes,
        )
        cart.items.append(item)
        self._finish(commit)
        self.db.refresh(item)
        return CartItem.model_validate(item)

    def update_item(self, item_id: str, commit: bool = True, **kwargs) -> Optional[CartItem]:
        item = self.db.get(CartItemModel, item_id)
        if item is None:
            return None
        for key, value in kwargs.items():
            setattr(item, key, value)
        self._finish(commit)
        return CartItem.model_validate(item)

    def remove_item(self, item_id: str, commit: bool = True) -> bool:
        item = self.db.get(CartItemModel, item_id)
        if item is None:
            return False
        item.cart.items.remove(item)
        self._finish(commit)
        return True

    def clear(self, cart_id: str, commit: bool = True) -> int:
        cart = self.db.get(CartModel, cart_id)
        removed = len(cart.items)
        cart.items.clear()
        self._finish(commit)
        return removed
