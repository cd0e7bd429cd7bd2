import logging
from typing import List

from sqlalchemy.orm import Session

from aromasouq.core.exceptions import ConflictError, NotFoundError
from aromasouq.repositories.product_repository import ProductRepository
from aromasouq.repositories.wishlist_repository import WishlistRepository
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.wishlist import WishlistItem

logger = logging.getLogger(__name__)


class WishlistService:
    def __init__(self, db: Session):
        self.db = db
        self.wishlist_repo = WishlistRepository(db)
        self.product_repo = ProductRepository(db)

    def list(self, user_id: str) -> List[WishlistItem]:
        return self.wishlist_repo.list_for_user(user_id)

    def add(self, user_id: str, product_id: str) -> WishlistItem:
        product = self.product_repo.get_by_id(product_id)
        if product is None or not product.is_active:
            raise NotFoundError(f"Product with ID {product_id} not found")
        if self.wishlist_repo.find(user_id, product_id) is not None:
            raise ConflictError("Product already in wishlist")
        return self.wishlist_repo.create(user_id=user_id, product_id=product_id)

    def remove(self, user_id: str, product_id: str) -> MessageResponse:
        item = self.wishlist_repo.find(user_id, product_id)
        if item is None:
            raise NotFoundError("Product not in wishlist")
        self.wishlist_repo.delete(item.id)
        return MessageResponse(message="Product removed from wishlist")
