from typing import List, Optional

from sqlalchemy.orm import Session

from aromasouq.models.wishlist import WishlistItem as WishlistItemModel
from aromasouq.repositories.base import BaseRepository
from aromasouq.schemas.wishlist import WishlistItem


class WishlistRepository(BaseRepository[WishlistItemModel, WishlistItem]):
    def __init__(self, db: Session):
        super().__init__(WishlistItemModel, WishlistItem, db)

    def list_for_user(self, user_id: str) -> List[WishlistItem]:
        return self.find_all(filters={"user_id": user_id}, order_by="-created_at")

    def find(self, user_id: str, product_id: str) -> Optional[WishlistItem]:
        row = (
            self.db.query(WishlistItemModel)
            .filter(
                WishlistItemModel.user_id == user_id,
                WishlistItemModel.product_id == product_id,
            )
            .first()
        )
        return self._to_schema(row)
