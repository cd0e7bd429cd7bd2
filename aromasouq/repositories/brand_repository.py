from typing import List

from sqlalchemy.orm import Session

from aromasouq.models.brand import Brand as BrandModel
from aromasouq.repositories.base import BaseRepository
from aromasouq.schemas.brand import Brand


class BrandRepository(BaseRepository[BrandModel, Brand]):
    def __init__(self, db: Session):
        super().__init__(BrandModel, Brand, db)

    def list_active(self) -> List[Brand]:
        return self.find_all(filters={"is_active": True}, order_by="name")
