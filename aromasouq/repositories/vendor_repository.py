from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from aromasouq.models.vendor import Vendor as VendorModel
from aromasouq.repositories.base import BaseRepository
from aromasouq.schemas.vendor import Vendor, VendorFilter


class VendorRepository(BaseRepository[VendorModel, Vendor]):
    def __init__(self, db: Session):
        super().__init__(VendorModel, Vendor, db)

    def get_by_user_id(self, user_id: str) -> Optional[Vendor]:
        return self.get_by_field("user_id", user_id)

    def search(self, filters: VendorFilter, page: int, limit: int) -> Tuple[List[Vendor], int]:
        query = self.db.query(VendorModel)
        if filters.status is not None:
            query = query.filter(VendorModel.status == filters.status)
        return self.paginate(query.order_by(VendorModel.created_at.desc()), page, limit)
