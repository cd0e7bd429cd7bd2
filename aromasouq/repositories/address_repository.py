from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from aromasouq.models.address import Address as AddressModel
from aromasouq.repositories.base import BaseRepository
from aromasouq.schemas.address import Address


class AddressRepository(BaseRepository[AddressModel, Address]):
    def __init__(self, db: Session):
        super().__init__(AddressModel, Address, db)

    def list_for_user(self, user_id: str) -> List[Address]:
        rows = (
            self.db.query(AddressModel)
            .filter(AddressModel.user_id == user_id)
            .order_by(
                AddressModel.is_default.desc(),
                AddressModel.created_at.desc(),
                AddressModel.id.desc(),
            )
            .all()
        )
        return self._to_schemas(rows)

    def count_for_user(self, user_id: str) -> int:
        return self.count({"user_id": user_id})

    def clear_defaults(self, user_id: str, exclude_id: Optional[str] = None) -> int:
        """Unset is_default for every address of the user. Does not commit."""
        stmt = (
            update(AddressModel)
            .where(AddressModel.user_id == user_id, AddressModel.is_default.is_(True))
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )
        if exclude_id is not None:
            stmt = stmt.where(AddressModel.id != exclude_id)
        result = self.db.execute(stmt)
        return result.rowcount or 0

    def most_recent_other(self, user_id: str, exclude_id: str) -> Optional[Address]:
        """Newest remaining address (ties broken by id). Used to promote a new default."""
        row = (
            self.db.query(AddressModel)
            .filter(AddressModel.user_id == user_id, AddressModel.id != exclude_id)
            .order_by(AddressModel.created_at.desc(), AddressModel.id.desc())
            .first()
        )
        return self._to_schema(row)
