from typing import List, Optional

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from aromasouq.models.coupon import Coupon as CouponModel
from aromasouq.repositories.base import BaseRepository
from aromasouq.schemas.coupon import Coupon
from aromasouq.utils.timezone_utils import utc_now


class CouponRepository(BaseRepository[CouponModel, Coupon]):
    def __init__(self, db: Session):
        super().__init__(CouponModel, Coupon, db)

    def get_by_code(self, code: str) -> Optional[Coupon]:
        return self.get_by_field("code", code.strip().upper())

    def list_active(self, vendor_id: Optional[str] = None) -> List[Coupon]:
        query = self.db.query(CouponModel).filter(CouponModel.is_active.is_(True))
        if vendor_id is not None:
            query = query.filter(CouponModel.vendor_id == vendor_id)
        return self._to_schemas(query.order_by(CouponModel.created_at.desc()).all())

    def list_public_for_vendor(self, vendor_id: str) -> List[Coupon]:
        now = utc_now()
        rows = (
            self.db.query(CouponModel)
            .filter(
                CouponModel.vendor_id == vendor_id,
                CouponModel.is_active.is_(True),
                CouponModel.start_date <= now,
                CouponModel.end_date >= now,
            )
            .order_by(CouponModel.end_date)
            .all()
        )
        return self._to_schemas(rows)

    def consume(self, coupon_id: str) -> bool:
        """Atomically take one use. False when the usage limit is already reached."""
        result = self.db.execute(
            update(CouponModel)
            .where(
                CouponModel.id == coupon_id,
                or_(
                    CouponModel.usage_limit.is_(None),
                    CouponModel.usage_count < CouponModel.usage_limit,
                ),
            )
            .values(usage_count=CouponModel.usage_count + 1)
            .execution_options(synchronize_session="fetch")
        )
        return (result.rowcount or 0) == 1
