import logging
from typing import List

from sqlalchemy.orm import Session

from aromasouq.core.exceptions import ConflictError, NotFoundError
from aromasouq.repositories.brand_repository import BrandRepository
from aromasouq.schemas.brand import Brand, BrandCreate, BrandUpdate
from aromasouq.schemas.common import MessageResponse

logger = logging.getLogger(__name__)


class BrandService:
    def __init__(self, db: Session):
        self.db = db
        self.brand_repo = BrandRepository(db)

    def list(self) -> List[Brand]:
        return self.brand_repo.list_active()

    def get_by_slug(self, slug: str) -> Brand:
        brand = self.brand_repo.get_by_field("slug", slug)
        if brand is None:
            raise NotFoundError(f"Brand {slug} not found")
        return brand

    def create(self, request: BrandCreate) -> Brand:
        if self.brand_repo.exists({"slug": request.slug}):
            raise ConflictError("Brand with this slug already exists")
        brand = self.brand_repo.create(**request.model_dump())
        logger.info(f"Created brand {brand.id} ({brand.slug})")
        return brand

    def update(self, brand_id: str, request: BrandUpdate) -> Brand:
        brand = self.brand_repo.update(brand_id, **request.model_dump(exclude_unset=True))
        if brand is None:
            raise NotFoundError(f"Brand {brand_id} not found")
        return brand

    def remove(self, brand_id: str) -> MessageResponse:
        if self.brand_repo.update(brand_id, is_active=False) is None:
            raise NotFoundError(f"Brand {brand_id} not found")
        return MessageResponse(message="Brand deleted successfully")
