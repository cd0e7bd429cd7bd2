import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from aromasouq.core.exceptions import BadRequestError, ConflictError, NotFoundError
from aromasouq.repositories.category_repository import CategoryRepository
from aromasouq.schemas.category import Category, CategoryCreate, CategoryTree, CategoryUpdate
from aromasouq.schemas.common import MessageResponse

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, db: Session):
        self.db = db
        self.category_repo = CategoryRepository(db)

    def list(self) -> List[CategoryTree]:
        return self.category_repo.list_active_tree()

    def get(self, id_or_slug: str) -> Category:
        category = self.category_repo.get_by_id(id_or_slug) or self.category_repo.get_by_slug(
            id_or_slug
        )
        if category is None:
            raise NotFoundError(f"Category {id_or_slug} not found")
        return category

    def _ensure_parent_exists(self, parent_id: Optional[str]) -> None:
        if parent_id and self.category_repo.get_by_id(parent_id) is None:
            raise BadRequestError("Parent category not found")

    def create(self, request: CategoryCreate) -> Category:
        if self.category_repo.get_by_slug(request.slug) is not None:
            raise ConflictError("Category with this slug already exists")
        self._ensure_parent_exists(request.parent_id)

        category = self.category_repo.create(**request.model_dump())
        logger.info(f"Created category {category.id} ({category.slug})")
        return category

    def update(self, category_id: str, request: CategoryUpdate) -> Category:
        if self.category_repo.get_by_id(category_id) is None:
            raise NotFoundError(f"Category {category_id} not found")

        changes = request.model_dump(exclude_unset=True)

        if changes.get("slug"):
            existing = self.category_repo.get_by_slug(changes["slug"])
            if existing is not None and existing.id != category_id:
                raise ConflictError("Category with this slug already exists")

        parent_id = changes.get("parent_id")
        if parent_id:
            if parent_id == category_id:
                raise BadRequestError("Category cannot be its own parent")
            self._ensure_parent_exists(parent_id)
            # the new parent must not sit below this category
            if category_id in self.category_repo.ancestor_ids(parent_id):
                raise BadRequestError("Cannot set parent: this would create a circular reference")

        return self.category_repo.update(category_id, **changes)

    def remove(self, category_id: str) -> MessageResponse:
        if self.category_repo.get_by_id(category_id) is None:
            raise NotFoundError(f"Category {category_id} not found")
        if self.category_repo.child_count(category_id) > 0:
            raise BadRequestError("Cannot delete category with subcategories")
        if self.category_repo.product_count(category_id) > 0:
            raise BadRequestError("Cannot delete category with products")

        self.category_repo.update(category_id, is_active=False)
        logger.info(f"Deactivated category {category_id}")
        return MessageResponse(message="Category deleted successfully")
