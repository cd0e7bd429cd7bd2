from typing import List, Optional

from sqlalchemy.orm import Session

from aromasouq.models.category import Category as CategoryModel
from aromasouq.models.product import Product as ProductModel
from aromasouq.repositories.base import BaseRepository
from aromasouq.schemas.category import Category, CategoryTree


class CategoryRepository(BaseRepository[CategoryModel, Category]):
    def __init__(self, db: Session):
        super().__init__(CategoryModel, Category, db)

    def list_active_tree(self) -> List[CategoryTree]:
        rows = (
            self.db.query(CategoryModel)
            .filter(CategoryModel.is_active.is_(True))
            .order_by(CategoryModel.sort_order, CategoryModel.name)
            .all()
        )
        return [
            CategoryTree(
                **Category.model_validate(row).model_dump(),
                children=[
                    Category.model_validate(child)
                    for child in row.children
                    if child.is_active
                ],
            )
            for row in rows
        ]

    def get_by_slug(self, slug: str) -> Optional[Category]:
        return self.get_by_field("slug", slug)

    def child_count(self, category_id: str) -> int:
        return self.count({"parent_id": category_id, "is_active": True})

    def product_count(self, category_id: str) -> int:
        return (
            self.db.query(ProductModel)
            .filter(ProductModel.category_id == category_id)
            .count()
        )

    def ancestor_ids(self, category_id: str) -> List[str]:
        """Walk parent links upward from category_id (inclusive)."""
        seen: List[str] = []
        current = self._get_model(category_id)
        while current is not None and current.id not in seen:
            seen.append(current.id)
            current = current.parent
        return seen
