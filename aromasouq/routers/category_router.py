from typing import List

from fastapi import APIRouter, Depends, status

from aromasouq.core.auth_middleware import require_admin
from aromasouq.deps import get_category_service
from aromasouq.schemas.category import Category, CategoryCreate, CategoryTree, CategoryUpdate
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.user import User as UserSchema
from aromasouq.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryTree])
def list_categories(
    category_service: CategoryService = Depends(get_category_service),
) -> List[CategoryTree]:
    return category_service.list()


@router.get("/{id_or_slug}", response_model=Category)
def get_category(
    id_or_slug: str,
    category_service: CategoryService = Depends(get_category_service),
) -> Category:
    return category_service.get(id_or_slug)


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    _: UserSchema = Depends(require_admin),
    category_service: CategoryService = Depends(get_category_service),
) -> Category:
    return category_service.create(payload)


@router.patch("/{category_id}", response_model=Category)
def update_category(
    category_id: str,
    payload: CategoryUpdate,
    _: UserSchema = Depends(require_admin),
    category_service: CategoryService = Depends(get_category_service),
) -> Category:
    return category_service.update(category_id, payload)


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: str,
    _: UserSchema = Depends(require_admin),
    category_service: CategoryService = Depends(get_category_service),
) -> MessageResponse:
    """Soft delete. Refused while the category has subcategories or products."""
    return category_service.remove(category_id)
