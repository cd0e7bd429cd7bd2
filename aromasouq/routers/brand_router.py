from typing import List

from fastapi import APIRouter, Depends, status

from aromasouq.core.auth_middleware import require_admin
from aromasouq.deps import get_brand_service
from aromasouq.schemas.brand import Brand, BrandCreate, BrandUpdate
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.user import User as UserSchema
from aromasouq.services.brand_service import BrandService

router = APIRouter(prefix="/brands", tags=["brands"])


@router.get("", response_model=List[Brand])
def list_brands(brand_service: BrandService = Depends(get_brand_service)) -> List[Brand]:
    return brand_service.list()


@router.get("/{slug}", response_model=Brand)
def get_brand(slug: str, brand_service: BrandService = Depends(get_brand_service)) -> Brand:
    return brand_service.get_by_slug(slug)


@router.post("", response_model=Brand, status_code=status.HTTP_201_CREATED)
def create_brand(
    payload: BrandCreate,
    _: UserSchema = Depends(require_admin),
    brand_service: BrandService = Depends(get_brand_service),
) -> Brand:
    return brand_service.create(payload)


@router.patch("/{brand_id}", response_model=Brand)
def update_brand(
    brand_id: str,
    payload: BrandUpdate,
    _: UserSchema = Depends(require_admin),
    brand_service: BrandService = Depends(get_brand_service),
) -> Brand:
    return brand_service.update(brand_id, payload)


@router.delete("/{brand_id}", response_model=MessageResponse)
def delete_brand(
    brand_id: str,
    _: UserSchema = Depends(require_admin),
    brand_service: BrandService = Depends(get_brand_service),
) -> MessageResponse:
    return brand_service.remove(brand_id)
