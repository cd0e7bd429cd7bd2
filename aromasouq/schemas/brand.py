from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from aromasouq.schemas.category import SLUG_PATTERN


class BrandCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    slug: str = Field(..., min_length=2, max_length=120, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    logo: Optional[str] = None


class BrandUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    logo: Optional[str] = None
    is_active: Optional[bool] = None


class Brand(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    logo: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
