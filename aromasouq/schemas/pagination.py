import math
from typing import Generic, List, Sequence, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationParams(BaseModel):
    """page/limit query parameters"""

    page: int = Field(1, ge=1, description="1-based page number")
    limit: int = Field(20, ge=1, le=100, description="Items per page")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int = Field(..., alias="totalPages")

    class Config:
        populate_by_name = True


class Page(BaseModel, Generic[T]):
    """{data, meta{total, page, limit, totalPages}}"""

    data: List[T]
    meta: PaginationMeta

    @classmethod
    def build(cls, data: Sequence, total: int, page: int, limit: int) -> "Page":
        return cls(
            data=list(data),
            meta=PaginationMeta(
                total=total,
                page=page,
                limit=limit,
                total_pages=math.ceil(total / limit) if limit else 0,
            ),
        )


class PaginationLimits:
    DEFAULT_PAGE = 1
    DEFAULT_LIMIT = 20
    MAX_LIMIT = 100
