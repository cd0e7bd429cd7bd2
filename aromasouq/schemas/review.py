from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field

from aromasouq.models.review import VoteType


class ReviewCreate(BaseModel):
    product_id: str
    rating: int = Field(..., ge=1, le=5)
    title: Optional[str] = Field(None, max_length=200)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = Field(None, max_length=200)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewVoteRequest(BaseModel):
    vote_type: VoteType


class VendorReplyRequest(BaseModel):
    vendor_reply: str = Field(..., min_length=1, max_length=1000)


class ReviewAuthor(BaseModel):
    id: str
    first_name: str
    last_name: str
    avatar: Optional[str] = None

    class Config:
        from_attributes = True


class Review(BaseModel):
    id: str
    user_id: str
    product_id: str
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    is_verified_purchase: bool
    is_published: bool
    helpful_count: int = 0
    not_helpful_count: int = 0
    vendor_reply: Optional[str] = None
    vendor_reply_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    user: Optional[ReviewAuthor] = None

    class Config:
        from_attributes = True


class ReviewStats(BaseModel):
    average_rating: float
    total_reviews: int
    rating_distribution: Dict[int, int]


class ReviewFilter(BaseModel):
    product_id: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    is_published: Optional[bool] = True
