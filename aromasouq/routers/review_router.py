from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from aromasouq.core.auth_middleware import (
    get_current_user,
    require_admin,
    require_vendor_or_admin,
)
from aromasouq.deps import get_review_service, pagination_params
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.pagination import Page, PaginationParams
from aromasouq.schemas.review import (
    Review,
    ReviewCreate,
    ReviewFilter,
    ReviewStats,
    ReviewUpdate,
    ReviewVoteRequest,
    VendorReplyRequest,
)
from aromasouq.schemas.user import User as UserSchema
from aromasouq.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=Review, status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    current_user: UserSchema = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
) -> Review:
    """Verified-purchase review. Awards coins to the author."""
    return review_service.create(current_user.id, payload)


@router.get("", response_model=Page[Review])
def list_reviews(
    product_id: Optional[str] = Query(None),
    rating: Optional[int] = Query(None, ge=1, le=5),
    pagination: PaginationParams = Depends(pagination_params),
    review_service: ReviewService = Depends(get_review_service),
) -> Page[Review]:
    filters = ReviewFilter(product_id=product_id, rating=rating, is_published=True)
    return review_service.list(filters, pagination.page, pagination.limit)


@router.get("/stats/{product_id}", response_model=ReviewStats)
def review_stats(
    product_id: str, review_service: ReviewService = Depends(get_review_service)
) -> ReviewStats:
    return review_service.stats(product_id)


@router.get("/{review_id}", response_model=Review)
def get_review(
    review_id: str, review_service: ReviewService = Depends(get_review_service)
) -> Review:
    return review_service.get(review_id)


@router.patch("/{review_id}", response_model=Review)
def update_review(
    review_id: str,
    payload: ReviewUpdate,
    current_user: UserSchema = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
) -> Review:
    return review_service.update(current_user.id, review_id, payload)


@router.delete("/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: str,
    current_user: UserSchema = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
) -> MessageResponse:
    return review_service.remove(current_user.id, review_id)


@router.post("/{review_id}/vote", response_model=Review)
def vote_review(
    review_id: str,
    payload: ReviewVoteRequest,
    current_user: UserSchema = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
) -> Review:
    return review_service.vote(current_user.id, review_id, payload)


@router.post("/{review_id}/reply", response_model=Review)
def reply_to_review(
    review_id: str,
    payload: VendorReplyRequest,
    current_user: UserSchema = Depends(require_vendor_or_admin),
    review_service: ReviewService = Depends(get_review_service),
) -> Review:
    return review_service.reply(current_user, review_id, payload)


@router.patch("/{review_id}/publish", response_model=Review)
def toggle_publish(
    review_id: str,
    _: UserSchema = Depends(require_admin),
    review_service: ReviewService = Depends(get_review_service),
) -> Review:
    return review_service.toggle_publish(review_id)
