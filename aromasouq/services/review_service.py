import logging
from typing import Optional

from sqlalchemy.orm import Session

from aromasouq.config import Settings, get_settings
from aromasouq.core.exceptions import (
    AuthorizationError,
    BadRequestError,
    ConflictError,
    NotFoundError,
)
from aromasouq.models.wallet import CoinSource
from aromasouq.repositories.order_repository import OrderRepository
from aromasouq.repositories.product_repository import ProductRepository
from aromasouq.repositories.review_repository import ReviewRepository
from aromasouq.repositories.vendor_repository import VendorRepository
from aromasouq.schemas.common import MessageResponse
from aromasouq.schemas.pagination import Page
from aromasouq.schemas.review import (
    Review,
    ReviewCreate,
    ReviewFilter,
    ReviewStats,
    ReviewUpdate,
    ReviewVoteRequest,
    VendorReplyRequest,
)
from aromasouq.schemas.user import User
from aromasouq.services.wallet_service import WalletService
from aromasouq.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.review_repo = ReviewRepository(db)
        self.product_repo = ProductRepository(db)
        self.order_repo = OrderRepository(db)
        self.vendor_repo = VendorRepository(db)
        self.wallet_service = WalletService(db, self.settings)

    def _get(self, review_id: str) -> Review:
        review = self.review_repo.get_by_id(review_id)
        if review is None:
            raise NotFoundError(f"Review with ID {review_id} not found")
        return review

    def _get_own(self, user_id: str, review_id: str) -> Review:
        review = self._get(review_id)
        if review.user_id != user_id:
            raise AuthorizationError("You can only modify your own reviews")
        return review

    def create(self, user_id: str, request: ReviewCreate) -> Review:
        if self.product_repo.get_by_id(request.product_id) is None:
            raise NotFoundError(f"Product with ID {request.product_id} not found")
        if self.review_repo.get_for_user_and_product(user_id, request.product_id):
            raise ConflictError("You have already reviewed this product")
        if not self.order_repo.has_delivered_purchase(user_id, request.product_id):
            raise BadRequestError("You can only review products from delivered orders")

        try:
            review = self.review_repo.create(
                commit=False,
                user_id=user_id,
                is_verified_purchase=True,
                is_published=True,
                **request.model_dump(),
            )
            self.review_repo.refresh_product_rating(request.product_id)
            self.wallet_service.award(
                user_id,
                self.settings.REVIEW_REWARD_COINS,
                CoinSource.PRODUCT_REVIEW,
                "Coins earned for writing a review",
                ref_id=f"review:{review.id}:reward",
                review_id=review.id,
                commit=False,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"User {user_id} reviewed product {request.product_id} ({request.rating})")
        return review

    def list(self, filters: ReviewFilter, page: int, limit: int) -> Page[Review]:
        reviews, total = self.review_repo.search(filters, page, limit)
        return Page[Review].build(reviews, total, page, limit)

    def get(self, review_id: str) -> Review:
        return self._get(review_id)

    def update(self, user_id: str, review_id: str, request: ReviewUpdate) -> Review:
        review = self._get_own(user_id, review_id)
        try:
            updated = self.review_repo.update(
                review_id, commit=False, **request.model_dump(exclude_unset=True)
            )
            self.review_repo.refresh_product_rating(review.product_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return updated

    def remove(self, user_id: str, review_id: str) -> MessageResponse:
        review = self._get_own(user_id, review_id)
        try:
            self.review_repo.delete(review_id, commit=False)
            self.review_repo.refresh_product_rating(review.product_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return MessageResponse(message="Review deleted successfully")

    def vote(self, user_id: str, review_id: str, request: ReviewVoteRequest) -> Review:
        self._get(review_id)
        existing = self.review_repo.get_vote(review_id, user_id)
        # same vote again toggles it off
        vote_type = (
            None
            if existing is not None and existing.vote_type == request.vote_type
            else request.vote_type
        )
        try:
            self.review_repo.set_vote(review_id, user_id, vote_type)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return self._get(review_id)

    def reply(self, user: User, review_id: str, request: VendorReplyRequest) -> Review:
        review = self._get(review_id)
        if not user.is_admin:
            vendor = self.vendor_repo.get_by_user_id(user.id)
            product = self.product_repo.get_by_id(review.product_id)
            if vendor is None or product is None or product.vendor_id != vendor.id:
                raise AuthorizationError("You can only reply to reviews of your products")

        return self.review_repo.update(
            review_id, vendor_reply=request.vendor_reply, vendor_reply_at=utc_now()
        )

    def toggle_publish(self, review_id: str) -> Review:
        review = self._get(review_id)
        try:
            updated = self.review_repo.update(
                review_id, commit=False, is_published=not review.is_published
            )
            self.review_repo.refresh_product_rating(review.product_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Review {review_id} published={updated.is_published}")
        return updated

    def stats(self, product_id: str) -> ReviewStats:
        distribution = self.review_repo.rating_distribution(product_id)
        total = sum(distribution.values())
        average = (
            round(sum(rating * count for rating, count in distribution.items()) / total, 1)
            if total
            else 0.0
        )
        return ReviewStats(
            average_rating=average, total_reviews=total, rating_distribution=distribution
        )
