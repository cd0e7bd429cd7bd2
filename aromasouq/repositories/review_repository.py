from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from aromasouq.models.product import Product as ProductModel
from aromasouq.models.review import Review as ReviewModel
from aromasouq.models.review import ReviewVote as ReviewVoteModel
from aromasouq.models.review import VoteType
from aromasouq.repositories.base import BaseRepository
from aromasouq.schemas.review import Review, ReviewFilter


class ReviewRepository(BaseRepository[ReviewModel, Review]):
    def __init__(self, db: Session):
        super().__init__(ReviewModel, Review, db)

    def get_for_user_and_product(self, user_id: str, product_id: str) -> Optional[Review]:
        row = (
            self.db.query(ReviewModel)
            .filter(ReviewModel.user_id == user_id, ReviewModel.product_id == product_id)
            .first()
        )
        return self._to_schema(row)

    def reviewed_product_ids(self, user_id: str, product_ids: List[str]) -> List[str]:
        if not product_ids:
            return []
        rows = (
            self.db.query(ReviewModel.product_id)
            .filter(ReviewModel.user_id == user_id, ReviewModel.product_id.in_(product_ids))
            .all()
        )
        return [product_id for (product_id,) in rows]

    def search(self, filters: ReviewFilter, page: int, limit: int) -> Tuple[List[Review], int]:
        query = self.db.query(ReviewModel)
        if filters.product_id:
            query = query.filter(ReviewModel.product_id == filters.product_id)
        if filters.rating is not None:
            query = query.filter(ReviewModel.rating == filters.rating)
        if filters.is_published is not None:
            query = query.filter(ReviewModel.is_published.is_(filters.is_published))
        return self.paginate(query.order_by(ReviewModel.created_at.desc()), page, limit)

    def rating_distribution(self, product_id: str) -> Dict[int, int]:
        rows = (
            self.db.query(ReviewModel.rating, func.count(ReviewModel.id))
            .filter(ReviewModel.product_id == product_id, ReviewModel.is_published.is_(True))
            .group_by(ReviewModel.rating)
            .all()
        )
        distribution = {rating: 0 for rating in range(1, 6)}
        for rating, count in rows:
            distribution[int(rating)] = int(count)
        return distribution

    def refresh_product_rating(self, product_id: str) -> None:
        """Recompute average_rating/review_count from published reviews. Does not commit."""
        average, count = (
            self.db.query(func.avg(ReviewModel.rating), func.count(ReviewModel.id))
            .filter(ReviewModel.product_id == product_id, ReviewModel.is_published.is_(True))
            .one()
        )
        product = self.db.get(ProductModel, product_id)
        if product is not None:
            product.average_rating = round(float(average or 0), 1)
            product.review_count = int(count or 0)
            self.db.flush()

    def get_vote(self, review_id: str, user_id: str) -> Optional[ReviewVoteModel]:
        return (
            self.db.query(ReviewVoteModel)
            .filter(ReviewVoteModel.review_id == review_id, ReviewVoteModel.user_id == user_id)
            .first()
        )

    def set_vote(self, review_id: str, user_id: str, vote_type: Optional[VoteType]) -> None:
        """Insert, switch or remove (vote_type=None) the user's vote. Does not commit."""
        vote = self.get_vote(review_id, user_id)
        if vote_type is None:
            if vote is not None:
                self.db.delete(vote)
        elif vote is None:
            self.db.add(ReviewVoteModel(review_id=review_id, user_id=user_id, vote_type=vote_type))
        else:
            vote.vote_type = vote_type
        self.db.flush()

        counts = dict(
            self.db.query(ReviewVoteModel.vote_type, func.count(ReviewVoteModel.id))
            .filter(ReviewVoteModel.review_id == review_id)
            .group_by(ReviewVoteModel.vote_type)
            .all()
        )
        review = self._get_model(review_id)
        review.helpful_count = int(counts.get(VoteType.HELPFUL, 0))
        review.not_helpful_count = int(counts.get(VoteType.NOT_HELPFUL, 0))
        self.db.flush()
