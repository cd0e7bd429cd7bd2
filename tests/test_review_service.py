import pytest

from aromasouq.core.exceptions import AuthorizationError, BadRequestError, ConflictError
from aromasouq.models import Product, UserRole
from aromasouq.models.order import OrderStatus, PaymentMethod
from aromasouq.models.review import VoteType
from aromasouq.repositories.wallet_repository import WalletRepository
from aromasouq.schemas.cart import CartItemAdd
from aromasouq.schemas.order import OrderCreate, OrderStatusUpdate
from aromasouq.schemas.review import (
    ReviewCreate,
    ReviewUpdate,
    ReviewVoteRequest,
    VendorReplyRequest,
)
from aromasouq.services.cart_service import CartService
from aromasouq.services.order_service import OrderService
from aromasouq.services.review_service import ReviewService


@pytest.fixture
def review_service(db_session):
    return ReviewService(db_session)


@pytest.fixture
def vendor_pair(make_vendor):
    return make_vendor()


@pytest.fixture
def product(make_product, vendor_pair):
    return make_product(vendor_pair[1].id, price=50.0)


@pytest.fixture
def buyer(db_session, make_user, make_address, product):
    """A customer with a delivered order for ``product``."""
    user = make_user()
    address = make_address(user.id)
    admin = make_user(role=UserRole.ADMIN)
    CartService(db_session).add_item(user.id, CartItemAdd(product_id=product.id))
    order_service = OrderService(db_session)
    order = order_service.create(
        user.id, OrderCreate(address_id=address.id, payment_method=PaymentMethod.CARD)
    )
    for target in (
        OrderStatus.CONFIRMED,
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
    ):
        order_service.update_status(admin, order.id, OrderStatusUpdate(order_status=target))
    return user


class TestReviewService:
    def test_review_rewards_coins_and_updates_rating(
        self, db_session, review_service, buyer, product
    ):
        before = WalletRepository(db_session).get_balance(buyer.id)

        review = review_service.create(
            buyer.id, ReviewCreate(product_id=product.id, rating=4, comment="Long lasting")
        )

        assert review.is_verified_purchase is True
        assert WalletRepository(db_session).get_balance(buyer.id) == before + 10
        stored = db_session.get(Product, product.id)
        assert stored.average_rating == 4.0
        assert stored.review_count == 1

    def test_one_review_per_product(self, review_service, buyer, product):
        review_service.create(buyer.id, ReviewCreate(product_id=product.id, rating=5))

        with pytest.raises(ConflictError):
            review_service.create(buyer.id, ReviewCreate(product_id=product.id, rating=3))

    def test_purchase_required(self, review_service, make_user, product):
        stranger = make_user()

        with pytest.raises(BadRequestError, match="delivered orders"):
            review_service.create(stranger.id, ReviewCreate(product_id=product.id, rating=5))

    def test_update_recomputes_rating(self, db_session, review_service, buyer, product):
        review = review_service.create(buyer.id, ReviewCreate(product_id=product.id, rating=2))

        review_service.update(buyer.id, review.id, ReviewUpdate(rating=5))

        assert db_session.get(Product, product.id).average_rating == 5.0
        assert review_service.stats(product.id).rating_distribution[5] == 1

    def test_only_author_may_edit(self, review_service, buyer, product, make_user):
        review = review_service.create(buyer.id, ReviewCreate(product_id=product.id, rating=2))
        other = make_user()

        with pytest.raises(AuthorizationError):
            review_service.update(other.id, review.id, ReviewUpdate(rating=1))

    def test_repeated_vote_toggles_off(self, review_service, buyer, product, make_user):
        review = review_service.create(buyer.id, ReviewCreate(product_id=product.id, rating=4))
        voter = make_user()
        helpful = ReviewVoteRequest(vote_type=VoteType.HELPFUL)

        assert review_service.vote(voter.id, review.id, helpful).helpful_count == 1
        assert review_service.vote(voter.id, review.id, helpful).helpful_count == 0

    def test_vendor_reply_requires_ownership(
        self, review_service, buyer, product, vendor_pair, make_vendor
    ):
        review = review_service.create(buyer.id, ReviewCreate(product_id=product.id, rating=4))
        owner, _ = vendor_pair
        stranger, _ = make_vendor()

        replied = review_service.reply(owner, review.id, VendorReplyRequest(vendor_reply="Thank you!"))
        assert replied.vendor_reply == "Thank you!"
        assert replied.vendor_reply_at is not None

        with pytest.raises(AuthorizationError):
            review_service.reply(stranger, review.id, VendorReplyRequest(vendor_reply="Hi"))

    def test_unpublishing_drops_review_from_rating(self, db_session, review_service, buyer, product):
        review = review_service.create(buyer.id, ReviewCreate(product_id=product.id, rating=4))

        hidden = review_service.toggle_publish(review.id)

        assert hidden.is_published is False
        assert db_session.get(Product, product.id).review_count == 0
        assert review_service.stats(product.id).total_reviews == 0
