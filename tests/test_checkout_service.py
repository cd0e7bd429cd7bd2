from datetime import timedelta

import pytest

from aromasouq.core.exceptions import BadRequestError, NotFoundError
from aromasouq.models import Product
from aromasouq.models.coupon import DiscountType
from aromasouq.models.order import DeliveryMethod, PaymentMethod
from aromasouq.repositories.coupon_repository import CouponRepository
from aromasouq.repositories.order_repository import OrderRepository
from aromasouq.schemas.checkout import GiftWrapping, QuickCheckoutRequest
from aromasouq.services.checkout_service import CheckoutService
from aromasouq.utils.timezone_utils import utc_now


@pytest.fixture
def checkout_service(db_session):
    return CheckoutService(db_session)


@pytest.fixture
def customer(make_user):
    return make_user(balance=100)


@pytest.fixture
def address(make_address, customer):
    return make_address(customer.id)


@pytest.fixture
def product(make_vendor, make_product):
    _, vendor = make_vendor()
    return make_product(vendor.id, price=100.0, stock=5)


def request_for(product, address, **overrides):
    data = dict(
        product_id=product.id,
        address_id=address.id,
        quantity=1,
        payment_method=PaymentMethod.CARD,
    )
    data.update(overrides)
    return QuickCheckoutRequest(**data)


class TestQuickCheckout:
    def test_express_with_gift_wrap(self, db_session, checkout_service, customer, address, product):
        result = checkout_service.quick_checkout(
            customer.id,
            request_for(
                product,
                address,
                delivery_method=DeliveryMethod.EXPRESS,
                gift_wrapping=GiftWrapping.BASIC,
            ),
        )

        assert result.order_number.startswith("ORD-")
        order = OrderRepository(db_session).get_by_id(result.id)
        assert order.subtotal == 100.0
        assert order.shipping_fee == 25.0
        assert order.gift_wrapping_fee == 10.0
        assert order.tax == 6.75
        assert order.total == 141.75
        assert order.coins_earned == 14
        assert order.gift_wrapping == "BASIC"
        assert db_session.get(Product, product.id).stock == 4

    def test_pickup_with_coupon_and_coins(
        self, db_session, checkout_service, customer, address, product
    ):
        now = utc_now()
        CouponRepository(db_session).create(
            code="TEN",
            discount_type=DiscountType.FIXED,
            discount_value=10.0,
            usage_limit=1,
            start_date=now - timedelta(days=1),
            end_date=now + timedelta(days=1),
        )

        result = checkout_service.quick_checkout(
            customer.id,
            request_for(
                product,
                address,
                delivery_method=DeliveryMethod.PICKUP,
                coupon_code="TEN",
                coins_to_use=20,
            ),
        )

        order = OrderRepository(db_session).get_by_id(result.id)
        assert order.coupon_discount == 10.0
        assert order.coins_used == 20
        assert order.discount == 30.0
        assert order.tax == 3.5
        assert order.total == 73.5
        assert order.coupon_code == "TEN"
        assert CouponRepository(db_session).get_by_code("TEN").usage_count == 1

    def test_quantity_above_stock(self, checkout_service, customer, address, product):
        with pytest.raises(BadRequestError, match="Insufficient stock"):
            checkout_service.quick_checkout(customer.id, request_for(product, address, quantity=6))

    def test_unknown_product(self, checkout_service, customer, address):
        request = QuickCheckoutRequest(
            product_id="missing", address_id=address.id, payment_method=PaymentMethod.CARD
        )
        with pytest.raises(NotFoundError):
            checkout_service.quick_checkout(customer.id, request)
