import pytest

from aromasouq.core.exceptions import (
    AuthorizationError,
    BadRequestError,
    InsufficientBalanceError,
    InvalidStatusTransitionError,
)
from aromasouq.models import Product, ProductVariant, UserRole
from aromasouq.models.order import OrderStatus, PaymentMethod, PaymentStatus
from aromasouq.models.wallet import CoinSource
from aromasouq.repositories.wallet_repository import WalletRepository
from aromasouq.schemas.cart import CartItemAdd
from aromasouq.schemas.order import OrderAdvanceRequest, OrderCreate, OrderStatusUpdate
from aromasouq.services.cart_service import CartService
from aromasouq.services.order_service import OrderService, generate_order_number
from aromasouq.services.wallet_service import WalletService


@pytest.fixture
def order_service(db_session):
    return OrderService(db_session)


@pytest.fixture
def customer(make_user):
    return make_user(balance=100)


@pytest.fixture
def vendor_pair(make_vendor):
    return make_vendor()


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN)


@pytest.fixture
def address(make_address, customer):
    return make_address(customer.id)


@pytest.fixture
def product(make_product, vendor_pair):
    _, vendor = vendor_pair
    return make_product(vendor.id, price=100.0, stock=10)


def fill_cart(db_session, user_id, product_id, quantity=1, variant_id=None):
    CartService(db_session).add_item(
        user_id,
        CartItemAdd(product_id=product_id, variant_id=variant_id, quantity=quantity),
    )


def balance(db_session, user_id):
    return WalletRepository(db_session).get_balance(user_id)


def place(db_session, order_service, customer, address, product, quantity=2, coins=0):
    fill_cart(db_session, customer.id, product.id, quantity)
    return order_service.create(
        customer.id,
        OrderCreate(
            address_id=address.id,
            payment_method=PaymentMethod.CARD,
            coins_to_use=coins,
        ),
    )


def deliver(order_service, admin, order_id):
    for target in (
        OrderStatus.CONFIRMED,
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
    ):
        order = order_service.update_status(admin, order_id, OrderStatusUpdate(order_status=target))
    return order


def test_order_number_format():
    number = generate_order_number()
    prefix, millis, suffix = number.split("-")
    assert prefix == "ORD"
    assert millis.isdigit()
    assert len(suffix) == 9


class TestPlaceOrder:
    def test_create_snapshots_prices_and_takes_stock(
        self, db_session, order_service, customer, address, product
    ):
        order = place(db_session, order_service, customer, address, product, quantity=2, coins=20)

        assert order.order_status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.PENDING
        assert order.subtotal == 200.0
        assert order.tax == 10.0
        assert order.shipping_fee == 25.0
        assert order.coins_used == 20
        assert order.discount == 20.0
        assert order.total == 215.0
        assert order.coins_earned == 21
        assert order.items[0].price == 100.0
        assert order.items[0].total == 200.0

        assert db_session.get(Product, product.id).stock == 8
        assert db_session.get(Product, product.id).sales_count == 2
        assert balance(db_session, customer.id) == 80
        assert CartService(db_session).get_cart(customer.id).items == []

    def test_empty_cart_is_rejected(self, order_service, customer, address):
        with pytest.raises(BadRequestError, match="Cart is empty"):
            order_service.create(
                customer.id,
                OrderCreate(address_id=address.id, payment_method=PaymentMethod.CARD),
            )

    def test_insufficient_stock_leaves_nothing_behind(
        self, db_session, order_service, customer, address, make_product, vendor_pair
    ):
        scarce = make_product(vendor_pair[1].id, stock=1)

        with pytest.raises(BadRequestError, match="Insufficient stock"):
            place(db_session, order_service, customer, address, scarce, quantity=3)

        assert db_session.get(Product, scarce.id).stock == 1
        assert len(CartService(db_session).get_cart(customer.id).items) == 1

    def test_coins_beyond_balance_are_rejected(
        self, db_session, order_service, customer, address, product
    ):
        with pytest.raises(InsufficientBalanceError):
            place(db_session, order_service, customer, address, product, coins=500)
        assert balance(db_session, customer.id) == 100

    def test_foreign_address_is_rejected(
        self, db_session, order_service, customer, product, make_user, make_address
    ):
        other = make_user()
        foreign = make_address(other.id)

        with pytest.raises(BadRequestError, match="Address does not belong to user"):
            place(db_session, order_service, customer, foreign, product)

    def test_variant_line_takes_variant_stock(
        self, db_session, order_service, customer, address, make_product, vendor_pair
    ):
        product = make_product(vendor_pair[1].id, price=100.0, stock=10, variants=[(60.0, 4)])
        variant_id = product.variants[0].id
        fill_cart(db_session, customer.id, product.id, quantity=3, variant_id=variant_id)

        order = order_service.create(
            customer.id,
            OrderCreate(address_id=address.id, payment_method=PaymentMethod.CASH_ON_DELIVERY),
        )

        assert order.subtotal == 180.0
        assert db_session.get(ProductVariant, variant_id).stock == 1
        assert db_session.get(Product, product.id).stock == 10
        assert db_session.get(Product, product.id).sales_count == 3


class TestOrderLifecycle:
    def test_cannot_skip_to_delivered(
        self, db_session, order_service, customer, address, product, admin
    ):
        order = place(db_session, order_service, customer, address, product)

        with pytest.raises(InvalidStatusTransitionError):
            order_service.update_status(
                admin, order.id, OrderStatusUpdate(order_status=OrderStatus.DELIVERED)
            )
        assert order_service.get(customer.id, order.id).order_status == OrderStatus.PENDING

    def test_cancel_restores_stock_and_refunds_coins(
        self, db_session, order_service, customer, address, product
    ):
        order = place(db_session, order_service, customer, address, product, quantity=2, coins=20)

        cancelled = order_service.cancel(customer.id, order.id)

        assert cancelled.order_status == OrderStatus.CANCELLED
        assert cancelled.payment_status == PaymentStatus.REFUNDED
        assert cancelled.cancelled_at is not None
        assert db_session.get(Product, product.id).stock == 10
        assert db_session.get(Product, product.id).sales_count == 0
        assert balance(db_session, customer.id) == 100

        with pytest.raises(BadRequestError, match="Cannot cancel order with status CANCELLED"):
            order_service.cancel(customer.id, order.id)

    def test_customer_cannot_cancel_confirmed_order(
        self, db_session, order_service, customer, address, product, admin
    ):
        order = place(db_session, order_service, customer, address, product)
        order_service.update_status(
            admin, order.id, OrderStatusUpdate(order_status=OrderStatus.CONFIRMED)
        )

        with pytest.raises(BadRequestError):
            order_service.cancel(customer.id, order.id)

    def test_delivery_awards_coins_once(
        self, db_session, order_service, customer, address, product, admin
    ):
        order = place(db_session, order_service, customer, address, product, quantity=2)

        delivered = deliver(order_service, admin, order.id)

        assert delivered.order_status == OrderStatus.DELIVERED
        assert delivered.payment_status == PaymentStatus.PAID
        assert delivered.delivered_at is not None
        assert balance(db_session, customer.id) == 100 + order.coins_earned

        # replaying the award reference has no effect
        WalletService(db_session).award(
            customer.id,
            order.coins_earned,
            CoinSource.ORDER_PURCHASE,
            "replay",
            ref_id=f"order:{order.id}:earn",
        )
        assert balance(db_session, customer.id) == 100 + order.coins_earned

    def test_tracking_number_only_when_shipping(
        self, db_session, order_service, customer, address, product, admin
    ):
        order = place(db_session, order_service, customer, address, product)

        with pytest.raises(BadRequestError, match="Tracking number"):
            order_service.update_status(
                admin,
                order.id,
                OrderStatusUpdate(order_status=OrderStatus.CONFIRMED, tracking_number="TRK1"),
            )

    def test_get_reports_foreign_order(
        self, db_session, order_service, customer, address, product, make_user
    ):
        order = place(db_session, order_service, customer, address, product)
        other = make_user()

        with pytest.raises(BadRequestError, match="Order does not belong to user"):
            order_service.get(other.id, order.id)

    def test_list_filters_by_status(
        self, db_session, order_service, customer, address, product
    ):
        first = place(db_session, order_service, customer, address, product, quantity=1)
        place(db_session, order_service, customer, address, product, quantity=1)
        order_service.cancel(customer.id, first.id)

        page = order_service.list(customer.id, OrderStatus.CANCELLED, page=1, limit=10)

        assert page.meta.total == 1
        assert page.data[0].id == first.id


class TestVendorOrders:
    def test_advance_moves_one_step(
        self, db_session, order_service, customer, address, product, vendor_pair
    ):
        vendor_user, _ = vendor_pair
        order = place(db_session, order_service, customer, address, product)

        confirmed = order_service.advance(vendor_user, order.id, OrderAdvanceRequest())
        processing = order_service.advance(vendor_user, order.id, OrderAdvanceRequest())
        shipped = order_service.advance(
            vendor_user, order.id, OrderAdvanceRequest(tracking_number="TRK-42")
        )

        assert confirmed.order_status == OrderStatus.CONFIRMED
        assert processing.order_status == OrderStatus.PROCESSING
        assert shipped.order_status == OrderStatus.SHIPPED
        assert shipped.tracking_number == "TRK-42"

    def test_vendor_cannot_cancel(
        self, db_session, order_service, customer, address, product, vendor_pair
    ):
        vendor_user, _ = vendor_pair
        order = place(db_session, order_service, customer, address, product)

        with pytest.raises(BadRequestError, match="Vendors cannot cancel orders"):
            order_service.update_status(
                vendor_user, order.id, OrderStatusUpdate(order_status=OrderStatus.CANCELLED)
            )

    def test_other_vendor_is_forbidden(
        self, db_session, order_service, customer, address, product, make_vendor
    ):
        order = place(db_session, order_service, customer, address, product)
        stranger, _ = make_vendor()

        with pytest.raises(AuthorizationError):
            order_service.advance(stranger, order.id, OrderAdvanceRequest())

    def test_vendor_view_only_counts_own_items(
        self, db_session, order_service, customer, address, product, vendor_pair, make_vendor, make_product
    ):
        vendor_user, _ = vendor_pair
        _, other_vendor = make_vendor()
        foreign = make_product(other_vendor.id, price=40.0)
        fill_cart(db_session, customer.id, foreign.id, quantity=1)
        order = place(db_session, order_service, customer, address, product, quantity=1)

        view = order_service.get_for_vendor(vendor_user, order.id)

        assert len(view.items) == 2
        assert [item.product_id for item in view.vendor_items] == [product.id]
        assert view.vendor_total == 100.0
