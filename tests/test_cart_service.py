import pytest

from aromasouq.core.exceptions import BadRequestError, NotFoundError
from aromasouq.models.cart import Cart
from aromasouq.schemas.cart import CartItemAdd, CartItemUpdate
from aromasouq.services.cart_service import CartService


@pytest.fixture
def cart_service(db_session):
    return CartService(db_session)


@pytest.fixture
def customer(make_user):
    return make_user()


@pytest.fixture
def vendor(make_vendor):
    _, vendor = make_vendor()
    return vendor


class TestCartService:
    def test_summary_below_free_shipping(self, cart_service, customer, vendor, make_product):
        product = make_product(vendor.id, price=100.0)

        cart_service.add_item(customer.id, CartItemAdd(product_id=product.id, quantity=1))
        cart = cart_service.get_cart(customer.id)

        assert cart.summary.subtotal == 100.0
        assert cart.summary.tax == 5.0
        assert cart.summary.shipping == 25.0
        assert cart.summary.total == 130.0
        assert cart.summary.coins_earnable == 13

    def test_summary_with_free_shipping(self, cart_service, customer, vendor, make_product):
        product = make_product(vendor.id, price=125.0)

        cart_service.add_item(customer.id, CartItemAdd(product_id=product.id, quantity=2))
        summary = cart_service.get_cart(customer.id).summary

        assert (summary.subtotal, summary.tax, summary.shipping) == (250.0, 12.5, 0.0)
        assert summary.total == 262.5
        assert summary.coins_earnable == 26

    def test_empty_cart(self, cart_service, customer):
        cart = cart_service.get_cart(customer.id)

        assert cart.items == []
        assert cart.summary.total == 0.0
        assert cart.summary.shipping == 0.0

    def test_adding_same_product_merges_lines(self, cart_service, customer, vendor, make_product):
        product = make_product(vendor.id)

        cart_service.add_item(customer.id, CartItemAdd(product_id=product.id, quantity=1))
        merged = cart_service.add_item(customer.id, CartItemAdd(product_id=product.id, quantity=2))

        assert merged.quantity == 3
        assert len(cart_service.get_cart(customer.id).items) == 1

    def test_variant_price_is_used(self, cart_service, customer, vendor, make_product):
        product = make_product(vendor.id, price=100.0, variants=[(60.0, 5)])
        variant_id = product.variants[0].id

        cart_service.add_item(
            customer.id, CartItemAdd(product_id=product.id, variant_id=variant_id)
        )

        assert cart_service.get_cart(customer.id).summary.subtotal == 60.0

    def test_price_changes_show_in_next_read(
        self, db_session, cart_service, customer, vendor, make_product
    ):
        product = make_product(vendor.id, price=100.0, variants=[(60.0, 5)])
        variant = product.variants[0]
        cart_service.add_item(customer.id, CartItemAdd(product_id=product.id, quantity=2))
        cart_service.add_item(
            customer.id, CartItemAdd(product_id=product.id, variant_id=variant.id)
        )
        assert cart_service.get_cart(customer.id).summary.subtotal == 260.0

        product.price = 80.0
        variant.price = 50.0
        db_session.commit()

        summary = cart_service.get_cart(customer.id).summary
        assert summary.subtotal == 210.0
        assert summary.shipping == 0.0

    def test_get_cart_creates_cart_once(self, db_session, cart_service, customer):
        first = cart_service.get_cart(customer.id)
        second = cart_service.get_cart(customer.id)

        assert first.id == second.id
        assert db_session.query(Cart).filter(Cart.user_id == customer.id).count() == 1
        assert first.summary == second.summary

    def test_inactive_product_is_rejected(self, cart_service, customer, vendor, make_product):
        product = make_product(vendor.id, is_active=False)

        with pytest.raises(BadRequestError, match="Product is not available"):
            cart_service.add_item(customer.id, CartItemAdd(product_id=product.id))

    def test_unknown_variant_is_rejected(self, cart_service, customer, vendor, make_product):
        product = make_product(vendor.id)

        with pytest.raises(NotFoundError):
            cart_service.add_item(
                customer.id, CartItemAdd(product_id=product.id, variant_id="nope")
            )

    def test_update_foreign_item(self, cart_service, customer, vendor, make_product, make_user):
        product = make_product(vendor.id)
        other = make_user()
        item = cart_service.add_item(other.id, CartItemAdd(product_id=product.id))

        with pytest.raises(BadRequestError, match="Cart item does not belong to user"):
            cart_service.update_item(customer.id, item.id, CartItemUpdate(quantity=5))

    def test_remove_item_and_clear(self, cart_service, customer, vendor, make_product):
        first = make_product(vendor.id)
        second = make_product(vendor.id)
        item = cart_service.add_item(customer.id, CartItemAdd(product_id=first.id))
        cart_service.add_item(customer.id, CartItemAdd(product_id=second.id))

        cart_service.remove_item(customer.id, item.id)
        assert len(cart_service.get_cart(customer.id).items) == 1

        result = cart_service.clear_cart(customer.id)
        assert result.message == "Cart cleared successfully"
        assert cart_service.get_cart(customer.id).items == []

    def test_clear_without_cart(self, cart_service, customer):
        with pytest.raises(NotFoundError, match="Cart not found"):
            cart_service.clear_cart(customer.id)
