import pytest

from aromasouq.config import Settings
from aromasouq.models.order import DeliveryMethod
from aromasouq.services.pricing import (
    cart_totals,
    coins_for_total,
    coins_to_apply,
    delivery_fee,
    gift_wrapping_fee,
    line_subtotal,
)


@pytest.fixture
def pricing_settings():
    return Settings()


class TestCartTotals:
    def test_below_free_shipping_threshold(self, pricing_settings):
        totals = cart_totals([(100.0, 1)], pricing_settings)

        assert totals.subtotal == 100.0
        assert totals.tax == 5.0
        assert totals.shipping == 25.0
        assert totals.total == 130.0
        assert totals.coins_earnable == 13
        assert totals.item_count == 1

    def test_above_free_shipping_threshold(self, pricing_settings):
        totals = cart_totals([(125.0, 2)], pricing_settings)

        assert totals.subtotal == 250.0
        assert totals.tax == 12.5
        assert totals.shipping == 0.0
        assert totals.total == 262.5
        assert totals.coins_earnable == 26

    def test_threshold_is_exclusive(self, pricing_settings):
        totals = cart_totals([(200.0, 1)], pricing_settings)
        assert totals.shipping == 25.0

    def test_empty_cart_costs_nothing(self, pricing_settings):
        totals = cart_totals([], pricing_settings)

        assert totals.subtotal == 0.0
        assert totals.shipping == 0.0
        assert totals.total == 0.0
        assert totals.coins_earnable == 0
        assert totals.item_count == 0

    def test_subtotal_is_rounded_to_cents(self):
        assert line_subtotal([(19.99, 3), (0.1, 1)]) == 60.07


class TestCoins:
    def test_coins_round_down(self, pricing_settings):
        assert coins_for_total(129.99, pricing_settings) == 12
        assert coins_for_total(0, pricing_settings) == 0

    def test_coins_capped_at_half_of_post_coupon_subtotal(self, pricing_settings):
        assert coins_to_apply(500, 100.0, 0.0, pricing_settings) == 50
        assert coins_to_apply(500, 100.0, 20.0, pricing_settings) == 40

    def test_coins_below_cap_are_used_in_full(self, pricing_settings):
        assert coins_to_apply(30, 100.0, 20.0, pricing_settings) == 30
        assert coins_to_apply(0, 100.0, 0.0, pricing_settings) == 0


class TestQuickCheckoutFees:
    @pytest.mark.parametrize(
        "method, fee",
        [
            (DeliveryMethod.EXPRESS, 25.0),
            (DeliveryMethod.STANDARD, 15.0),
            (DeliveryMethod.PICKUP, 0.0),
        ],
    )
    def test_delivery_fee(self, pricing_settings, method, fee):
        assert delivery_fee(method, pricing_settings) == fee

    def test_gift_wrapping_fee(self, pricing_settings):
        assert gift_wrapping_fee("BASIC", pricing_settings) == 10.0
        assert gift_wrapping_fee("LUXURY", pricing_settings) == 35.0
        assert gift_wrapping_fee(None, pricing_settings) == 0.0
