"""Money and coin arithmetic shared by the cart, orders and quick checkout."""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from aromasouq.config import Settings
from aromasouq.models.order import DeliveryMethod


def money(value: float) -> float:
    return round(value, 2)


@dataclass
class CartTotals:
    subtotal: float
    tax: float
    shipping: float
    total: float
    coins_earnable: int
    item_count: int


def line_subtotal(lines: Iterable[Tuple[float, int]]) -> float:
    """Σ unit_price × quantity"""
    return money(sum(price * quantity for price, quantity in lines))


def shipping_for_subtotal(subtotal: float, settings: Settings) -> float:
    if subtotal > settings.FREE_SHIPPING_THRESHOLD:
        return 0.0
    return settings.FLAT_SHIPPING_FEE


def delivery_fee(method: Optional[DeliveryMethod], settings: Settings) -> float:
    if method == DeliveryMethod.EXPRESS:
        return settings.EXPRESS_DELIVERY_FEE
    if method == DeliveryMethod.STANDARD:
        return settings.STANDARD_DELIVERY_FEE
    return 0.0


def gift_wrapping_fee(option: Optional[str], settings: Settings) -> float:
    if not option:
        return 0.0
    return float(settings.GIFT_WRAP_FEES.get(option, 0.0))


def coins_for_total(total: float, settings: Settings) -> int:
    """1 coin per COIN_EARN_DIVISOR currency units, rounded down."""
    if total <= 0:
        return 0
    return int(math.floor(total / settings.COIN_EARN_DIVISOR))


def coins_to_apply(
    coins_requested: int, subtotal: float, coupon_discount: float, settings: Settings
) -> int:
    """Whole coins usable on an order: at most MAX_COINS_DISCOUNT_RATIO of the
    post-coupon subtotal. One coin is worth one currency unit at checkout."""
    if coins_requested <= 0:
        return 0
    cap = max(subtotal - coupon_discount, 0.0) * settings.MAX_COINS_DISCOUNT_RATIO
    return int(math.floor(min(float(coins_requested), cap)))


def cart_totals(lines: Iterable[Tuple[float, int]], settings: Settings) -> CartTotals:
    lines = list(lines)
    subtotal = line_subtotal(lines)
    tax = money(subtotal * settings.TAX_RATE)
    shipping = shipping_for_subtotal(subtotal, settings) if lines else 0.0
    total = money(subtotal + tax + shipping)
    return CartTotals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=total,
        coins_earnable=coins_for_total(total, settings),
        item_count=sum(quantity for _, quantity in lines),
    )
