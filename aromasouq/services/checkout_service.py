import logging
from typing import Optional

from sqlalchemy.orm import Session

from aromasouq.config import Settings, get_settings
from aromasouq.core.exceptions import BadRequestError, NotFoundError
from aromasouq.repositories.product_repository import ProductRepository, VariantRepository
from aromasouq.schemas.checkout import QuickCheckoutRequest, QuickCheckoutResponse
from aromasouq.services.order_service import OrderLine, OrderPricing, OrderService
from aromasouq.services.pricing import (
    coins_for_total,
    delivery_fee,
    gift_wrapping_fee,
    line_subtotal,
    money,
)

logger = logging.getLogger(__name__)


class CheckoutService:
    """Single-product "buy now" that bypasses the cart"""

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.product_repo = ProductRepository(db)
        self.variant_repo = VariantRepository(db)
        self.order_service = OrderService(db, self.settings)

    def _build_line(self, request: QuickCheckoutRequest) -> OrderLine:
        product = self.product_repo.get_by_id(request.product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {request.product_id} not found")
        if not product.is_active:
            raise BadRequestError("Product is not available")

        variant = None
        if request.variant_id:
            variant = self.variant_repo.get_by_id(request.variant_id)
            if variant is None or variant.product_id != product.id:
                raise NotFoundError(f"Variant with ID {request.variant_id} not found")

        line = OrderLine(product=product, variant=variant, quantity=request.quantity)
        self.order_service.ensure_available(line)
        return line

    def price(self, user_id: str, line: OrderLine, request: QuickCheckoutRequest):
        subtotal = line_subtotal([(line.unit_price, line.quantity)])
        coupon, coupon_discount = self.order_service.resolve_coupon(
            request.coupon_code, subtotal
        )
        coins_used = self.order_service.resolve_coins(
            user_id, request.coins_to_use, subtotal, coupon_discount
        )

        shipping = delivery_fee(request.delivery_method, self.settings)
        gift_option = request.gift_wrapping.value if request.gift_wrapping else None
        gift_fee = gift_wrapping_fee(gift_option, self.settings)
        discount = money(coupon_discount + coins_used)
        taxable = subtotal - discount + shipping + gift_fee
        tax = money(taxable * self.settings.TAX_RATE)
        total = money(taxable + tax)

        pricing = OrderPricing(
            subtotal=subtotal,
            shipping_fee=shipping,
            gift_wrapping_fee=gift_fee,
            coupon_discount=coupon_discount,
            coins_used=coins_used,
            discount=discount,
            tax=tax,
            total=total,
            coins_earned=coins_for_total(total, self.settings),
        )
        return pricing, coupon

    def quick_checkout(self, user_id: str, request: QuickCheckoutRequest) -> QuickCheckoutResponse:
        self.order_service.get_owned_address(user_id, request.address_id)
        line = self._build_line(request)
        pricing, coupon = self.price(user_id, line, request)

        order = self.order_service.place_order(
            user_id,
            request.address_id,
            [line],
            pricing,
            request.payment_method,
            coupon=coupon,
            delivery_method=request.delivery_method,
            gift_wrapping=request.gift_wrapping.value if request.gift_wrapping else None,
        )
        logger.info(f"Quick checkout {order.order_number} for user {user_id}")
        return QuickCheckoutResponse(id=order.id, order_number=order.order_number)
