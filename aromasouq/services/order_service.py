"""
Order service.

Placing an order is one transaction: the order and its price snapshot, the
stock decrements, coupon consumption, the coin spend and (for cart checkout)
the cart clear either all commit or all roll back.

Status changes read the persisted status and go through the allow-list in
``order_status``.
"""

import logging
import secrets
import string
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from aromasouq.config import Settings, get_settings
from aromasouq.core.exceptions import (
    AuthorizationError,
    BadRequestError,
    InsufficientBalanceError,
    NotFoundError,
)
from aromasouq.models.order import (
    DeliveryMethod,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from aromasouq.models.wallet import CoinSource
from aromasouq.repositories.address_repository import AddressRepository
from aromasouq.repositories.cart_repository import CartRepository
from aromasouq.repositories.order_repository import OrderRepository
from aromasouq.repositories.product_repository import ProductRepository, VariantRepository
from aromasouq.repositories.review_repository import ReviewRepository
from aromasouq.repositories.vendor_repository import VendorRepository
from aromasouq.repositories.wallet_repository import WalletRepository
from aromasouq.schemas.address import Address
from aromasouq.schemas.coupon import Coupon
from aromasouq.schemas.order import (
    Order,
    OrderAdvanceRequest,
    OrderCreate,
    OrderFilter,
    OrderStatusUpdate,
    VendorOrder,
)
from aromasouq.schemas.pagination import Page
from aromasouq.schemas.product import Product, Variant
from aromasouq.schemas.user import User
from aromasouq.schemas.vendor import Vendor
from aromasouq.services.coupon_service import CouponService, compute_discount
from aromasouq.services.order_status import ensure_order_transition, next_order_status
from aromasouq.services.pricing import (
    coins_for_total,
    coins_to_apply,
    line_subtotal,
    money,
    shipping_for_subtotal,
)
from aromasouq.services.wallet_service import WalletService
from aromasouq.utils.timezone_utils import epoch_millis, utc_now

logger = logging.getLogger(__name__)

_ORDER_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_number() -> str:
    suffix = "".join(secrets.choice(_ORDER_SUFFIX_ALPHABET) for _ in range(9))
    return f"ORD-{epoch_millis()}-{suffix}"


@dataclass
class OrderLine:
    product: Product
    variant: Optional[Variant]
    quantity: int

    @property
    def unit_price(self) -> float:
        return self.variant.price if self.variant is not None else self.product.price

    @property
    def available_stock(self) -> int:
        return self.variant.stock if self.variant is not None else self.product.stock


@dataclass
class OrderPricing:
    subtotal: float
    shipping_fee: float
    gift_wrapping_fee: float
    coupon_discount: float
    coins_used: int
    discount: float
    tax: float
    total: float
    coins_earned: int


class OrderService:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.order_repo = OrderRepository(db)
        self.address_repo = AddressRepository(db)
        self.cart_repo = CartRepository(db)
        self.product_repo = ProductRepository(db)
        self.variant_repo = VariantRepository(db)
        self.review_repo = ReviewRepository(db)
        self.vendor_repo = VendorRepository(db)
        self.wallet_repo = WalletRepository(db)
        self.coupon_service = CouponService(db)
        self.wallet_service = WalletService(db, self.settings)

    # Shared placement steps (also used by quick checkout)

    def get_owned_address(self, user_id: str, address_id: str) -> Address:
        address = self.address_repo.get_by_id(address_id)
        if address is None:
            raise NotFoundError(f"Address with ID {address_id} not found")
        if address.user_id != user_id:
            raise BadRequestError("Address does not belong to user")
        return address

    @staticmethod
    def ensure_available(line: OrderLine) -> None:
        if not line.product.is_active:
            raise BadRequestError(f'Product "{line.product.name}" is no longer available')
        if line.variant is not None and not line.variant.is_active:
            raise BadRequestError("Variant is not available")
        if line.available_stock < line.quantity:
            raise BadRequestError(
                f'Insufficient stock for "{line.product.name}". '
                f"Available: {line.available_stock}, Requested: {line.quantity}"
            )

    def resolve_coupon(
        self, code: Optional[str], subtotal: float
    ) -> Tuple[Optional[Coupon], float]:
        if not code:
            return None, 0.0
        coupon = self.coupon_service.check(code, subtotal)
        return coupon, compute_discount(coupon, subtotal)

    def resolve_coins(
        self, user_id: str, coins_requested: int, subtotal: float, coupon_discount: float
    ) -> int:
        if coins_requested <= 0:
            return 0
        balance = self.wallet_repo.get_balance(user_id)
        if balance < coins_requested:
            raise InsufficientBalanceError(
                f"Insufficient coins balance. Available: {balance}, Required: {coins_requested}",
                details={"available": balance, "required": coins_requested},
            )
        return coins_to_apply(coins_requested, subtotal, coupon_discount, self.settings)

    def price_cart_order(
        self, user_id: str, lines: List[OrderLine], request: OrderCreate
    ) -> Tuple[OrderPricing, Optional[Coupon]]:
        subtotal = line_subtotal((line.unit_price, line.quantity) for line in lines)
        coupon, coupon_discount = self.resolve_coupon(request.coupon_code, subtotal)
        coins_used = self.resolve_coins(
            user_id, request.coins_to_use, subtotal, coupon_discount
        )

        tax = money(subtotal * self.settings.TAX_RATE)
        shipping = shipping_for_subtotal(subtotal, self.settings)
        discount = money(coupon_discount + coins_used)
        total = money(subtotal + tax + shipping - discount)
        pricing = OrderPricing(
            subtotal=subtotal,
            shipping_fee=shipping,
            gift_wrapping_fee=0.0,
            coupon_discount=coupon_discount,
            coins_used=coins_used,
            discount=discount,
            tax=tax,
            total=total,
            coins_earned=coins_for_total(total, self.settings),
        )
        return pricing, coupon

    def place_order(
        self,
        user_id: str,
        address_id: str,
        lines: List[OrderLine],
        pricing: OrderPricing,
        payment_method: PaymentMethod,
        coupon: Optional[Coupon] = None,
        delivery_method: Optional[DeliveryMethod] = None,
        gift_wrapping: Optional[str] = None,
        clear_cart_id: Optional[str] = None,
    ) -> Order:
        """Persist the order and every side effect in one transaction."""
        items = [
            dict(
                product_id=line.product.id,
                variant_id=line.variant.id if line.variant else None,
                product_name=line.product.name,
                quantity=line.quantity,
                price=line.unit_price,
                total=money(line.unit_price * line.quantity),
            )
            for line in lines
        ]

        try:
            order = self.order_repo.create_with_items(
                items,
                commit=False,
                order_number=generate_order_number(),
                user_id=user_id,
                address_id=address_id,
                subtotal=pricing.subtotal,
                shipping_fee=pricing.shipping_fee,
                gift_wrapping_fee=pricing.gift_wrapping_fee,
                coupon_discount=pricing.coupon_discount,
                discount=pricing.discount,
                tax=pricing.tax,
                total=pricing.total,
                coins_used=pricing.coins_used,
                coins_earned=pricing.coins_earned,
                coupon_code=coupon.code if coupon else None,
                order_status=OrderStatus.PENDING,
                payment_method=payment_method,
                payment_status=PaymentStatus.PENDING,
                delivery_method=delivery_method,
                gift_wrapping=gift_wrapping,
            )

            for line in lines:
                self._take_stock(line)

            if coupon is not None:
                self.coupon_service.consume(coupon)

            if pricing.coins_used > 0:
                self.wallet_service.spend(
                    user_id,
                    pricing.coins_used,
                    f"Coins used for order {order.order_number}",
                    ref_id=f"order:{order.id}:spend",
                    order_id=order.id,
                    commit=False,
                )

            if clear_cart_id is not None:
                self.cart_repo.clear(clear_cart_id, commit=False)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Order {order.order_number} placed by user {user_id}: total={pricing.total} "
            f"coins_used={pricing.coins_used}"
        )
        return self.order_repo.get_by_id(order.id)

    def _take_stock(self, line: OrderLine) -> None:
        if line.variant is not None:
            taken = self.variant_repo.decrement_stock(line.variant.id, line.quantity)
            if taken:
                self.product_repo.adjust_sales_count(line.product.id, line.quantity)
        else:
            taken = self.product_repo.decrement_stock(line.product.id, line.quantity)
        if not taken:
            # stock moved between validation and the write
            raise BadRequestError(f'Insufficient stock for "{line.product.name}"')

    def _return_stock(self, order: Order) -> None:
        for item in order.items:
            if item.variant_id:
                self.variant_repo.restore_stock(item.variant_id, item.quantity)
                self.product_repo.adjust_sales_count(item.product_id, -item.quantity)
            else:
                self.product_repo.restore_stock(item.product_id, item.quantity)

    # Customer operations

    def create(self, user_id: str, request: OrderCreate) -> Order:
        self.get_owned_address(user_id, request.address_id)

        cart = self.cart_repo.get_for_user(user_id)
        if cart is None or not cart.items:
            raise BadRequestError("Cart is empty")

        lines = []
        for item in cart.items:
            product = self.product_repo.get_by_id(item.product_id)
            variant = self.variant_repo.get_by_id(item.variant_id) if item.variant_id else None
            line = OrderLine(product=product, variant=variant, quantity=item.quantity)
            self.ensure_available(line)
            lines.append(line)

        pricing, coupon = self.price_cart_order(user_id, lines, request)
        return self.place_order(
            user_id,
            request.address_id,
            lines,
            pricing,
            request.payment_method,
            coupon=coupon,
            clear_cart_id=cart.id,
        )

    def list(self, user_id: str, order_status: Optional[OrderStatus], page: int, limit: int) -> Page[Order]:
        filters = OrderFilter(user_id=user_id, order_status=order_status)
        orders, total = self.order_repo.search(filters, page, limit)
        return Page[Order].build(orders, total, page, limit)

    def _get_owned_order(self, user_id: str, order_id: str) -> Order:
        order = self.order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order with ID {order_id} not found")
        if order.user_id != user_id:
            raise BadRequestError("Order does not belong to user")
        return order

    def get(self, user_id: str, order_id: str) -> Order:
        order = self._get_owned_order(user_id, order_id)
        reviewed = set(
            self.review_repo.reviewed_product_ids(
                user_id, [item.product_id for item in order.items]
            )
        )
        for item in order.items:
            item.has_reviewed = item.product_id in reviewed
        return order

    def cancel(self, user_id: str, order_id: str) -> Order:
        order = self._get_owned_order(user_id, order_id)
        if order.order_status != OrderStatus.PENDING:
            raise BadRequestError(
                f"Cannot cancel order with status {order.order_status.value}"
            )
        return self._transition(order_id, OrderStatus.CANCELLED)

    # Admin / vendor operations

    def _vendor_for(self, user: User) -> Vendor:
        vendor = self.vendor_repo.get_by_user_id(user.id)
        if vendor is None:
            raise AuthorizationError("Vendor profile not found")
        return vendor

    def _ensure_vendor_order(self, vendor: Vendor, order_id: str) -> List[str]:
        product_ids = self.order_repo.vendor_product_ids(order_id, vendor.id)
        if not product_ids:
            raise AuthorizationError("This order does not contain your products")
        return product_ids

    def update_status(self, user: User, order_id: str, request: OrderStatusUpdate) -> Order:
        if self.order_repo.get_by_id(order_id) is None:
            raise NotFoundError(f"Order with ID {order_id} not found")

        if not user.is_admin:
            vendor = self._vendor_for(user)
            self._ensure_vendor_order(vendor, order_id)
            if request.order_status == OrderStatus.CANCELLED:
                raise BadRequestError("Vendors cannot cancel orders")

        return self._transition(order_id, request.order_status, request.tracking_number)

    def advance(self, user: User, order_id: str, request: OrderAdvanceRequest) -> Order:
        """Move a vendor order one step along the forward chain."""
        order = self.order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order with ID {order_id} not found")
        self._ensure_vendor_order(self._vendor_for(user), order_id)

        target = next_order_status(order.order_status)
        if target is None:
            raise BadRequestError(
                f"Order with status {order.order_status.value} cannot be advanced"
            )
        return self._transition(order_id, target, request.tracking_number)

    def _transition(
        self, order_id: str, target: OrderStatus, tracking_number: Optional[str] = None
    ) -> Order:
        try:
            order = self.order_repo.get_for_update(order_id)
            ensure_order_transition(order.order_status, target)
            if tracking_number and target != OrderStatus.SHIPPED:
                raise BadRequestError("Tracking number can only be set when shipping an order")

            now = utc_now()
            changes = {"order_status": target}
            if target == OrderStatus.CONFIRMED:
                changes.update(confirmed_at=now, payment_status=PaymentStatus.PAID)
            elif target == OrderStatus.SHIPPED:
                changes["shipped_at"] = now
                if tracking_number:
                    changes["tracking_number"] = tracking_number
            elif target == OrderStatus.DELIVERED:
                changes["delivered_at"] = now
                if order.coins_earned > 0:
                    self.wallet_service.award(
                        order.user_id,
                        order.coins_earned,
                        CoinSource.ORDER_PURCHASE,
                        f"Coins earned from order {order.order_number}",
                        ref_id=f"order:{order.id}:earn",
                        order_id=order.id,
                        commit=False,
                    )
            elif target == OrderStatus.CANCELLED:
                changes.update(cancelled_at=now, payment_status=PaymentStatus.REFUNDED)
                self._return_stock(order)
                if order.coins_used > 0:
                    self.wallet_service.refund(
                        order.user_id,
                        order.coins_used,
                        f"Coins refunded for cancelled order {order.order_number}",
                        ref_id=f"order:{order.id}:refund",
                        order_id=order.id,
                        commit=False,
                    )

            updated = self.order_repo.update(order_id, commit=False, **changes)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Order {updated.order_number} moved {order.order_status.value} -> {target.value}"
        )
        return updated

    # Vendor views

    def _vendor_view(self, vendor: Vendor, order: Order) -> VendorOrder:
        product_ids = set(self.order_repo.vendor_product_ids(order.id, vendor.id))
        vendor_items = [item for item in order.items if item.product_id in product_ids]
        return VendorOrder(
            **order.model_dump(),
            vendor_items=vendor_items,
            vendor_total=money(sum(item.total for item in vendor_items)),
        )

    def list_for_vendor(
        self, user: User, order_status: Optional[OrderStatus], page: int, limit: int
    ) -> Page[VendorOrder]:
        vendor = self._vendor_for(user)
        orders, total = self.order_repo.search_for_vendor(vendor.id, order_status, page, limit)
        return Page[VendorOrder].build(
            [self._vendor_view(vendor, order) for order in orders], total, page, limit
        )

    def get_for_vendor(self, user: User, order_id: str) -> VendorOrder:
        vendor = self._vendor_for(user)
        order = self.order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order with ID {order_id} not found")
        self._ensure_vendor_order(vendor, order_id)
        return self._vendor_view(vendor, order)

    def search(self, filters: OrderFilter, page: int, limit: int) -> Page[Order]:
        orders, total = self.order_repo.search(filters, page, limit)
        return Page[Order].build(orders, total, page, limit)
