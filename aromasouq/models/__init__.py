"""Importing this package registers every table on Base.metadata."""

from aromasouq.models.base import Base
from aromasouq.models.user import User, UserRole, UserStatus
from aromasouq.models.address import Address
from aromasouq.models.vendor import Vendor, VendorStatus
from aromasouq.models.category import Category
from aromasouq.models.brand import Brand
from aromasouq.models.product import Product, ProductGender, ProductVariant
from aromasouq.models.cart import Cart, CartItem
from aromasouq.models.order import (
    DeliveryMethod,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from aromasouq.models.wallet import (
    CoinSource,
    CoinTransaction,
    CoinTransactionType,
    Wallet,
)
from aromasouq.models.coupon import Coupon, DiscountType
from aromasouq.models.review import Review, ReviewVote, VoteType
from aromasouq.models.wishlist import WishlistItem

__all__ = [
    "Base",
    "User",
    "UserRole",
    "UserStatus",
    "Address",
    "Vendor",
    "VendorStatus",
    "Category",
    "Brand",
    "Product",
    "ProductGender",
    "ProductVariant",
    "Cart",
    "CartItem",
    "DeliveryMethod",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "CoinSource",
    "CoinTransaction",
    "CoinTransactionType",
    "Wallet",
    "Coupon",
    "DiscountType",
    "Review",
    "ReviewVote",
    "VoteType",
    "WishlistItem",
]
