# Repository layer - data access returning pydantic schemas

from .base import BaseRepository
from .user_repository import UserRepository
from .address_repository import AddressRepository
from .category_repository import CategoryRepository
from .brand_repository import BrandRepository
from .product_repository import ProductRepository, VariantRepository
from .cart_repository import CartRepository
from .coupon_repository import CouponRepository
from .wallet_repository import WalletRepository
from .order_repository import OrderRepository
from .review_repository import ReviewRepository
from .wishlist_repository import WishlistRepository
from .vendor_repository import VendorRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "AddressRepository",
    "CategoryRepository",
    "BrandRepository",
    "ProductRepository",
    "VariantRepository",
    "CartRepository",
    "CouponRepository",
    "WalletRepository",
    "OrderRepository",
    "ReviewRepository",
    "WishlistRepository",
    "VendorRepository",
]
