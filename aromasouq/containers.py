from dependency_injector import containers, providers

from aromasouq.config import Settings
from aromasouq.services.address_service import AddressService
from aromasouq.services.admin_service import AdminService
from aromasouq.services.auth_service import AuthService
from aromasouq.services.brand_service import BrandService
from aromasouq.services.cart_service import CartService
from aromasouq.services.category_service import CategoryService
from aromasouq.services.checkout_service import CheckoutService
from aromasouq.services.coupon_service import CouponService
from aromasouq.services.order_service import OrderService
from aromasouq.services.product_service import ProductService
from aromasouq.services.review_service import ReviewService
from aromasouq.services.user_service import UserService
from aromasouq.services.vendor_service import VendorService
from aromasouq.services.wallet_service import WalletService
from aromasouq.services.wishlist_service import WishlistService


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(Settings)


class ServiceModule(containers.DeclarativeContainer):
    """Service layer. ``db`` is supplied per request by ``aromasouq.deps``."""

    config = providers.DependenciesContainer()

    auth_service = providers.Factory(AuthService, settings=config.config)
    user_service = providers.Factory(UserService, settings=config.config)
    address_service = providers.Factory(AddressService)
    category_service = providers.Factory(CategoryService)
    brand_service = providers.Factory(BrandService)
    product_service = providers.Factory(ProductService)
    cart_service = providers.Factory(CartService, settings=config.config)
    coupon_service = providers.Factory(CouponService)
    wallet_service = providers.Factory(WalletService, settings=config.config)
    order_service = providers.Factory(OrderService, settings=config.config)
    checkout_service = providers.Factory(CheckoutService, settings=config.config)
    review_service = providers.Factory(ReviewService, settings=config.config)
    wishlist_service = providers.Factory(WishlistService)
    vendor_service = providers.Factory(VendorService, settings=config.config)
    admin_service = providers.Factory(AdminService)


class Container(containers.DeclarativeContainer):
    """Application container."""

    config = providers.Container(ConfigModule)
    services = providers.Container(ServiceModule, config=config)
