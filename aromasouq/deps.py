from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from aromasouq.database.session import get_db
from aromasouq.schemas.pagination import PaginationLimits, PaginationParams
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


def _services(request: Request):
    return request.app.container.services


def pagination_params(
    page: int = Query(PaginationLimits.DEFAULT_PAGE, ge=1),
    limit: int = Query(
        PaginationLimits.DEFAULT_LIMIT, ge=1, le=PaginationLimits.MAX_LIMIT
    ),
) -> PaginationParams:
    return PaginationParams(page=page, limit=limit)


def get_auth_service(request: Request, db: Session = Depends(get_db)) -> AuthService:
    return _services(request).auth_service(db=db)


def get_user_service(request: Request, db: Session = Depends(get_db)) -> UserService:
    return _services(request).user_service(db=db)


def get_address_service(request: Request, db: Session = Depends(get_db)) -> AddressService:
    return _services(request).address_service(db=db)


def get_category_service(request: Request, db: Session = Depends(get_db)) -> CategoryService:
    return _services(request).category_service(db=db)


def get_brand_service(request: Request, db: Session = Depends(get_db)) -> BrandService:
    return _services(request).brand_service(db=db)


def get_product_service(request: Request, db: Session = Depends(get_db)) -> ProductService:
    return _services(request).product_service(db=db)


def get_cart_service(request: Request, db: Session = Depends(get_db)) -> CartService:
    return _services(request).cart_service(db=db)


def get_coupon_service(request: Request, db: Session = Depends(get_db)) -> CouponService:
    return _services(request).coupon_service(db=db)


def get_wallet_service(request: Request, db: Session = Depends(get_db)) -> WalletService:
    return _services(request).wallet_service(db=db)


def get_order_service(request: Request, db: Session = Depends(get_db)) -> OrderService:
    return _services(request).order_service(db=db)


def get_checkout_service(request: Request, db: Session = Depends(get_db)) -> CheckoutService:
    return _services(request).checkout_service(db=db)


def get_review_service(request: Request, db: Session = Depends(get_db)) -> ReviewService:
    return _services(request).review_service(db=db)


def get_wishlist_service(request: Request, db: Session = Depends(get_db)) -> WishlistService:
    return _services(request).wishlist_service(db=db)


def get_vendor_service(request: Request, db: Session = Depends(get_db)) -> VendorService:
    return _services(request).vendor_service(db=db)


def get_admin_service(request: Request, db: Session = Depends(get_db)) -> AdminService:
    return _services(request).admin_service(db=db)
