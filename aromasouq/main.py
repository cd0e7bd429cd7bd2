import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

from aromasouq import containers
from aromasouq.config import settings
from aromasouq.core.exception_handlers import (
    handle_base_api_exception,
    handle_http_exception,
    handle_unexpected_error,
    handle_validation_error,
)
from aromasouq.core.exceptions import BaseAPIException
from aromasouq.core.logging_middleware import LoggingMiddleware
from aromasouq.logging_config import setup_logging
from aromasouq.routers import (
    address_router,
    admin_router,
    auth_router,
    brand_router,
    cart_router,
    category_router,
    checkout_router,
    coupon_router,
    health_router,
    order_router,
    product_router,
    review_router,
    user_router,
    vendor_router,
    wallet_router,
    wishlist_router,
)

load_dotenv()
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
    app.container = containers.Container()  # type: ignore

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list({settings.FRONTEND_URL, *settings.ALLOWED_ORIGINS}),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(health_router.router)
    for module in (
        auth_router,
        user_router,
        address_router,
        category_router,
        brand_router,
        product_router,
        cart_router,
        coupon_router,
        wallet_router,
        order_router,
        checkout_router,
        review_router,
        wishlist_router,
        vendor_router,
        admin_router,
    ):
        app.include_router(module.router, prefix=settings.API_PREFIX)

    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    return app


app = create_app()

handler = Mangum(app)
