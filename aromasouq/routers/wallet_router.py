"""
Wallet (coin ledger) routes.

User:
- GET /wallet, /wallet/transactions, /wallet/stats, /wallet/integrity
- POST /wallet/redeem

Admin:
- POST /wallet/award, /wallet/spend, /wallet/expire-old-coins
- GET /wallet/integrity/{user_id}
"""

import logging

from fastapi import APIRouter, Depends

from aromasouq.core.auth_middleware import get_current_user, require_admin
from aromasouq.deps import get_wallet_service, pagination_params
from aromasouq.models.wallet import CoinSource
from aromasouq.schemas.pagination import Page, PaginationParams
from aromasouq.schemas.user import User as UserSchema
from aromasouq.schemas.wallet import (
    AwardCoinsRequest,
    CoinTransaction,
    ExpireCoinsResponse,
    RedeemCoinsRequest,
    RedeemCoinsResponse,
    SpendCoinsRequest,
    WalletIntegrityCheck,
    WalletOverview,
    WalletStats,
)
from aromasouq.services.wallet_service import WalletService

router = APIRouter(prefix="/wallet", tags=["wallet"])
logger = logging.getLogger(__name__)


@router.get("", response_model=WalletOverview)
def get_wallet(
    current_user: UserSchema = Depends(get_current_user),
    wallet_service: WalletService = Depends(get_wallet_service),
) -> WalletOverview:
    return wallet_service.get_wallet(current_user.id)


@router.get("/transactions", response_model=Page[CoinTransaction])
def get_transactions(
    pagination: PaginationParams = Depends(pagination_params),
    current_user: UserSchema = Depends(get_current_user),
    wallet_service: WalletService = Depends(get_wallet_service),
) -> Page[CoinTransaction]:
    return wallet_service.get_transactions(current_user.id, pagination.page, pagination.limit)


@router.get("/stats", response_model=WalletStats)
def get_stats(
    current_user: UserSchema = Depends(get_current_user),
    wallet_service: WalletService = Depends(get_wallet_service),
) -> WalletStats:
    return wallet_service.get_stats(current_user.id)


@router.post("/redeem", response_model=RedeemCoinsResponse)
def redeem_coins(
    payload: RedeemCoinsRequest,
    current_user: UserSchema = Depends(get_current_user),
    wallet_service: WalletService = Depends(get_wallet_service),
) -> RedeemCoinsResponse:
    """Convert coins into a one-use coupon."""
    return wallet_service.redeem(current_user.id, payload)


@router.get("/integrity", response_model=WalletIntegrityCheck)
def verify_my_wallet(
    current_user: UserSchema = Depends(get_current_user),
    wallet_service: WalletService = Depends(get_wallet_service),
) -> WalletIntegrityCheck:
    return wallet_service.verify_integrity(current_user.id)


@router.get("/integrity/{user_id}", response_model=WalletIntegrityCheck)
def verify_user_wallet(
    user_id: str,
    _: UserSchema = Depends(require_admin),
    wallet_service: WalletService = Depends(get_wallet_service),
) -> WalletIntegrityCheck:
    return wallet_service.verify_integrity(user_id)


@router.post("/award", response_model=CoinTransaction)
def award_coins(
    payload: AwardCoinsRequest,
    admin: UserSchema = Depends(require_admin),
    wallet_service: WalletService = Depends(get_wallet_service),
) -> CoinTransaction:
    logger.info(f"Admin {admin.id} awarding {payload.amount} coins to {payload.user_id}")
    return wallet_service.award(
        payload.user_id,
        payload.amount,
        payload.source,
        payload.description,
        order_id=payload.order_id,
    )


@router.post("/spend", response_model=CoinTransaction)
def spend_coins(
    payload: SpendCoinsRequest,
    admin: UserSchema = Depends(require_admin),
    wallet_service: WalletService = Depends(get_wallet_service),
) -> CoinTransaction:
    logger.info(f"Admin {admin.id} deducting {payload.amount} coins from {payload.user_id}")
    return wallet_service.spend(
        payload.user_id,
        payload.amount,
        payload.description,
        order_id=payload.order_id,
        source=CoinSource.ADMIN,
    )


@router.post("/expire-old-coins", response_model=ExpireCoinsResponse)
def expire_old_coins(
    _: UserSchema = Depends(require_admin),
    wallet_service: WalletService = Depends(get_wallet_service),
) -> ExpireCoinsResponse:
    return wallet_service.expire_old_coins()
