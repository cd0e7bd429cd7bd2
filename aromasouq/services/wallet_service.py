"""
Wallet service.

Every coin movement is a ledger entry with a ref_id. Order and review flows use
deterministic references (``order:{id}:spend``, ``order:{id}:earn``,
``order:{id}:refund``, ``review:{id}:reward``) so a retried request never
credits or debits twice.
"""

import logging
import secrets
import string
import uuid
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from aromasouq.config import Settings, get_settings
from aromasouq.core.exceptions import InsufficientBalanceError, NotFoundError
from aromasouq.models.coupon import DiscountType
from aromasouq.models.wallet import CoinSource, CoinTransactionType
from aromasouq.repositories.coupon_repository import CouponRepository
from aromasouq.repositories.wallet_repository import WalletRepository, expiry_ref
from aromasouq.schemas.pagination import Page
from aromasouq.schemas.wallet import (
    CoinTransaction,
    ExpireCoinsResponse,
    RedeemCoinsRequest,
    RedeemCoinsResponse,
    RedeemedCoupon,
    WalletIntegrityCheck,
    WalletOverview,
    WalletStats,
)
from aromasouq.services.pricing import money
from aromasouq.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def _redemption_code() -> str:
    return "COINS-" + "".join(secrets.choice(_CODE_ALPHABET) for _ in range(8))


class WalletService:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.wallet_repo = WalletRepository(db)
        self.coupon_repo = CouponRepository(db)

    def get_wallet(self, user_id: str) -> WalletOverview:
        wallet = self.wallet_repo.get_or_create(user_id)
        now = utc_now()
        expiring = self.wallet_repo.coins_expiring_between(
            user_id, now, now + timedelta(days=self.settings.COINS_EXPIRING_SOON_DAYS)
        )
        return WalletOverview(
            **wallet.model_dump(),
            available_balance=wallet.balance,
            coins_expiring_soon=min(expiring, wallet.balance),
        )

    def get_transactions(self, user_id: str, page: int, limit: int) -> Page[CoinTransaction]:
        entries, total = self.wallet_repo.list_transactions(user_id, page, limit)
        return Page[CoinTransaction].build(entries, total, page, limit)

    def get_stats(self, user_id: str) -> WalletStats:
        wallet = self.wallet_repo.get_or_create(user_id)
        return WalletStats(
            total_earned=wallet.lifetime_earned,
            total_spent=wallet.lifetime_spent,
            current_balance=wallet.balance,
            transaction_count=self.wallet_repo.transaction_count(user_id),
            earnings_by_source=self.wallet_repo.earnings_by_source(user_id),
        )

    def award(
        self,
        user_id: str,
        amount: int,
        source: CoinSource,
        description: str,
        ref_id: Optional[str] = None,
        order_id: Optional[str] = None,
        review_id: Optional[str] = None,
        commit: bool = True,
    ) -> CoinTransaction:
        """Credit coins. Earned coins expire after COIN_EXPIRY_DAYS."""
        entry_type = (
            CoinTransactionType.REFUNDED
            if source == CoinSource.REFUND
            else CoinTransactionType.EARNED
        )
        entry = self.wallet_repo.record(
            user_id=user_id,
            amount=amount,
            type=entry_type,
            source=source,
            description=description,
            ref_id=ref_id or f"award:{uuid.uuid4()}",
            order_id=order_id,
            review_id=review_id,
            expires_at=utc_now() + timedelta(days=self.settings.COIN_EXPIRY_DAYS),
            commit=commit,
        )
        logger.info(f"Awarded {amount} coins to user {user_id} ({source.value})")
        return entry

    def spend(
        self,
        user_id: str,
        amount: int,
        description: str,
        ref_id: Optional[str] = None,
        order_id: Optional[str] = None,
        source: CoinSource = CoinSource.ORDER_PURCHASE,
        commit: bool = True,
    ) -> CoinTransaction:
        entry = self.wallet_repo.record(
            user_id=user_id,
            amount=-amount,
            type=CoinTransactionType.SPENT,
            source=source,
            description=description,
            ref_id=ref_id or f"spend:{uuid.uuid4()}",
            order_id=order_id,
            commit=commit,
        )
        logger.info(f"User {user_id} spent {amount} coins")
        return entry

    def refund(
        self,
        user_id: str,
        amount: int,
        description: str,
        ref_id: str,
        order_id: Optional[str] = None,
        commit: bool = True,
    ) -> CoinTransaction:
        return self.wallet_repo.record(
            user_id=user_id,
            amount=amount,
            type=CoinTransactionType.REFUNDED,
            source=CoinSource.REFUND,
            description=description,
            ref_id=ref_id,
            order_id=order_id,
            commit=commit,
        )

    def redeem(self, user_id: str, request: RedeemCoinsRequest) -> RedeemCoinsResponse:
        """Convert coins into a one-use FIXED coupon."""
        balance = self.wallet_repo.get_balance(user_id)
        if balance < request.amount:
            raise InsufficientBalanceError(
                f"Insufficient coins balance. Available: {balance}, Required: {request.amount}",
                details={"available": balance, "required": request.amount},
            )

        value = money(request.amount * self.settings.COIN_REDEMPTION_RATE)
        now = utc_now()
        expires_at = now + timedelta(days=self.settings.REDEEMED_COUPON_VALID_DAYS)
        code = _redemption_code()
        while self.coupon_repo.get_by_code(code) is not None:
            code = _redemption_code()

        try:
            coupon = self.coupon_repo.create(
                commit=False,
                code=code,
                discount_type=DiscountType.FIXED,
                discount_value=value,
                usage_limit=1,
                start_date=now,
                end_date=expires_at,
                is_active=True,
                vendor_id=None,
            )
            self.wallet_repo.record(
                user_id=user_id,
                amount=-request.amount,
                type=CoinTransactionType.SPENT,
                source=CoinSource.REDEMPTION,
                description=f"Redeemed {request.amount} coins for coupon {code}",
                ref_id=f"redeem:{coupon.id}",
                commit=False,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"User {user_id} redeemed {request.amount} coins for {code}")
        return RedeemCoinsResponse(
            message=f"Successfully redeemed {request.amount} coins",
            coupon=RedeemedCoupon(code=code, value=value, expires_at=expires_at),
        )

    def expire_old_coins(self) -> ExpireCoinsResponse:
        """Append an EXPIRED entry for every EARNED entry past its expires_at."""
        expired_count = 0
        total_expired = 0

        try:
            for entry in self.wallet_repo.expired_earnings(utc_now()):
                balance = self.wallet_repo.get_balance(entry.user_id)
                amount = min(entry.amount, balance)
                # zero-amount entries still mark the earning as processed
                self.wallet_repo.record(
                    user_id=entry.user_id,
                    amount=-amount,
                    type=CoinTransactionType.EXPIRED,
                    source=CoinSource.EXPIRY,
                    description=f"{amount} coins expired",
                    ref_id=expiry_ref(entry.id),
                    order_id=entry.order_id,
                    commit=False,
                )
                if amount > 0:
                    expired_count += 1
                    total_expired += amount
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Expired {total_expired} coins across {expired_count} entries")
        return ExpireCoinsResponse(
            expired_count=expired_count, total_coins_expired=total_expired
        )

    def verify_integrity(self, user_id: str) -> WalletIntegrityCheck:
        if self.wallet_repo.get_for_user(user_id) is None:
            raise NotFoundError("Wallet not found")
        check = self.wallet_repo.verify_integrity(user_id)
        if check.status != "OK":
            logger.warning(
                f"Wallet drift for user {user_id}: balance={check.wallet_balance} "
                f"ledger={check.ledger_sum}"
            )
        return check

    def verify_all(self) -> List[WalletIntegrityCheck]:
        return [
            self.wallet_repo.verify_integrity(user_id)
            for user_id in self.wallet_repo.all_user_ids()
        ]
