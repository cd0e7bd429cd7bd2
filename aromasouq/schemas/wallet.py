from datetime import datetime
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

from aromasouq.models.wallet import CoinSource, CoinTransactionType


class Wallet(BaseModel):
    id: str
    user_id: str
    balance: int
    lifetime_earned: int
    lifetime_spent: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WalletOverview(Wallet):
    available_balance: int
    coins_expiring_soon: int


class CoinTransaction(BaseModel):
    id: str
    wallet_id: str
    user_id: str
    amount: int
    type: CoinTransactionType
    source: CoinSource
    description: str
    order_id: Optional[str] = None
    review_id: Optional[str] = None
    ref_id: str
    balance_after: int
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WalletStats(BaseModel):
    total_earned: int
    total_spent: int
    current_balance: int
    transaction_count: int
    earnings_by_source: Dict[str, int] = Field(default_factory=dict)


class RedeemCoinsRequest(BaseModel):
    amount: int = Field(..., ge=10, le=10000, description="Coins to convert into a coupon")


class RedeemedCoupon(BaseModel):
    code: str
    value: float
    expires_at: datetime


class RedeemCoinsResponse(BaseModel):
    message: str
    coupon: RedeemedCoupon


class AwardCoinsRequest(BaseModel):
    user_id: str
    amount: int = Field(..., gt=0)
    source: CoinSource = CoinSource.ADMIN
    description: str = Field(..., min_length=1, max_length=500)
    order_id: Optional[str] = None


class SpendCoinsRequest(BaseModel):
    user_id: str
    amount: int = Field(..., gt=0)
    description: str = Field(..., min_length=1, max_length=500)
    order_id: Optional[str] = None


class ExpireCoinsResponse(BaseModel):
    expired_count: int
    total_coins_expired: int


class WalletIntegrityCheck(BaseModel):
    """Wallet.balance reconciled against the ledger sum."""

    status: Literal["OK", "MISMATCH"]
    user_id: str
    wallet_balance: int
    ledger_sum: int
    latest_balance_after: Optional[int] = None
    entry_count: int
