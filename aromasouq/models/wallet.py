"""
Coin wallet and ledger.

Wallet.balance is a running total of CoinTransaction.amount. Every ledger write
goes through WalletRepository, which updates the balance and appends the entry
in the same session transaction. ref_id is unique, so replaying an operation
with the same reference has no second effect.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import (
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.schema import UniqueConstraint

from aromasouq.models.base import BaseModel, new_uuid


class CoinTransactionType(str, Enum):
    EARNED = "EARNED"
    SPENT = "SPENT"
    REFUNDED = "REFUNDED"
    EXPIRED = "EXPIRED"


class CoinSource(str, Enum):
    ORDER_PURCHASE = "ORDER_PURCHASE"
    PRODUCT_REVIEW = "PRODUCT_REVIEW"
    REFERRAL = "REFERRAL"
    PROMOTION = "PROMOTION"
    REFUND = "REFUND"
    ADMIN = "ADMIN"
    REDEMPTION = "REDEMPTION"
    EXPIRY = "EXPIRY"


class Wallet(BaseModel):
    __tablename__ = "wallets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    balance: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    lifetime_earned: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    lifetime_spent: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    user = relationship("User", back_populates="wallet")


class CoinTransaction(BaseModel):
    """Append-only ledger entry. amount is signed (negative for debits)."""

    __tablename__ = "coin_transactions"
    __table_args__ = (
        UniqueConstraint("ref_id", name="uq_coin_transactions_ref_id"),
        Index("idx_coin_transactions_user", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    wallet_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("wallets.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[CoinTransactionType] = mapped_column(
        SAEnum(CoinTransactionType, name="coin_transaction_type"), nullable=False
    )
    source: Mapped[CoinSource] = mapped_column(
        SAEnum(CoinSource, name="coin_source"), nullable=False
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    order_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    review_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    # e.g. "order:<id>:earn", "review:<id>:reward", "expire:<entry id>"
    ref_id: Mapped[str] = mapped_column(String(120), nullable=False)
    balance_after: Mapped[int] = mapped_column(Integer, nullable=False)
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
