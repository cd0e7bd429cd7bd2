"""
Coin wallet repository.

Single write path for the coin ledger:
1. A ledger entry and the matching Wallet.balance change are flushed together,
   so they commit (or roll back) as one unit.
2. ref_id makes every operation idempotent. Replaying a reference returns
   the original entry without touching the balance again. A duplicate that
   only surfaces at flush time fails the whole unit when commit=False.
3. A debit that would take the balance below zero is rejected.
4. verify_integrity compares Wallet.balance with the ledger sum.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from aromasouq.core.exceptions import InsufficientBalanceError, NotFoundError
from aromasouq.models.wallet import CoinSource, CoinTransactionType
from aromasouq.models.wallet import CoinTransaction as CoinTransactionModel
from aromasouq.models.wallet import Wallet as WalletModel
from aromasouq.repositories.base import BaseRepository
from aromasouq.schemas.wallet import CoinTransaction, Wallet, WalletIntegrityCheck


class WalletRepository(BaseRepository[WalletModel, Wallet]):
    def __init__(self, db: Session):
        super().__init__(WalletModel, Wallet, db)

    def _get_wallet_model(self, user_id: str, for_update: bool = False) -> Optional[WalletModel]:
        query = self.db.query(WalletModel).filter(WalletModel.user_id == user_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get_for_user(self, user_id: str) -> Optional[Wallet]:
        return self._to_schema(self._get_wallet_model(user_id))

    def get_or_create(self, user_id: str, commit: bool = True) -> Wallet:
        wallet = self._get_wallet_model(user_id)
        if wallet is None:
            wallet = WalletModel(user_id=user_id)
            self.db.add(wallet)
            self._finish(commit)
        return self._to_schema(wallet)

    def get_balance(self, user_id: str) -> int:
        wallet = self._get_wallet_model(user_id)
        return wallet.balance if wallet else 0

    def find_by_ref(self, ref_id: str) -> Optional[CoinTransaction]:
        entry = (
            self.db.query(CoinTransactionModel)
            .filter(CoinTransactionModel.ref_id == ref_id)
            .first()
        )
        return CoinTransaction.model_validate(entry) if entry else None

    def record(
        self,
        user_id: str,
        amount: int,
        type: CoinTransactionType,
        source: CoinSource,
        description: str,
        ref_id: str,
        order_id: Optional[str] = None,
        review_id: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        commit: bool = True,
    ) -> CoinTransaction:
        """Append a ledger entry and move the wallet balance by ``amount``.

        Args:
            amount: signed coin delta (negative for SPENT/EXPIRED)
            ref_id: idempotency key, unique across the ledger

        Raises:
            InsufficientBalanceError: the debit exceeds the current balance
            NotFoundError: the user has no wallet
        """
        existing = self.find_by_ref(ref_id)
        if existing is not None:
            return existing

        wallet = self._get_wallet_model(user_id, for_update=True)
        if wallet is None:
            raise NotFoundError("Wallet not found")

        if amount < 0 and wallet.balance + amount < 0:
            raise InsufficientBalanceError(
                f"Insufficient coins balance. Available: {wallet.balance}, Required: {-amount}",
                details={"available": wallet.balance, "required": -amount},
            )

        wallet.balance += amount
        if type == CoinTransactionType.SPENT:
            wallet.lifetime_spent += -amount
        elif type in (CoinTransactionType.EARNED, CoinTransactionType.REFUNDED):
            wallet.lifetime_earned += amount

        entry = CoinTransactionModel(
            wallet_id=wallet.id,
            user_id=user_id,
            amount=amount,
            type=type,
            source=source,
            description=description,
            order_id=order_id,
            review_id=review_id,
            ref_id=ref_id,
            balance_after=wallet.balance,
            expires_at=expires_at,
        )
        self.db.add(entry)
        try:
            self._finish(commit)
        except IntegrityError:
            # the rollback already discarded the caller's composed writes
            if not commit:
                raise
            # a concurrent writer recorded the same ref_id first
            existing = self.find_by_ref(ref_id)
            if existing is not None:
                return existing
            raise
        return CoinTransaction.model_validate(entry)

    def list_transactions(
        self, user_id: str, page: int, limit: int
    ) -> Tuple[List[CoinTransaction], int]:
        query = (
            self.db.query(CoinTransactionModel)
            .filter(CoinTransactionModel.user_id == user_id)
            .order_by(CoinTransactionModel.created_at.desc(), CoinTransactionModel.id)
        )
        total = query.order_by(None).count()
        rows = query.offset((page - 1) * limit).limit(limit).all()
        return [CoinTransaction.model_validate(row) for row in rows], total

    def transaction_count(self, user_id: str) -> int:
        return (
            self.db.query(CoinTransactionModel)
            .filter(CoinTransactionModel.user_id == user_id)
            .count()
        )

    def earnings_by_source(self, user_id: str) -> Dict[str, int]:
        rows = (
            self.db.query(CoinTransactionModel.source, func.sum(CoinTransactionModel.amount))
            .filter(
                CoinTransactionModel.user_id == user_id,
                CoinTransactionModel.type == CoinTransactionType.EARNED,
            )
            .group_by(CoinTransactionModel.source)
            .all()
        )
        return {source.value: int(total or 0) for source, total in rows}

    def coins_expiring_between(self, user_id: str, start: datetime, end: datetime) -> int:
        total = (
            self.db.query(func.sum(CoinTransactionModel.amount))
            .filter(
                CoinTransactionModel.user_id == user_id,
                CoinTransactionModel.type == CoinTransactionType.EARNED,
                CoinTransactionModel.expires_at.isnot(None),
                CoinTransactionModel.expires_at > start,
                CoinTransactionModel.expires_at <= end,
            )
            .scalar()
        )
        return int(total or 0)

    def expired_earnings(self, now: datetime) -> List[CoinTransaction]:
        """EARNED entries past expires_at that have no matching EXPIRED entry yet."""
        processed = {
            ref_id
            for (ref_id,) in self.db.query(CoinTransactionModel.ref_id).filter(
                CoinTransactionModel.type == CoinTransactionType.EXPIRED
            )
        }
        rows = (
            self.db.query(CoinTransactionModel)
            .filter(
                CoinTransactionModel.type == CoinTransactionType.EARNED,
                CoinTransactionModel.expires_at.isnot(None),
                CoinTransactionModel.expires_at <= now,
            )
            .order_by(CoinTransactionModel.expires_at)
            .all()
        )
        return [
            CoinTransaction.model_validate(row)
            for row in rows
            if expiry_ref(row.id) not in processed
        ]

    def verify_integrity(self, user_id: str) -> WalletIntegrityCheck:
        """Compare Wallet.balance with the ledger sum and the latest balance_after.

        Returns:
            WalletIntegrityCheck: status OK when all three agree, MISMATCH otherwise
        """
        wallet = self._get_wallet_model(user_id)
        wallet_balance = wallet.balance if wallet else 0

        ledger_sum, entry_count = (
            self.db.query(
                func.coalesce(func.sum(CoinTransactionModel.amount), 0),
                func.count(CoinTransactionModel.id),
            )
            .filter(CoinTransactionModel.user_id == user_id)
            .one()
        )
        latest = (
            self.db.query(CoinTransactionModel)
            .filter(CoinTransactionModel.user_id == user_id)
            .order_by(CoinTransactionModel.created_at.desc())
            .first()
        )
        latest_balance_after = latest.balance_after if latest else None

        consistent = int(ledger_sum) == wallet_balance and (
            latest_balance_after is None or latest_balance_after == wallet_balance
        )
        return WalletIntegrityCheck(
            status="OK" if consistent else "MISMATCH",
            user_id=user_id,
            wallet_balance=wallet_balance,
            ledger_sum=int(ledger_sum),
            latest_balance_after=latest_balance_after,
            entry_count=int(entry_count),
        )

    def all_user_ids(self) -> List[str]:
        return [user_id for (user_id,) in self.db.query(WalletModel.user_id).all()]


def expiry_ref(entry_id: str) -> str:
    return f"expire:{entry_id}"
