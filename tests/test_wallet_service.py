from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from aromasouq.core.exceptions import InsufficientBalanceError, NotFoundError
from aromasouq.models import Address, Wallet
from aromasouq.models.coupon import DiscountType
from aromasouq.models.wallet import CoinSource, CoinTransaction, CoinTransactionType
from aromasouq.repositories.coupon_repository import CouponRepository
from aromasouq.repositories.wallet_repository import WalletRepository
from aromasouq.schemas.wallet import RedeemCoinsRequest
from aromasouq.services.wallet_service import WalletService
from aromasouq.utils.timezone_utils import utc_now


@pytest.fixture
def wallet_service(db_session):
    return WalletService(db_session)


@pytest.fixture
def customer(make_user):
    return make_user()


class TestLedger:
    def test_award_and_spend_keep_balance_and_ledger_in_step(self, wallet_service, customer):
        wallet_service.award(customer.id, 100, CoinSource.PROMOTION, "Launch bonus")
        spent = wallet_service.spend(customer.id, 30, "Checkout")

        assert spent.amount == -30
        assert spent.balance_after == 70

        wallet = wallet_service.get_wallet(customer.id)
        assert wallet.balance == 70
        assert wallet.lifetime_earned == 100
        assert wallet.lifetime_spent == 30

        check = wallet_service.verify_integrity(customer.id)
        assert check.status == "OK"
        assert check.ledger_sum == 70
        assert check.entry_count == 2

    def test_same_reference_is_applied_once(self, wallet_service, customer):
        first = wallet_service.award(
            customer.id, 50, CoinSource.PROMOTION, "Promo", ref_id="promo:spring"
        )
        second = wallet_service.award(
            customer.id, 50, CoinSource.PROMOTION, "Promo", ref_id="promo:spring"
        )

        assert first.id == second.id
        assert wallet_service.get_wallet(customer.id).balance == 50
        assert wallet_service.get_stats(customer.id).transaction_count == 1

    def test_overspend_is_rejected(self, wallet_service, customer):
        wallet_service.award(customer.id, 10, CoinSource.PROMOTION, "Promo")

        with pytest.raises(InsufficientBalanceError) as exc_info:
            wallet_service.spend(customer.id, 11, "Too much")

        assert exc_info.value.details == {"available": 10, "required": 11}
        assert wallet_service.get_wallet(customer.id).balance == 10

    def test_refund_counts_as_earned(self, wallet_service, customer):
        entry = wallet_service.refund(customer.id, 15, "Cancelled order", ref_id="order:x:refund")

        assert entry.type == CoinTransactionType.REFUNDED
        assert entry.source == CoinSource.REFUND
        assert wallet_service.get_wallet(customer.id).lifetime_earned == 15

    def test_transactions_are_paginated_newest_first(self, wallet_service, customer):
        for amount in (1, 2, 3):
            wallet_service.award(customer.id, amount, CoinSource.PROMOTION, f"Promo {amount}")

        page = wallet_service.get_transactions(customer.id, page=1, limit=2)

        assert page.meta.total == 3
        assert page.meta.total_pages == 2
        assert [entry.amount for entry in page.data] == [3, 2]

    def test_stats_group_earnings_by_source(self, wallet_service, customer):
        wallet_service.award(customer.id, 10, CoinSource.PRODUCT_REVIEW, "Review")
        wallet_service.award(customer.id, 5, CoinSource.PRODUCT_REVIEW, "Review")
        wallet_service.award(customer.id, 20, CoinSource.ADMIN, "Goodwill")

        stats = wallet_service.get_stats(customer.id)

        assert stats.earnings_by_source == {"PRODUCT_REVIEW": 15, "ADMIN": 20}
        assert stats.current_balance == 35


class TestIntegrity:
    def test_drift_is_reported(self, db_session, wallet_service, customer):
        wallet_service.award(customer.id, 40, CoinSource.PROMOTION, "Promo")
        wallet = db_session.query(Wallet).filter(Wallet.user_id == customer.id).one()
        wallet.balance += 5
        db_session.commit()

        check = wallet_service.verify_integrity(customer.id)

        assert check.status == "MISMATCH"
        assert check.wallet_balance == 45
        assert check.ledger_sum == 40
        assert [c.status for c in wallet_service.verify_all()] == ["MISMATCH"]

    def test_missing_wallet(self, wallet_service):
        with pytest.raises(NotFoundError, match="Wallet not found"):
            wallet_service.verify_integrity("no-such-user")


class TestConcurrentReference:
    """The ref_id pre-check misses because another writer committed in between."""

    def _award(self, repo, customer, commit):
        return repo.record(
            customer.id,
            25,
            CoinTransactionType.EARNED,
            CoinSource.PROMOTION,
            "Promo",
            ref_id="promo:race",
            commit=commit,
        )

    def test_standalone_write_returns_existing_entry(self, db_session, wallet_service, customer):
        first = wallet_service.award(
            customer.id, 25, CoinSource.PROMOTION, "Promo", ref_id="promo:race"
        )
        repo = WalletRepository(db_session)
        real_find = repo.find_by_ref

        with patch.object(repo, "find_by_ref", side_effect=[None, real_find("promo:race")]):
            entry = self._award(repo, customer, commit=True)

        assert entry.id == first.id
        assert wallet_service.get_wallet(customer.id).balance == 25

    def test_composed_write_fails_as_a_unit(self, db_session, wallet_service, customer):
        wallet_service.award(customer.id, 25, CoinSource.PROMOTION, "Promo", ref_id="promo:race")
        repo = WalletRepository(db_session)
        db_session.add(
            Address(
                user_id=customer.id,
                full_name="Layla Hassan",
                phone="+971501234567",
                address_line1="12 Al Wasl Road",
                city="Dubai",
                state="Dubai",
                zip_code="00000",
                is_default=True,
            )
        )

        with patch.object(repo, "find_by_ref", return_value=None):
            with pytest.raises(IntegrityError):
                self._award(repo, customer, commit=False)

        db_session.commit()
        assert db_session.query(Address).count() == 0
        assert wallet_service.get_wallet(customer.id).balance == 25


class TestRedeem:
    def test_redeem_mints_single_use_coupon(self, db_session, wallet_service, customer):
        wallet_service.award(customer.id, 150, CoinSource.PROMOTION, "Promo")

        result = wallet_service.redeem(customer.id, RedeemCoinsRequest(amount=100))

        assert result.coupon.code.startswith("COINS-")
        assert result.coupon.value == 10.0
        coupon = CouponRepository(db_session).get_by_code(result.coupon.code)
        assert coupon.discount_type == DiscountType.FIXED
        assert coupon.usage_limit == 1
        assert coupon.vendor_id is None

        wallet = wallet_service.get_wallet(customer.id)
        assert wallet.balance == 50
        assert wallet.lifetime_spent == 100
        assert wallet_service.verify_integrity(customer.id).status == "OK"

    def test_redeem_beyond_balance(self, wallet_service, customer):
        wallet_service.award(customer.id, 20, CoinSource.PROMOTION, "Promo")

        with pytest.raises(InsufficientBalanceError):
            wallet_service.redeem(customer.id, RedeemCoinsRequest(amount=50))
        assert wallet_service.get_wallet(customer.id).balance == 20


class TestExpiry:
    def _backdate(self, db_session, entry_id):
        db_session.query(CoinTransaction).filter(CoinTransaction.id == entry_id).update(
            {"expires_at": utc_now() - timedelta(days=1)}
        )
        db_session.commit()

    def test_expired_coins_are_removed_once(self, db_session, wallet_service, customer):
        old = wallet_service.award(customer.id, 40, CoinSource.PROMOTION, "Old promo")
        wallet_service.award(customer.id, 25, CoinSource.PROMOTION, "Fresh promo")
        self._backdate(db_session, old.id)

        result = wallet_service.expire_old_coins()

        assert result.expired_count == 1
        assert result.total_coins_expired == 40
        assert wallet_service.get_wallet(customer.id).balance == 25

        again = wallet_service.expire_old_coins()
        assert again.expired_count == 0
        assert wallet_service.get_wallet(customer.id).balance == 25
        assert wallet_service.verify_integrity(customer.id).status == "OK"

    def test_expiry_never_goes_below_zero(self, db_session, wallet_service, customer):
        old = wallet_service.award(customer.id, 40, CoinSource.PROMOTION, "Old promo")
        wallet_service.spend(customer.id, 30, "Checkout")
        self._backdate(db_session, old.id)

        result = wallet_service.expire_old_coins()

        assert result.total_coins_expired == 10
        assert wallet_service.get_wallet(customer.id).balance == 0
