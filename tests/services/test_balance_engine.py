"""
Tests for the BalanceEngine and its sign arithmetic.
"""

from decimal import Decimal

import pytest
from sqlalchemy import delete

from finance_tracker.errors import NotFoundError, ValidationError
from finance_tracker.models.account import Account
from finance_tracker.models.enums import Direction, TransactionType
from finance_tracker.schemas.account import AccountCreate
from finance_tracker.services.account_service import AccountService
from finance_tracker.services.balance_engine import BalanceEngine, signed_delta


def make_account(db_session, name="Cash Wallet"):
    account = AccountService(db_session).create_account(AccountCreate(name=name))
    db_session.commit()
    return account


class TestSignedDelta:

    def test_income_applies_positive(self):
        assert signed_delta(
            TransactionType.INCOME, Decimal("50"), Direction.APPLY
        ) == Decimal("50")

    def test_expense_applies_negative(self):
        assert signed_delta(
            TransactionType.EXPENSE, Decimal("50"), Direction.APPLY
        ) == Decimal("-50")

    def test_reverse_negates_income(self):
        assert signed_delta(
            TransactionType.INCOME, Decimal("50"), Direction.REVERSE
        ) == Decimal("-50")

    def test_reverse_negates_expense(self):
        assert signed_delta(
            TransactionType.EXPENSE, Decimal("50"), Direction.REVERSE
        ) == Decimal("50")


class TestApplyDelta:

    def test_apply_income_increases_balance(self, db_session):
        account = make_account(db_session)
        engine = BalanceEngine(db_session)

        updated = engine.apply_delta(
            account.id, TransactionType.INCOME, Decimal("20.00")
        )
        db_session.commit()

        assert updated.id == account.id
        assert updated.balance == Decimal("20.00")

    def test_apply_expense_decreases_balance(self, db_session):
        account = make_account(db_session)
        engine = BalanceEngine(db_session)

        engine.apply_delta(account.id, TransactionType.EXPENSE, Decimal("12.50"))
        db_session.commit()

        assert db_session.get(Account, account.id).balance == Decimal("-12.50")

    @pytest.mark.parametrize("transaction_type", list(TransactionType))
    def test_apply_then_reverse_restores_balance(self, db_session, transaction_type):
        account = make_account(db_session)
        engine = BalanceEngine(db_session)
        engine.apply_delta(account.id, TransactionType.INCOME, Decimal("100.10"))
        db_session.commit()

        engine.apply_delta(
            account.id, transaction_type, Decimal("0.1"), Direction.APPLY
        )
        engine.apply_delta(
            account.id, transaction_type, Decimal("0.1"), Direction.REVERSE
        )
        db_session.commit()

        assert db_session.get(Account, account.id).balance == Decimal("100.10")

    def test_missing_account_raises_not_found(self, db_session):
        engine = BalanceEngine(db_session)

        with pytest.raises(NotFoundError, match="not found"):
            engine.apply_delta(999, TransactionType.INCOME, Decimal("10"))

    def test_account_removed_from_store_raises_not_found(self, db_session):
        account = make_account(db_session)
        account_id = account.id

        db_session.execute(delete(Account).where(Account.id == account_id))
        db_session.commit()

        with pytest.raises(NotFoundError):
            BalanceEngine(db_session).apply_delta(
                account_id, TransactionType.INCOME, Decimal("10")
            )

    def test_only_target_account_changes(self, db_session):
        cash = make_account(db_session, "Cash Wallet")
        bank = make_account(db_session, "Bank Account")

        BalanceEngine(db_session).apply_delta(
            bank.id, TransactionType.INCOME, Decimal("75")
        )
        db_session.commit()

        assert db_session.get(Account, cash.id).balance == Decimal("0")
        assert db_session.get(Account, bank.id).balance == Decimal("75")

    @pytest.mark.parametrize("transaction_type", list(TransactionType))
    def test_balance_that_would_not_fit_is_rejected(
        self, db_session, transaction_type
    ):
        account = make_account(db_session)
        engine = BalanceEngine(db_session)
        engine.apply_delta(account.id, transaction_type, Decimal("999999999999999"))
        db_session.commit()

        with pytest.raises(ValidationError, match="too large"):
            engine.apply_delta(account.id, transaction_type, Decimal("1"))
        db_session.rollback()

        expected = signed_delta(
            transaction_type, Decimal("999999999999999"), Direction.APPLY
        )
        assert db_session.get(Account, account.id).balance == expected
