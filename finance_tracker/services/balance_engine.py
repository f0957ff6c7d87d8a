"""
Balance engine: keeps account balances in step with transactions.

Every balance change in the system goes through apply_delta().
A transaction contributes +amount (income) or -amount (expense)
to its account. Edits and deletes undo the old contribution with
Direction.REVERSE before anything new is applied; creates only
apply. There is no recompute-from-scratch path, so a missed
reversal is permanent drift.

The engine is stateless. Two concurrent calls against the same
account can lose an update; nothing here locks the row.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from finance_tracker.errors import NotFoundError, ValidationError
from finance_tracker.logging_config import get_logger
from finance_tracker.models.account import Account
from finance_tracker.models.base import persist
from finance_tracker.models.enums import Direction, TransactionType

logger = get_logger(__name__)

# Largest magnitude a Numeric(19, 4) balance column can hold
MAX_BALANCE = Decimal("1e15")


def signed_delta(
    transaction_type: TransactionType, amount: Decimal, direction: Direction
) -> Decimal:
    """Return the signed change a transaction makes to its account balance."""
    signed = amount if transaction_type == TransactionType.INCOME else -amount
    if direction == Direction.REVERSE:
        signed = -signed
    return signed


class BalanceEngine:

    def __init__(self, db: Session):
        self.db = db

    def apply_delta(
        self,
        account_id: int,
        transaction_type: TransactionType,
        amount: Decimal,
        direction: Direction = Direction.APPLY,
    ) -> Account:
        """
        Add (or take back) a transaction's impact on an account balance.

        The account is read fresh from the store rather than trusted
        from an in-memory reference. Raises NotFoundError if it no
        longer exists, and ValidationError if the new balance would
        not fit the column; nothing is written in either case.
        Otherwise exactly one flush persists the new balance.
        """
        account = self.db.execute(
            select(Account)
            .where(Account.id == account_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

        if account is None:
            raise NotFoundError(f"Account {account_id} not found")

        delta = signed_delta(transaction_type, amount, direction)
        balance = account.balance + delta
        if abs(balance) >= MAX_BALANCE:
            raise ValidationError("Account balance would be too large")

        account.balance = balance
        persist(self.db)

        logger.info(
            "Account balance changed",
            account_id=account.id,
            direction=direction.value,
            delta=str(delta),
            balance=str(account.balance),
        )
        return account
