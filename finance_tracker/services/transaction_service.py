"""
Transaction service: create, list, update, and delete transactions.

Each write is a short sequence against the store:

    create: validate -> insert transaction -> apply new impact
    update: validate -> reverse old impact -> overwrite fields -> apply new impact
    delete: reverse old impact -> remove transaction

All input is validated before the first write. The service only
flushes; the caller owns the commit. The HTTP layer commits once
per request and rolls back on any error, so the transaction row
and the balance change it causes are saved together or not at
all. A caller that commits between steps, or forgets to roll
back after an error, can leave a transaction and its account
balance out of step; nothing here compensates for that.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from finance_tracker.errors import NotFoundError, ValidationError
from finance_tracker.logging_config import get_logger
from finance_tracker.models.account import Account
from finance_tracker.models.base import persist
from finance_tracker.models.enums import Direction, TransactionType
from finance_tracker.models.transaction import Transaction
from finance_tracker.schemas.transaction import (
    TransactionCreate,
    TransactionUpdate,
)
from finance_tracker.services.balance_engine import BalanceEngine

logger = get_logger(__name__)

# Matches the Numeric(19, 4) columns
AMOUNT_QUANTUM = Decimal("0.0001")
MAX_AMOUNT = Decimal("1e15")


def parse_amount(value) -> Decimal:
    """Parse a client-supplied amount into a positive 4-place Decimal."""
    if isinstance(value, bool):
        raise ValidationError("Amount must be a positive number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError("Amount must be a positive number") from None

    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Amount must be a positive number")
    # Checked before rounding too, since quantize() fails on huge values
    if amount >= MAX_AMOUNT:
        raise ValidationError("Amount is too large")

    amount = amount.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise ValidationError("Amount must be a positive number")
    if amount >= MAX_AMOUNT:
        raise ValidationError("Amount is too large")
    return amount


def parse_type(value) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        raise ValidationError("Type must be 'income' or 'expense'") from None


def parse_date(value) -> datetime | None:
    """
    Parse an ISO 8601 date or timestamp into naive UTC.

    Returns None when the value is not a valid timestamp.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _clean_note(value: str | None) -> str | None:
    return None if _is_blank(value) else value


class TransactionService:

    def __init__(self, db: Session):
        self.db = db
        self.balance_engine = BalanceEngine(db)

    def _find_account(self, account_id: int) -> Account:
        account = self.db.execute(
            select(Account).where(Account.id == account_id)
        ).scalar_one_or_none()
        if account is None:
            raise NotFoundError(f"Account {account_id} not found")
        return account

    def create_transaction(self, request: TransactionCreate) -> Transaction:
        """
        Record a new transaction and apply it to its account balance.

        Raises ValidationError for missing or malformed fields and
        NotFoundError if the account does not exist. No write
        happens in either case.
        """
        required = {
            "account_id": request.account_id,
            "type": request.type,
            "amount": request.amount,
            "category": request.category,
        }
        missing = [name for name, value in required.items() if _is_blank(value)]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}"
            )

        amount = parse_amount(request.amount)
        transaction_type = parse_type(request.type)

        date = datetime.utcnow()
        if not _is_blank(request.date):
            date = parse_date(request.date)
            if date is None:
                raise ValidationError("Date must be a valid ISO 8601 timestamp")

        account = self._find_account(request.account_id)

        txn = Transaction(
            account=account,
            type=transaction_type,
            amount=amount,
            category=request.category.strip(),
            note=_clean_note(request.note),
            date=date,
        )
        self.db.add(txn)
        persist(self.db)

        self.balance_engine.apply_delta(
            account.id, transaction_type, amount, Direction.APPLY
        )

        logger.info(
            "Transaction created",
            transaction_id=txn.id,
            account_id=account.id,
            type=transaction_type.value,
            amount=str(amount),
        )
        return txn

    def list_transactions(self) -> list[Transaction]:
        """Return all transactions, most recent date first."""
        transactions = self.db.execute(
            select(Transaction)
            .options(selectinload(Transaction.account))
            .order_by(Transaction.date.desc(), Transaction.id.desc())
        ).scalars().all()
        return list(transactions)

    def get_transaction(self, transaction_id: int) -> Transaction:
        """Get a transaction by ID."""
        txn = self.db.get(Transaction, transaction_id)
        if not txn:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return txn

    def update_transaction(
        self, transaction_id: int, request: TransactionUpdate
    ) -> Transaction:
        """
        Edit a transaction and move its balance impact accordingly.

        Only fields the caller sent are considered. account_id,
        type and amount keep their old values when absent or null.
        category changes only to a non-blank string. note changes
        whenever it is sent; null or blank clears it. date changes
        only when it parses.

        The old impact is reversed using the values captured
        before any field is overwritten; the new impact is applied
        using the final values.
        """
        txn = self.get_transaction(transaction_id)
        sent = request.model_fields_set

        old_account_id = txn.account_id
        old_type = txn.type
        old_amount = txn.amount

        new_type = old_type
        if "type" in sent and request.type is not None:
            new_type = parse_type(request.type)

        new_amount = old_amount
        if "amount" in sent and request.amount is not None:
            new_amount = parse_amount(request.amount)

        new_account_id = old_account_id
        if "account_id" in sent and request.account_id is not None:
            new_account_id = request.account_id
        new_account = self._find_account(new_account_id)

        self.balance_engine.apply_delta(
            old_account_id, old_type, old_amount, Direction.REVERSE
        )

        txn.account = new_account
        txn.type = new_type
        txn.amount = new_amount

        if "category" in sent and not _is_blank(request.category):
            txn.category = request.category.strip()

        if "note" in sent:
            txn.note = _clean_note(request.note)

        if "date" in sent and not _is_blank(request.date):
            date = parse_date(request.date)
            if date is None:
                logger.warning(
                    "Ignoring unparseable transaction date",
                    transaction_id=txn.id,
                    date=str(request.date),
                )
            else:
                txn.date = date

        persist(self.db)

        self.balance_engine.apply_delta(
            new_account.id, new_type, new_amount, Direction.APPLY
        )

        logger.info(
            "Transaction updated",
            transaction_id=txn.id,
            old_account_id=old_account_id,
            account_id=new_account.id,
            type=new_type.value,
            amount=str(new_amount),
        )
        return txn

    def delete_transaction(self, transaction_id: int) -> None:
        """
        Reverse a transaction's impact, then remove it.

        If its account no longer exists the delete fails with
        NotFoundError and the transaction is kept.
        """
        txn = self.get_transaction(transaction_id)

        self.balance_engine.apply_delta(
            txn.account_id, txn.type, txn.amount, Direction.REVERSE
        )

        self.db.delete(txn)
        persist(self.db)
        logger.info("Transaction deleted", transaction_id=transaction_id)
