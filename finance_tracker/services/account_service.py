"""
Account service: create, list, rename, and seed accounts.

This is a thin layer over the store. It never touches
balances beyond setting zero on creation; those belong to
the BalanceEngine.
"""

from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from finance_tracker.errors import NotFoundError, ValidationError
from finance_tracker.logging_config import get_logger
from finance_tracker.models.account import Account
from finance_tracker.models.base import persist
from finance_tracker.schemas.account import AccountCreate, AccountUpdate

logger = get_logger(__name__)

DEFAULT_ACCOUNT_NAMES = ("Cash Wallet", "Bank Account")


class AccountService:

    def __init__(self, db: Session):
        self.db = db

    def seed_accounts(self) -> list[Account]:
        """
        Create the two default accounts if there are no accounts yet.

        Safe to call any number of times. Returns every account.
        """
        count = self.db.execute(select(func.count(Account.id))).scalar_one()
        if count == 0:
            for name in DEFAULT_ACCOUNT_NAMES:
                self.db.add(Account(name=name, balance=Decimal("0")))
            persist(self.db)
            logger.info("Seeded default accounts", names=list(DEFAULT_ACCOUNT_NAMES))
        return self.list_accounts()

    def list_accounts(self) -> list[Account]:
        accounts = self.db.execute(select(Account)).scalars().all()
        return list(accounts)

    def get_account(self, account_id: int) -> Account:
        """Get an account by ID."""
        account = self.db.get(Account, account_id)
        if not account:
            raise NotFoundError(f"Account {account_id} not found")
        return account

    def create_account(self, request: AccountCreate) -> Account:
        """Create an account with a zero balance."""
        name = request.name.strip()
        if not name:
            raise ValidationError("Account name cannot be blank")

        account = Account(name=name, balance=Decimal("0"))
        self.db.add(account)
        persist(self.db)
        logger.info("Account created", account_id=account.id, name=account.name)
        return account

    def update_account(self, account_id: int, request: AccountUpdate) -> Account:
        """
        Apply a partial update to an account.

        Only fields present in the request are changed. The
        balance is not editable here.
        """
        account = self.get_account(account_id)
        changes = request.model_dump(exclude_unset=True)

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError("Account name cannot be blank")
            account.name = name

        persist(self.db)
        logger.info("Account updated", account_id=account.id, fields=sorted(changes))
        return account
