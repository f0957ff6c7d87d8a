"""Business logic services."""

from finance_tracker.services.balance_engine import BalanceEngine
from finance_tracker.services.account_service import AccountService
from finance_tracker.services.transaction_service import TransactionService

__all__ = ["BalanceEngine", "AccountService", "TransactionService"]
