"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from finance_tracker.models.base import Base
from finance_tracker.models.enums import TransactionType, Direction
from finance_tracker.models.account import Account
from finance_tracker.models.transaction import Transaction

__all__ = [
    "Base",
    "TransactionType",
    "Direction",
    "Account",
    "Transaction",
]
