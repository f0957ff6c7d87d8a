"""
Shared enumerations for database models.

Mapping Python enums to database enums keeps invalid
transaction types out of the table, not just out of the API.
"""

import enum


class TransactionType(str, enum.Enum):
    """Whether a transaction adds to or takes from its account."""
    INCOME = "income"
    EXPENSE = "expense"


class Direction(str, enum.Enum):
    """Whether a delta is being added to a balance or taken back out."""
    APPLY = "apply"
    REVERSE = "reverse"
