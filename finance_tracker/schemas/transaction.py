"""
Pydantic schemas for transaction operations.

The request schemas are intentionally loose. The amount and
type arrive as whatever the client sent and are validated by
TransactionService, so a bad amount is reported the same way
whether it came over HTTP or from a direct service call.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from finance_tracker.models.enums import TransactionType
from finance_tracker.schemas.account import AccountSummary, Money


class TransactionCreate(BaseModel):
    account_id: int | None = None
    type: str | None = None
    amount: Any = None
    category: str | None = None
    note: str | None = None
    date: datetime | str | None = None


class TransactionUpdate(BaseModel):
    """
    Partial update of a transaction.

    Only fields the client actually sent are considered
    (model_fields_set), which separates "leave unchanged"
    from "clear this field" for the note.
    """
    account_id: int | None = None
    type: str | None = None
    amount: Any = None
    category: str | None = None
    note: str | None = None
    date: datetime | str | None = None


class TransactionResponse(BaseModel):
    id: int
    account_id: int
    account: AccountSummary | None
    type: TransactionType
    amount: Money
    category: str
    note: str | None
    date: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str
