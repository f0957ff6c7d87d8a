"""
Pydantic schemas for account operations.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

# Money is kept as Decimal in Python and sent to the browser as a number
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class AccountCreate(BaseModel):
    """Request to create a new account. Balance always starts at zero."""
    name: str = Field(min_length=1, max_length=100)


class AccountUpdate(BaseModel):
    """
    Partial update of an account.

    Balance is deliberately absent: it only changes through
    transactions. Unknown fields are rejected.
    """
    name: str | None = Field(default=None, min_length=1, max_length=100)

    model_config = {"extra": "forbid"}


class AccountSummary(BaseModel):
    """The account as embedded in a transaction response."""
    id: int
    name: str

    model_config = {"from_attributes": True}


class AccountResponse(BaseModel):
    id: int
    name: str
    balance: Money
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
