"""
Expense Models

Persisted shape, validated create/patch inputs, and the raw request
payloads as they arrive from the client (amount and date still strings).
"""

from typing import Optional

from pydantic import BaseModel, Field

from finance_tracker.models.common import LedgerPatch, LedgerRecord, NewLedgerRecord


class Expense(LedgerRecord):
    """An expense record owned by one user."""

    item_name: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on (e.g., 'Coffee')"
    )


class NewExpense(NewLedgerRecord):
    item_name: str = Field(..., min_length=1)


class ExpensePatch(LedgerPatch):
    item_name: Optional[str] = Field(default=None, min_length=1)


class CreateExpenseRequest(BaseModel):
    """Expense creation payload; amount is validated and converted later."""

    item_name: str
    amount: str = Field(
        ...,
        description="Amount as a decimal string, e.g. '45.99'"
    )
    date: str = Field(
        ...,
        description="Date spent, YYYY-MM-DD"
    )
    description: Optional[str] = None


class UpdateExpenseRequest(BaseModel):
    """
    Expense patch payload.

    Every field is optional. Which fields the client actually sent is
    read from model_fields_set, not from the values.
    """

    item_name: Optional[str] = None
    amount: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None
