"""
Income Models

Persisted shape, validated create/patch inputs, and the raw request
payloads as they arrive from the client (amount and date still strings).
"""

from typing import Optional

from pydantic import BaseModel, Field

from finance_tracker.models.common import LedgerPatch, LedgerRecord, NewLedgerRecord


class Income(LedgerRecord):
    """An income record owned by one user."""

    source: str = Field(
        ...,
        min_length=1,
        description="Source of the income (e.g., 'Salary', 'Freelance')"
    )


class NewIncome(NewLedgerRecord):
    source: str = Field(..., min_length=1)


class IncomePatch(LedgerPatch):
    source: Optional[str] = Field(default=None, min_length=1)


class CreateIncomeRequest(BaseModel):
    """Income creation payload; amount is validated and converted later."""

    source: str
    amount: str = Field(
        ...,
        description="Amount as a decimal string, e.g. '1500.00'"
    )
    date: str = Field(
        ...,
        description="Date received, YYYY-MM-DD"
    )
    description: Optional[str] = None


class UpdateIncomeRequest(BaseModel):
    """
    Income patch payload.

    Every field is optional. Which fields the client actually sent is
    read from model_fields_set, not from the values.
    """

    source: Optional[str] = None
    amount: Optional[str] = None
    date: Optional[str] = None
    description: Optional[str] = None
