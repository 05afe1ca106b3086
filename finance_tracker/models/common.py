"""
Shared shapes for owned ledger records (income and expenses).

Income and Expense differ only in their label column ("source" vs
"item_name"); everything else lives here.
"""

import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime.datetime:
    """Current UTC time as a naive datetime (the store keeps naive UTC)."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class LedgerRecord(BaseModel):
    """A persisted income or expense row."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(
        ...,
        description="Unique record identifier"
    )
    user_id: UUID = Field(
        ...,
        description="User who owns this record"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Exact positive amount"
    )
    date: datetime.date
    description: Optional[str] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime


class NewLedgerRecord(BaseModel):
    """
    Validated input for creating a record.

    No id and no timestamps: the store assigns those.
    """

    user_id: UUID
    amount: Decimal = Field(..., gt=0)
    date: datetime.date
    description: Optional[str] = None


class LedgerPatch(BaseModel):
    """
    Validated partial update.

    Only fields present in model_fields_set are written. A field that
    was never passed is left untouched; description passed as None
    clears the column.
    """

    amount: Optional[Decimal] = Field(default=None, gt=0)
    date: Optional[datetime.date] = None
    description: Optional[str] = None

    def changes(self) -> dict[str, Any]:
        """Column values to write, keyed by column name."""
        return self.model_dump(exclude_unset=True)


class DeleteResult(BaseModel):
    """Payload returned after a successful delete."""

    message: str
