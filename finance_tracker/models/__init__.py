"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.amount import parse_amount
from finance_tracker.models.common import (
    DeleteResult,
    LedgerPatch,
    LedgerRecord,
    NewLedgerRecord,
    utcnow,
)
from finance_tracker.models.user import (
    CreateUserRequest,
    NewUser,
    UpdateUserRequest,
    User,
    UserPatch,
)
from finance_tracker.models.income import (
    CreateIncomeRequest,
    Income,
    IncomePatch,
    NewIncome,
    UpdateIncomeRequest,
)
from finance_tracker.models.expense import (
    CreateExpenseRequest,
    Expense,
    ExpensePatch,
    NewExpense,
    UpdateExpenseRequest,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Amounts
    "parse_amount",
    # Shared
    "DeleteResult",
    "LedgerPatch",
    "LedgerRecord",
    "NewLedgerRecord",
    "utcnow",
    # User models
    "CreateUserRequest",
    "NewUser",
    "UpdateUserRequest",
    "User",
    "UserPatch",
    # Income models
    "CreateIncomeRequest",
    "Income",
    "IncomePatch",
    "NewIncome",
    "UpdateIncomeRequest",
    # Expense models
    "CreateExpenseRequest",
    "Expense",
    "ExpensePatch",
    "NewExpense",
    "UpdateExpenseRequest",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
