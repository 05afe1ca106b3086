"""Services package."""

from finance_tracker.services.storage import (
    ConnectionError,
    Database,
    ExpenseStorageInterface,
    IncomeStorageInterface,
    NotFoundError,
    SqlExpenseStorage,
    SqlIncomeStorage,
    SqlUserStorage,
    StillReferencedError,
    StorageError,
    UserStorageInterface,
)

__all__ = [
    # Storage services
    "ConnectionError",
    "Database",
    "ExpenseStorageInterface",
    "IncomeStorageInterface",
    "NotFoundError",
    "SqlExpenseStorage",
    "SqlIncomeStorage",
    "SqlUserStorage",
    "StillReferencedError",
    "StorageError",
    "UserStorageInterface",
]
