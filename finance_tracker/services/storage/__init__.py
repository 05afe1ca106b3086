"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a SQLAlchemy relational backend, but designed to be swappable.
"""

from finance_tracker.services.storage.interface import (
    ConnectionError,
    ExpenseStorageInterface,
    IncomeStorageInterface,
    NotFoundError,
    StillReferencedError,
    StorageError,
    UserStorageInterface,
)
from finance_tracker.services.storage.database import Database
from finance_tracker.services.storage.sql import (
    SqlExpenseStorage,
    SqlIncomeStorage,
    SqlUserStorage,
)

__all__ = [
    # Interfaces
    "ExpenseStorageInterface",
    "IncomeStorageInterface",
    "UserStorageInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StillReferencedError",
    "StorageError",
    # SQL implementation
    "Database",
    "SqlExpenseStorage",
    "SqlIncomeStorage",
    "SqlUserStorage",
]
