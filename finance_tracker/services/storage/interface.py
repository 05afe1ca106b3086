"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the SQL backend without touching validation or flows
2. Use a throwaway SQLite file for testing
3. Keep business logic decoupled from storage implementation

Every income/expense operation except create takes the owner id and
filters on it. A record that exists but belongs to someone else is
reported exactly like a record that does not exist.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from finance_tracker.models.expense import Expense, ExpensePatch, NewExpense
from finance_tracker.models.income import Income, IncomePatch, NewIncome
from finance_tracker.models.user import NewUser, User, UserPatch


class UserStorageInterface(ABC):
    """
    Abstract interface for user storage operations.

    Users are not owner-scoped.
    """

    @abstractmethod
    async def list_users(self) -> list[User]:
        """
        List all users in store order.
        """
        pass

    @abstractmethod
    async def get_user(self, user_id: UUID) -> User:
        """
        Retrieve a user by ID.

        Raises:
            NotFoundError: If no user has this ID
        """
        pass

    @abstractmethod
    async def create_user(self, new_user: NewUser) -> User:
        """
        Persist a new user and return it with generated id and timestamps.

        Raises:
            StorageError: If the insert fails (nothing is persisted)
        """
        pass

    @abstractmethod
    async def update_user(self, user_id: UUID, patch: UserPatch) -> User:
        """
        Apply a partial update and refresh updated_at.

        Raises:
            NotFoundError: If no user has this ID
        """
        pass

    @abstractmethod
    async def delete_user(self, user_id: UUID) -> int:
        """
        Delete the user row only. Income and expense rows are never
        removed as a side effect.

        Returns:
            Number of user rows deleted (always 1 on success)

        Raises:
            NotFoundError: If no user has this ID
            StillReferencedError: If the user still owns income or expenses
        """
        pass


class IncomeStorageInterface(ABC):
    """Abstract interface for owner-scoped income storage."""

    @abstractmethod
    async def list_income(self, owner_id: UUID) -> list[Income]:
        """
        List one user's income, most recent date first.
        """
        pass

    @abstractmethod
    async def get_income(self, income_id: UUID, owner_id: UUID) -> Income:
        """
        Raises:
            NotFoundError: If no income matches both id and owner
        """
        pass

    @abstractmethod
    async def create_income(self, new_income: NewIncome) -> Income:
        """
        Raises:
            NotFoundError: If the owning user does not exist
        """
        pass

    @abstractmethod
    async def update_income(
        self,
        income_id: UUID,
        owner_id: UUID,
        patch: IncomePatch,
    ) -> Income:
        """
        Raises:
            NotFoundError: If no income matches both id and owner
        """
        pass

    @abstractmethod
    async def delete_income(self, income_id: UUID, owner_id: UUID) -> int:
        """
        Returns:
            Number of rows deleted (always 1 on success)

        Raises:
            NotFoundError: If no income matches both id and owner
        """
        pass


class ExpenseStorageInterface(ABC):
    """Abstract interface for owner-scoped expense storage."""

    @abstractmethod
    async def list_expenses(self, owner_id: UUID) -> list[Expense]:
        pass

    @abstractmethod
    async def get_expense(self, expense_id: UUID, owner_id: UUID) -> Expense:
        pass

    @abstractmethod
    async def create_expense(self, new_expense: NewExpense) -> Expense:
        pass

    @abstractmethod
    async def update_expense(
        self,
        expense_id: UUID,
        owner_id: UUID,
        patch: ExpensePatch,
    ) -> Expense:
        pass

    @abstractmethod
    async def delete_expense(self, expense_id: UUID, owner_id: UUID) -> int:
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage (or not visible to this owner)."""
    pass


class ConnectionError(StorageError):
    """Could not reach the store or get a connection from the pool."""
    pass


class StillReferencedError(StorageError):
    """A row cannot be deleted while other rows still point at it."""
    pass
