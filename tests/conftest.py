"""
Shared fixtures.

Every test that touches the store gets its own SQLite file under
tmp_path, so tests never see each other's rows.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from uuid import UUID

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from finance_tracker.models import NewExpense, NewIncome, NewUser
from finance_tracker.services.storage import (
    Database,
    SqlExpenseStorage,
    SqlIncomeStorage,
    SqlUserStorage,
)


class TickingClock:
    """Clock that advances one second per call, so created_at values never tie."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest_asyncio.fixture
async def database(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'finance.db'}")
    db = Database(engine)
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
def user_storage(database, clock) -> SqlUserStorage:
    return SqlUserStorage(database, clock=clock)


@pytest.fixture
def income_storage(database, clock) -> SqlIncomeStorage:
    return SqlIncomeStorage(database, clock=clock)


@pytest.fixture
def expense_storage(database, clock) -> SqlExpenseStorage:
    return SqlExpenseStorage(database, clock=clock)


def make_new_user(first_name: str = "Ada", email: str = "ada@example.com") -> NewUser:
    return NewUser(
        first_name=first_name,
        last_name="Lovelace",
        email=email,
        password="secret123",
    )


def make_new_income(
    owner_id: UUID,
    amount: str = "1500.00",
    on: date = date(2024, 3, 1),
    source: str = "Salary",
) -> NewIncome:
    return NewIncome(
        user_id=owner_id,
        source=source,
        amount=Decimal(amount),
        date=on,
        description="Monthly pay",
    )


def make_new_expense(
    owner_id: UUID,
    amount: str = "45.99",
    on: date = date(2024, 3, 2),
    item_name: str = "Groceries",
) -> NewExpense:
    return NewExpense(
        user_id=owner_id,
        item_name=item_name,
        amount=Decimal(amount),
        date=on,
    )


@pytest_asyncio.fixture
async def alice(user_storage):
    return await user_storage.create_user(make_new_user("Alice", "alice@example.com"))


@pytest_asyncio.fixture
async def bob(user_storage):
    return await user_storage.create_user(make_new_user("Bob", "bob@example.com"))
