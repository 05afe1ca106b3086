"""
SQL Storage Implementation

SQLAlchemy Core implementation of the storage interfaces. Works on any
backend that supports UPDATE/INSERT ... RETURNING (PostgreSQL, SQLite
3.35+).

Each operation is one parameterized statement. Writes run inside a
single transaction: the row we return is the row the store committed,
or nothing is committed at all.

Income and expenses share one implementation, parameterised by table,
model and label column.
"""

from datetime import datetime
from typing import Callable, Generic, TypeVar
from uuid import UUID, uuid4

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import IntegrityError

from finance_tracker.models.common import LedgerPatch, LedgerRecord, NewLedgerRecord, utcnow
from finance_tracker.models.expense import Expense, ExpensePatch, NewExpense
from finance_tracker.models.income import Income, IncomePatch, NewIncome
from finance_tracker.models.user import NewUser, User, UserPatch
from finance_tracker.services.storage import tables
from finance_tracker.services.storage.database import Database
from finance_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    IncomeStorageInterface,
    NotFoundError,
    StillReferencedError,
    UserStorageInterface,
)


Clock = Callable[[], datetime]
IdFactory = Callable[[], UUID]

RecordT = TypeVar("RecordT", bound=LedgerRecord)


class SqlUserStorage(UserStorageInterface):
    """
    Users table.

    DESIGN DECISION: Deleting a user never cascades. While the user still
    owns income or expenses the foreign keys reject the delete.
    """

    def __init__(
        self,
        database: Database,
        clock: Clock = utcnow,
        id_factory: IdFactory = uuid4,
    ):
        self._db = database
        self._clock = clock
        self._id_factory = id_factory

    async def list_users(self) -> list[User]:
        async with self._db.connect() as conn:
            result = await conn.execute(select(tables.users))
            return [User.model_validate(row) for row in result]

    async def get_user(self, user_id: UUID) -> User:
        async with self._db.connect() as conn:
            result = await conn.execute(
                select(tables.users).where(tables.users.c.id == user_id)
            )
            row = result.one_or_none()
        if row is None:
            raise NotFoundError("User not found")
        return User.model_validate(row)

    async def create_user(self, new_user: NewUser) -> User:
        now = self._clock()
        values = new_user.model_dump()
        values.update(id=self._id_factory(), created_at=now, updated_at=now)

        async with self._db.begin() as conn:
            result = await conn.execute(
                insert(tables.users).values(**values).returning(tables.users)
            )
            row = result.one()
        return User.model_validate(row)

    async def update_user(self, user_id: UUID, patch: UserPatch) -> User:
        values = patch.changes()
        values["updated_at"] = self._clock()

        async with self._db.begin() as conn:
            result = await conn.execute(
                update(tables.users)
                .where(tables.users.c.id == user_id)
                .values(**values)
                .returning(tables.users)
            )
            row = result.one_or_none()
        if row is None:
            raise NotFoundError("User not found")
        return User.model_validate(row)

    async def delete_user(self, user_id: UUID) -> int:
        async with self._db.begin() as conn:
            try:
                result = await conn.execute(
                    delete(tables.users).where(tables.users.c.id == user_id)
                )
            except IntegrityError as e:
                # Owned income/expense rows keep the user row alive
                raise StillReferencedError(
                    "User still owns income or expense records"
                ) from e
            count = result.rowcount
        if count == 0:
            raise NotFoundError("User not found")
        return count


class _SqlLedgerStorage(Generic[RecordT]):
    """Owner-scoped CRUD shared by income and expenses."""

    table: Table
    model: type[RecordT]
    not_found_message: str

    def __init__(
        self,
        database: Database,
        clock: Clock = utcnow,
        id_factory: IdFactory = uuid4,
    ):
        self._db = database
        self._clock = clock
        self._id_factory = id_factory

    def _scoped(self, record_id: UUID, owner_id: UUID):
        return (
            self.table.c.id == record_id,
            self.table.c.user_id == owner_id,
        )

    async def _list(self, owner_id: UUID) -> list[RecordT]:
        query = (
            select(self.table)
            .where(self.table.c.user_id == owner_id)
            .order_by(self.table.c.date.desc(), self.table.c.created_at.desc())
        )
        async with self._db.connect() as conn:
            result = await conn.execute(query)
            return [self.model.model_validate(row) for row in result]

    async def _get(self, record_id: UUID, owner_id: UUID) -> RecordT:
        async with self._db.connect() as conn:
            result = await conn.execute(
                select(self.table).where(*self._scoped(record_id, owner_id))
            )
            row = result.one_or_none()
        if row is None:
            raise NotFoundError(self.not_found_message)
        return self.model.model_validate(row)

    async def _create(self, new_record: NewLedgerRecord) -> RecordT:
        now = self._clock()
        values = new_record.model_dump()
        values.update(id=self._id_factory(), created_at=now, updated_at=now)

        async with self._db.begin() as conn:
            try:
                result = await conn.execute(
                    insert(self.table).values(**values).returning(self.table)
                )
            except IntegrityError as e:
                # Only the owner foreign key can be violated here
                raise NotFoundError("User not found") from e
            row = result.one()
        return self.model.model_validate(row)

    async def _update(
        self,
        record_id: UUID,
        owner_id: UUID,
        patch: LedgerPatch,
    ) -> RecordT:
        values = patch.changes()
        values["updated_at"] = self._clock()

        async with self._db.begin() as conn:
            result = await conn.execute(
                update(self.table)
                .where(*self._scoped(record_id, owner_id))
                .values(**values)
                .returning(self.table)
            )
            row = result.one_or_none()
        if row is None:
            raise NotFoundError(self.not_found_message)
        return self.model.model_validate(row)

    async def _delete(self, record_id: UUID, owner_id: UUID) -> int:
        async with self._db.begin() as conn:
            result = await conn.execute(
                delete(self.table).where(*self._scoped(record_id, owner_id))
            )
            count = result.rowcount
        if count == 0:
            raise NotFoundError(self.not_found_message)
        return count


class SqlIncomeStorage(_SqlLedgerStorage[Income], IncomeStorageInterface):
    table = tables.income
    model = Income
    not_found_message = "Income record not found"

    async def list_income(self, owner_id: UUID) -> list[Income]:
        return await self._list(owner_id)

    async def get_income(self, income_id: UUID, owner_id: UUID) -> Income:
        return await self._get(income_id, owner_id)

    async def create_income(self, new_income: NewIncome) -> Income:
        return await self._create(new_income)

    async def update_income(
        self,
        income_id: UUID,
        owner_id: UUID,
        patch: IncomePatch,
    ) -> Income:
        return await self._update(income_id, owner_id, patch)

    async def delete_income(self, income_id: UUID, owner_id: UUID) -> int:
        return await self._delete(income_id, owner_id)


class SqlExpenseStorage(_SqlLedgerStorage[Expense], ExpenseStorageInterface):
    table = tables.expenses
    model = Expense
    not_found_message = "Expense record not found"

    async def list_expenses(self, owner_id: UUID) -> list[Expense]:
        return await self._list(owner_id)

    async def get_expense(self, expense_id: UUID, owner_id: UUID) -> Expense:
        return await self._get(expense_id, owner_id)

    async def create_expense(self, new_expense: NewExpense) -> Expense:
        return await self._create(new_expense)

    async def update_expense(
        self,
        expense_id: UUID,
        owner_id: UUID,
        patch: ExpensePatch,
    ) -> Expense:
        return await self._update(expense_id, owner_id, patch)

    async def delete_expense(self, expense_id: UUID, owner_id: UUID) -> int:
        return await self._delete(expense_id, owner_id)
