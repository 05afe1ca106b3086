"""
Main Orchestrator for Finance Tracker

This module ties together all the components and defines the
request flows for users, income and expenses:

    raw path ids + request DTO
        -> parse ids (UUID)
        -> validate payload
        -> one storage call
        -> envelope

DESIGN DECISION: The orchestrator is the only place exceptions are
turned into envelopes. Validation and storage raise; flows catch, log
and classify. Each request yields exactly one error kind.

Owner ids are taken from the path as given. There is no authenticated
principal to check them against.
"""

from typing import NamedTuple, Optional
from uuid import UUID

from finance_tracker.api.responses import Envelope, classify, created, from_exception, ok
from finance_tracker.audit import AuditLogger, configure_logging, create_correlation_id
from finance_tracker.config import Settings, get_settings
from finance_tracker.errors import ErrorKind
from finance_tracker.models.common import DeleteResult
from finance_tracker.models.expense import CreateExpenseRequest, UpdateExpenseRequest
from finance_tracker.models.income import CreateIncomeRequest, UpdateIncomeRequest
from finance_tracker.models.user import CreateUserRequest, UpdateUserRequest
from finance_tracker.services.storage import (
    Database,
    ExpenseStorageInterface,
    IncomeStorageInterface,
    SqlExpenseStorage,
    SqlIncomeStorage,
    SqlUserStorage,
    UserStorageInterface,
)
from finance_tracker.validation import (
    parse_uuid,
    validate_expense_update,
    validate_income_update,
    validate_new_expense,
    validate_new_income,
    validate_new_user,
    validate_user_update,
)


class _Flow:
    """Shared failure handling for all flows."""

    entity_type: str = ""

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit_logger = audit_logger or AuditLogger()

    def _fail(self, error: Exception, correlation_id: UUID) -> Envelope:
        """Log the failure according to its kind and build the error envelope."""
        kind = classify(error)

        if kind is ErrorKind.VALIDATION:
            self._audit_logger.log_validation_failed(
                entity_type=self.entity_type,
                message=error.message,
                issues=[issue.model_dump() for issue in error.issues],
                correlation_id=correlation_id,
            )
        elif kind is ErrorKind.NOT_FOUND:
            self._audit_logger.log_not_found(
                entity_type=self.entity_type,
                message=str(error),
                correlation_id=correlation_id,
            )
        else:
            self._audit_logger.log_internal_error(
                entity_type=self.entity_type,
                error=error,
                correlation_id=correlation_id,
            )

        return from_exception(error)


class UserFlow(_Flow):
    """User CRUD. Users are not owner-scoped."""

    entity_type = "user"

    def __init__(
        self,
        storage: UserStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(audit_logger)
        self._storage = storage

    async def list_users(self) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            users = await self._storage.list_users()
        except Exception as e:
            return self._fail(e, correlation_id)
        return ok(users)

    async def get_user(self, raw_user_id: str) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            user_id = parse_uuid(raw_user_id, "user id")
            user = await self._storage.get_user(user_id)
        except Exception as e:
            return self._fail(e, correlation_id)
        return ok(user)

    async def create_user(self, request: CreateUserRequest) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            new_user = validate_new_user(request)
            user = await self._storage.create_user(new_user)
        except Exception as e:
            return self._fail(e, correlation_id)

        self._audit_logger.log_record_created(
            entity_type=self.entity_type,
            entity_id=user.id,
            owner_id=None,
            correlation_id=correlation_id,
        )
        return created(user)

    async def update_user(self, raw_user_id: str, request: UpdateUserRequest) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            user_id = parse_uuid(raw_user_id, "user id")
            patch = validate_user_update(request)
            user = await self._storage.update_user(user_id, patch)
        except Exception as e:
            return self._fail(e, correlation_id)

        self._audit_logger.log_record_updated(
            entity_type=self.entity_type,
            entity_id=user.id,
            owner_id=None,
            fields=sorted(patch.model_fields_set),
            correlation_id=correlation_id,
        )
        return ok(user)

    async def delete_user(self, raw_user_id: str) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            user_id = parse_uuid(raw_user_id, "user id")
            await self._storage.delete_user(user_id)
        except Exception as e:
            return self._fail(e, correlation_id)

        self._audit_logger.log_record_deleted(
            entity_type=self.entity_type,
            entity_id=user_id,
            owner_id=None,
            correlation_id=correlation_id,
        )
        return ok(DeleteResult(message="User deleted successfully"))


class IncomeFlow(_Flow):
    """Income CRUD, always scoped to the user id in the path."""

    entity_type = "income"

    def __init__(
        self,
        storage: IncomeStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(audit_logger)
        self._storage = storage

    async def list_income(self, raw_user_id: str) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            owner_id = parse_uuid(raw_user_id, "user id")
            records = await self._storage.list_income(owner_id)
        except Exception as e:
            return self._fail(e, correlation_id)
        return ok(records)

    async def get_income(self, raw_user_id: str, raw_income_id: str) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            owner_id = parse_uuid(raw_user_id, "user id")
            income_id = parse_uuid(raw_income_id, "income id")
            record = await self._storage.get_income(income_id, owner_id)
        except Exception as e:
            return self._fail(e, correlation_id)
        return ok(record)

    async def create_income(
        self,
        raw_user_id: str,
        request: CreateIncomeRequest,
    ) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            owner_id = parse_uuid(raw_user_id, "user id")
            new_income = validate_new_income(owner_id, request)
            record = await self._storage.create_income(new_income)
        except Exception as e:
            return self._fail(e, correlation_id)

        self._audit_logger.log_record_created(
            entity_type=self.entity_type,
            entity_id=record.id,
            owner_id=owner_id,
            correlation_id=correlation_id,
        )
        return created(record)

    async def update_income(
        self,
        raw_user_id: str,
        raw_income_id: str,
        request: UpdateIncomeRequest,
    ) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            owner_id = parse_uuid(raw_user_id, "user id")
            income_id = parse_uuid(raw_income_id, "income id")
            patch = validate_income_update(request)
            record = await self._storage.update_income(income_id, owner_id, patch)
        except Exception as e:
            return self._fail(e, correlation_id)

        self._audit_logger.log_record_updated(
            entity_type=self.entity_type,
            entity_id=record.id,
            owner_id=owner_id,
            fields=sorted(patch.model_fields_set),
            correlation_id=correlation_id,
        )
        return ok(record)

    async def delete_income(self, raw_user_id: str, raw_income_id: str) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            owner_id = parse_uuid(raw_user_id, "user id")
            income_id = parse_uuid(raw_income_id, "income id")
            await self._storage.delete_income(income_id, owner_id)
        except Exception as e:
            return self._fail(e, correlation_id)

        self._audit_logger.log_record_deleted(
            entity_type=self.entity_type,
            entity_id=income_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
        )
        return ok(DeleteResult(message="Income record deleted successfully"))


class ExpenseFlow(_Flow):
    """Expense CRUD, always scoped to the user id in the path."""

    entity_type = "expense"

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(audit_logger)
        self._storage = storage

    async def list_expenses(self, raw_user_id: str) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            owner_id = parse_uuid(raw_user_id, "user id")
            records = await self._storage.list_expenses(owner_id)
        except Exception as e:
            return self._fail(e, correlation_id)
        return ok(records)

    async def get_expense(self, raw_user_id: str, raw_expense_id: str) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            owner_id = parse_uuid(raw_user_id, "user id")
            expense_id = parse_uuid(raw_expense_id, "expense id")
            record = await self._storage.get_expense(expense_id, owner_id)
        except Exception as e:
            return self._fail(e, correlation_id)
        return ok(record)

    async def create_expense(
        self,
        raw_user_id: str,
        request: CreateExpenseRequest,
    ) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            owner_id = parse_uuid(raw_user_id, "user id")
            new_expense = validate_new_expense(owner_id, request)
            record = await self._storage.create_expense(new_expense)
        except Exception as e:
            return self._fail(e, correlation_id)

        self._audit_logger.log_record_created(
            entity_type=self.entity_type,
            entity_id=record.id,
            owner_id=owner_id,
            correlation_id=correlation_id,
        )
        return created(record)

    async def update_expense(
        self,
        raw_user_id: str,
        raw_expense_id: str,
        request: UpdateExpenseRequest,
    ) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            owner_id = parse_uuid(raw_user_id, "user id")
            expense_id = parse_uuid(raw_expense_id, "expense id")
            patch = validate_expense_update(request)
            record = await self._storage.update_expense(expense_id, owner_id, patch)
        except Exception as e:
            return self._fail(e, correlation_id)

        self._audit_logger.log_record_updated(
            entity_type=self.entity_type,
            entity_id=record.id,
            owner_id=owner_id,
            fields=sorted(patch.model_fields_set),
            correlation_id=correlation_id,
        )
        return ok(record)

    async def delete_expense(self, raw_user_id: str, raw_expense_id: str) -> Envelope:
        correlation_id = create_correlation_id()
        try:
            owner_id = parse_uuid(raw_user_id, "user id")
            expense_id = parse_uuid(raw_expense_id, "expense id")
            await self._storage.delete_expense(expense_id, owner_id)
        except Exception as e:
            return self._fail(e, correlation_id)

        self._audit_logger.log_record_deleted(
            entity_type=self.entity_type,
            entity_id=expense_id,
            owner_id=owner_id,
            correlation_id=correlation_id,
        )
        return ok(DeleteResult(message="Expense record deleted successfully"))


class AppComponents(NamedTuple):
    database: Database
    audit_logger: AuditLogger
    users: UserFlow
    income: IncomeFlow
    expenses: ExpenseFlow


def create_app_components(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to build from. Defaults to get_settings().
        database: An existing pool handle. Built from settings if None.

    Returns:
        AppComponents with the pool handle, audit logger and one flow per entity
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    database = database or Database.from_settings(settings.database)
    audit_logger = AuditLogger()

    return AppComponents(
        database=database,
        audit_logger=audit_logger,
        users=UserFlow(SqlUserStorage(database), audit_logger),
        income=IncomeFlow(SqlIncomeStorage(database), audit_logger),
        expenses=ExpenseFlow(SqlExpenseStorage(database), audit_logger),
    )


async def start_store(components: AppComponents) -> None:
    """
    Startup check: reach the store and create missing tables.

    Retries transient connection failures; raises if the store stays down.
    """
    await components.database.ping()
    await components.database.create_schema()
    components.audit_logger.log_store_connected(components.database.url)
