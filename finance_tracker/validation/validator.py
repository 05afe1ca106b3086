"""
Request Validation

Turns raw request payloads into validated domain inputs, or raises a
ValidationError. Runs before any store access: a request that fails here
never opens a connection.

CREATE payloads:
- Required text fields must be non-empty after trimming
- Amount goes through parse_amount()
- Dates are ISO YYYY-MM-DD
- Email must contain '@' and '.'
- Password must be at least 6 characters

UPDATE payloads:
- Only fields the client actually sent are checked
- An absent field is left untouched and never an error
- A sent-but-empty required field IS an error, same as on create

IMPORTANT: Validation never silently fixes values beyond trimming
surrounding whitespace from text fields.
"""

import re
from datetime import date
from typing import Any, Optional
from uuid import UUID

from finance_tracker.errors import ValidationError, ValidationIssue
from finance_tracker.models.amount import parse_amount
from finance_tracker.models.expense import (
    CreateExpenseRequest,
    ExpensePatch,
    NewExpense,
    UpdateExpenseRequest,
)
from finance_tracker.models.income import (
    CreateIncomeRequest,
    IncomePatch,
    NewIncome,
    UpdateIncomeRequest,
)
from finance_tracker.models.user import (
    CreateUserRequest,
    NewUser,
    UpdateUserRequest,
    UserPatch,
)


MIN_PASSWORD_LENGTH = 6

# Calendar dates only; fromisoformat alone also takes 20240301 and 2024-W09-5
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# =============================================================================
# SCALAR PARSERS
# =============================================================================

def parse_uuid(raw: Any, field: str = "id") -> UUID:
    """Parse a path identifier. Raises ValidationError on malformed input."""
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw).strip())
    except (ValueError, AttributeError, TypeError):
        raise ValidationError(
            f"Invalid {field} format",
            [ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=f"Invalid {field} format",
            )],
        )


def parse_date(raw: Any, field: str = "date") -> date:
    """Parse an ISO calendar date (YYYY-MM-DD)."""
    result = _check_date(raw, field)
    if isinstance(result, ValidationIssue):
        raise ValidationError.from_issues([result])
    return result


# =============================================================================
# FIELD CHECKS - each returns a value or a ValidationIssue
# =============================================================================

def _check_text(value: Optional[str], field: str, label: str):
    if value is None or not value.strip():
        return ValidationIssue(
            field=field,
            issue_type="empty",
            message=f"{label} cannot be empty",
        )
    return value.strip()


def _check_amount(value: Optional[str], on_update: bool = False):
    if on_update and (value is None or not value.strip()):
        return ValidationIssue(
            field="amount",
            issue_type="empty",
            message="Amount cannot be empty if provided",
        )
    parsed = parse_amount(value)
    if isinstance(parsed, ValidationError):
        return ValidationIssue(
            field="amount",
            issue_type="invalid_value",
            message=parsed.message,
        )
    return parsed


def _check_date(value: Any, field: str = "date"):
    if isinstance(value, date):
        return value
    if value is None or not str(value).strip():
        return ValidationIssue(
            field=field,
            issue_type="empty",
            message="Date cannot be empty",
        )
    text = str(value).strip()
    try:
        if not _DATE_PATTERN.match(text):
            raise ValueError(text)
        return date.fromisoformat(text)
    except ValueError:
        return ValidationIssue(
            field=field,
            issue_type="invalid_format",
            message="Invalid date format, expected YYYY-MM-DD",
        )


def _check_email(value: Optional[str]):
    if value is None or "@" not in value or "." not in value:
        return ValidationIssue(
            field="email",
            issue_type="invalid_format",
            message="Invalid email format",
        )
    return value.strip()


def _check_password(value: Optional[str]):
    if value is None or len(value) < MIN_PASSWORD_LENGTH:
        return ValidationIssue(
            field="password",
            issue_type="too_short",
            message=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )
    return value


def _collect(checks: dict[str, Any]) -> dict[str, Any]:
    """
    Split check results into values and issues.

    Raises ValidationError carrying every issue, with the first one
    (in field order) as the message.
    """
    issues = [v for v in checks.values() if isinstance(v, ValidationIssue)]
    if issues:
        raise ValidationError.from_issues(issues)
    return checks


# =============================================================================
# USERS
# =============================================================================

def validate_new_user(request: CreateUserRequest) -> NewUser:
    values = _collect({
        "first_name": _check_text(request.first_name, "first_name", "First name"),
        "last_name": _check_text(request.last_name, "last_name", "Last name"),
        "email": _check_email(request.email),
        "password": _check_password(request.password),
    })
    return NewUser(**values)


def validate_user_update(request: UpdateUserRequest) -> UserPatch:
    sent = request.model_fields_set
    checks: dict[str, Any] = {}

    if "first_name" in sent:
        checks["first_name"] = _check_text(request.first_name, "first_name", "First name")
    if "last_name" in sent:
        checks["last_name"] = _check_text(request.last_name, "last_name", "Last name")
    if "email" in sent:
        checks["email"] = _check_email(request.email)
    if "password" in sent:
        checks["password"] = _check_password(request.password)

    return UserPatch(**_collect(checks))


# =============================================================================
# INCOME / EXPENSES
# =============================================================================

def _check_description(value: Optional[str]) -> Optional[str]:
    # Blank descriptions are stored as NULL
    if value is None or not value.strip():
        return None
    return value.strip()


def validate_new_income(owner_id: UUID, request: CreateIncomeRequest) -> NewIncome:
    values = _collect({
        "source": _check_text(request.source, "source", "Source"),
        "amount": _check_amount(request.amount),
        "date": _check_date(request.date),
    })
    return NewIncome(
        user_id=owner_id,
        description=_check_description(request.description),
        **values,
    )


def validate_new_expense(owner_id: UUID, request: CreateExpenseRequest) -> NewExpense:
    values = _collect({
        "item_name": _check_text(request.item_name, "item_name", "Item name"),
        "amount": _check_amount(request.amount),
        "date": _check_date(request.date),
    })
    return NewExpense(
        user_id=owner_id,
        description=_check_description(request.description),
        **values,
    )


def _ledger_patch_checks(request, label_field: str, label: str) -> dict[str, Any]:
    sent = request.model_fields_set
    checks: dict[str, Any] = {}

    if label_field in sent:
        checks[label_field] = _check_text(getattr(request, label_field), label_field, label)
    if "amount" in sent:
        checks["amount"] = _check_amount(request.amount, on_update=True)
    if "date" in sent:
        checks["date"] = _check_date(request.date)

    values = _collect(checks)
    if "description" in sent:
        values["description"] = _check_description(request.description)
    return values


def validate_income_update(request: UpdateIncomeRequest) -> IncomePatch:
    return IncomePatch(**_ledger_patch_checks(request, "source", "Source"))


def validate_expense_update(request: UpdateExpenseRequest) -> ExpensePatch:
    return ExpensePatch(**_ledger_patch_checks(request, "item_name", "Item name"))

