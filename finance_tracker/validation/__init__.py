"""Request validation package."""

from finance_tracker.validation.validator import (
    parse_date,
    parse_uuid,
    validate_expense_update,
    validate_income_update,
    validate_new_expense,
    validate_new_income,
    validate_new_user,
    validate_user_update,
)

__all__ = [
    "parse_date",
    "parse_uuid",
    "validate_expense_update",
    "validate_income_update",
    "validate_new_expense",
    "validate_new_income",
    "validate_new_user",
    "validate_user_update",
]
