"""
Tests for request validation.
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import UUID, uuid4

from finance_tracker.errors import ValidationError
from finance_tracker.models import (
    CreateExpenseRequest,
    CreateIncomeRequest,
    CreateUserRequest,
    UpdateExpenseRequest,
    UpdateIncomeRequest,
    UpdateUserRequest,
)
from finance_tracker.validation import (
    parse_date,
    parse_uuid,
    validate_expense_update,
    validate_income_update,
    validate_new_expense,
    validate_new_income,
    validate_new_user,
    validate_user_update,
)


def _user_request(**overrides) -> CreateUserRequest:
    fields = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "password": "secret123",
    }
    fields.update(overrides)
    return CreateUserRequest(**fields)


def _income_request(**overrides) -> CreateIncomeRequest:
    fields = {
        "source": "Salary",
        "amount": "1500.00",
        "date": "2024-03-01",
        "description": "March",
    }
    fields.update(overrides)
    return CreateIncomeRequest(**fields)


class TestScalarParsers:
    """Tests for id and date parsing."""

    def test_parse_uuid(self):
        """Test a well-formed id parses."""
        raw = "9b2e4a8e-6c0b-4c39-9a36-2f1f7c3f1a10"
        assert parse_uuid(raw) == UUID(raw)

    def test_parse_uuid_passes_through_uuid(self):
        """Test an already-parsed UUID is returned as is."""
        value = uuid4()
        assert parse_uuid(value) is value

    def test_parse_uuid_rejects_garbage(self):
        """Test a malformed id names the field in the message."""
        with pytest.raises(ValidationError) as exc_info:
            parse_uuid("not-a-uuid", "income id")
        assert exc_info.value.message == "Invalid income id format"

    def test_parse_date(self):
        """Test ISO dates parse."""
        assert parse_date("2024-02-29") == date(2024, 2, 29)

    @pytest.mark.parametrize("raw", [
        "2023-02-29",
        "01/03/2024",
        "yesterday",
        "20230101",
        "2023-W01-1",
        "2023-001",
        "2023-1-5",
        "2023-01-01T00:00:00",
    ])
    def test_parse_date_rejects_invalid(self, raw):
        """Test non-ISO and impossible dates are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            parse_date(raw)
        assert exc_info.value.message == "Invalid date format, expected YYYY-MM-DD"


class TestUserValidation:
    """Tests for user payload validation."""

    def test_valid_user(self):
        """Test a valid payload becomes a NewUser with trimmed names."""
        new_user = validate_new_user(_user_request(first_name="  Ada  "))
        assert new_user.first_name == "Ada"
        assert new_user.password == "secret123"

    @pytest.mark.parametrize("overrides, message", [
        ({"first_name": "   "}, "First name cannot be empty"),
        ({"last_name": ""}, "Last name cannot be empty"),
        ({"email": "ada.example.com"}, "Invalid email format"),
        ({"email": "ada@example"}, "Invalid email format"),
        ({"password": "12345"}, "Password must be at least 6 characters long"),
    ])
    def test_invalid_user(self, overrides, message):
        """Test each rule produces its message."""
        with pytest.raises(ValidationError) as exc_info:
            validate_new_user(_user_request(**overrides))
        assert exc_info.value.message == message

    def test_first_issue_wins(self):
        """Test the message is the first issue while all issues are kept."""
        with pytest.raises(ValidationError) as exc_info:
            validate_new_user(_user_request(first_name="", email="bad"))
        error = exc_info.value
        assert error.message == "First name cannot be empty"
        assert [issue.field for issue in error.issues] == ["first_name", "email"]

    def test_update_only_checks_sent_fields(self):
        """Test an update with only a last name ignores the other rules."""
        patch = validate_user_update(UpdateUserRequest(last_name="Byron"))
        assert patch.changes() == {"last_name": "Byron"}

    def test_update_rejects_short_password(self):
        """Test the password rule also applies on update."""
        with pytest.raises(ValidationError) as exc_info:
            validate_user_update(UpdateUserRequest(password="abc"))
        assert exc_info.value.message == "Password must be at least 6 characters long"

    def test_update_rejects_explicit_null_name(self):
        """Test a required field sent as null is an error."""
        request = UpdateUserRequest.model_validate({"first_name": None})
        with pytest.raises(ValidationError) as exc_info:
            validate_user_update(request)
        assert exc_info.value.message == "First name cannot be empty"


class TestIncomeValidation:
    """Tests for income payload validation."""

    def test_valid_income(self):
        """Test a valid payload becomes a NewIncome owned by the path user."""
        owner_id = uuid4()
        new_income = validate_new_income(owner_id, _income_request())
        assert new_income.user_id == owner_id
        assert new_income.amount == Decimal("1500.00")
        assert new_income.date == date(2024, 3, 1)
        assert new_income.description == "March"

    def test_blank_description_stored_as_none(self):
        """Test a whitespace description is normalised to None."""
        new_income = validate_new_income(uuid4(), _income_request(description="   "))
        assert new_income.description is None

    @pytest.mark.parametrize("overrides, message", [
        ({"source": " "}, "Source cannot be empty"),
        ({"amount": ""}, "Amount cannot be empty"),
        ({"amount": "ten"}, "Invalid amount format"),
        ({"amount": "-3"}, "Amount must be greater than zero"),
        ({"date": ""}, "Date cannot be empty"),
        ({"date": "2024-13-01"}, "Invalid date format, expected YYYY-MM-DD"),
    ])
    def test_invalid_income(self, overrides, message):
        """Test each rule produces its message."""
        with pytest.raises(ValidationError) as exc_info:
            validate_new_income(uuid4(), _income_request(**overrides))
        assert exc_info.value.message == message

    def test_update_partial(self):
        """Test only the amount is in the patch when only the amount is sent."""
        patch = validate_income_update(UpdateIncomeRequest(amount="3.50"))
        assert patch.changes() == {"amount": Decimal("3.50")}

    def test_update_empty_amount(self):
        """Test a sent-but-empty amount has its own message."""
        with pytest.raises(ValidationError) as exc_info:
            validate_income_update(UpdateIncomeRequest(amount="  "))
        assert exc_info.value.message == "Amount cannot be empty if provided"

    def test_update_null_amount(self):
        """Test an amount sent as null is treated as empty."""
        request = UpdateIncomeRequest.model_validate({"amount": None})
        with pytest.raises(ValidationError) as exc_info:
            validate_income_update(request)
        assert exc_info.value.message == "Amount cannot be empty if provided"

    def test_update_empty_source(self):
        """Test a sent-but-empty source is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_income_update(UpdateIncomeRequest(source=""))
        assert exc_info.value.message == "Source cannot be empty"

    def test_update_null_description_clears(self):
        """Test an explicit null description ends up in the patch."""
        request = UpdateIncomeRequest.model_validate({"description": None})
        patch = validate_income_update(request)
        assert patch.changes() == {"description": None}

    def test_update_nothing_sent(self):
        """Test an empty payload is a valid, empty patch."""
        assert validate_income_update(UpdateIncomeRequest()).changes() == {}


class TestExpenseValidation:
    """Tests for expense payload validation."""

    def test_valid_expense(self):
        """Test a valid payload becomes a NewExpense."""
        request = CreateExpenseRequest(item_name=" Coffee ", amount="4.20", date="2024-03-05")
        new_expense = validate_new_expense(uuid4(), request)
        assert new_expense.item_name == "Coffee"
        assert str(new_expense.amount) == "4.20"
        assert new_expense.description is None

    def test_missing_item_name(self):
        """Test an empty item name is rejected."""
        request = CreateExpenseRequest(item_name="", amount="4.20", date="2024-03-05")
        with pytest.raises(ValidationError) as exc_info:
            validate_new_expense(uuid4(), request)
        assert exc_info.value.message == "Item name cannot be empty"

    def test_update_item_name(self):
        """Test the item name is trimmed on update."""
        patch = validate_expense_update(UpdateExpenseRequest(item_name="  Rent "))
        assert patch.changes() == {"item_name": "Rent"}

    def test_update_bad_date(self):
        """Test a malformed date is rejected on update."""
        with pytest.raises(ValidationError) as exc_info:
            validate_expense_update(UpdateExpenseRequest(date="March 5th"))
        assert exc_info.value.message == "Invalid date format, expected YYYY-MM-DD"

    def test_update_basic_format_date(self):
        """Test a compact date without dashes is rejected on update."""
        with pytest.raises(ValidationError) as exc_info:
            validate_expense_update(UpdateExpenseRequest(date="20240305"))
        assert exc_info.value.message == "Invalid date format, expected YYYY-MM-DD"
