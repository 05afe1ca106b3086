"""
Tests for the HTTP surface.

The app is started through its lifespan against a SQLite file in tmp_path.
"""

import pytest
from uuid import uuid4

from fastapi.testclient import TestClient

from finance_tracker.config import get_settings


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    get_settings.cache_clear()

    from app.main import app

    with TestClient(app) as test_client:
        yield test_client

    get_settings.cache_clear()


@pytest.fixture
def user_id(client) -> str:
    response = client.post("/api/users", json={
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "password": "secret123",
    })
    return response.json()["data"]["id"]


class TestHealth:
    """Tests for the liveness endpoint."""

    def test_health(self, client):
        """Test the service reports ok."""
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["settings"] == {"database": True, "app": True}


class TestUserRoutes:
    """Tests for /api/users."""

    def test_create_user(self, client):
        """Test POST returns 201 and the envelope."""
        response = client.post("/api/users", json={
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@example.com",
            "password": "secret123",
        })
        body = response.json()

        assert response.status_code == 201
        assert body["success"] is True
        assert body["status"] == 201
        assert "password" not in body["data"]

    def test_create_user_invalid(self, client):
        """Test a failing rule returns 400 with the validation kind."""
        response = client.post("/api/users", json={
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@example.com",
            "password": "123",
        })
        body = response.json()

        assert response.status_code == 400
        assert body["error"]["kind"] == "validation"
        assert body["error"]["message"] == "Password must be at least 6 characters long"

    def test_missing_body_field(self, client):
        """Test a body missing a required key gets the validation envelope."""
        response = client.post("/api/users", json={"first_name": "Ada"})
        body = response.json()

        assert response.status_code == 400
        assert body["success"] is False
        assert body["error"]["kind"] == "validation"
        assert body["error"]["details"]

    def test_malformed_json(self, client):
        """Test a body that is not JSON gets the validation envelope."""
        response = client.post(
            "/api/users",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "validation"

    def test_get_user(self, client, user_id):
        """Test GET returns the stored user."""
        response = client.get(f"/api/users/{user_id}")
        assert response.status_code == 200
        assert response.json()["data"]["email"] == "ada@example.com"

    def test_get_unknown_user(self, client):
        """Test GET on an unknown id returns 404."""
        response = client.get(f"/api/users/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"] == {
            "kind": "not_found",
            "message": "User not found",
            "details": [],
        }

    def test_get_malformed_id(self, client):
        """Test GET on a malformed id returns 400."""
        response = client.get("/api/users/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid user id format"

    def test_patch_user(self, client, user_id):
        """Test PATCH changes only the sent field."""
        response = client.patch(f"/api/users/{user_id}", json={"first_name": "Augusta"})
        data = response.json()["data"]
        assert response.status_code == 200
        assert data["first_name"] == "Augusta"
        assert data["last_name"] == "Lovelace"

    def test_delete_user(self, client, user_id):
        """Test DELETE removes a user who owns no records."""
        response = client.delete(f"/api/users/{user_id}")
        assert response.status_code == 200
        assert response.json()["data"] == {"message": "User deleted successfully"}
        assert client.get(f"/api/users/{user_id}").status_code == 404

    def test_delete_user_with_records_rejected(self, client, user_id):
        """Test DELETE is refused while the user owns income, and the income survives."""
        created = client.post(f"/api/users/{user_id}/income", json={
            "source": "Salary",
            "amount": "100",
            "date": "2024-03-01",
        })
        income_id = created.json()["data"]["id"]

        response = client.delete(f"/api/users/{user_id}")
        assert response.status_code == 500
        assert response.json()["error"]["kind"] == "internal"

        assert client.get(f"/api/users/{user_id}").status_code == 200
        remaining = client.get(f"/api/users/{user_id}/income").json()["data"]
        assert [record["id"] for record in remaining] == [income_id]

        client.delete(f"/api/users/{user_id}/income/{income_id}")
        assert client.delete(f"/api/users/{user_id}").status_code == 200


class TestLedgerRoutes:
    """Tests for the income and expense routes."""

    def test_income_lifecycle(self, client, user_id):
        """Test create, read, patch and delete of an income record."""
        created = client.post(f"/api/users/{user_id}/income", json={
            "source": "Freelance",
            "amount": "3.50",
            "date": "2024-03-01",
            "description": "Invoice 12",
        })
        assert created.status_code == 201
        income_id = created.json()["data"]["id"]
        base = f"/api/users/{user_id}/income/{income_id}"

        fetched = client.get(base).json()["data"]
        assert fetched["amount"] == "3.50"
        assert fetched["description"] == "Invoice 12"

        patched = client.patch(base, json={"description": None})
        assert patched.status_code == 200
        assert patched.json()["data"]["description"] is None
        assert patched.json()["data"]["amount"] == "3.50"

        deleted = client.delete(base)
        assert deleted.json()["data"] == {"message": "Income record deleted successfully"}
        assert client.get(base).status_code == 404

    def test_income_invalid_amount(self, client, user_id):
        """Test a zero amount is rejected."""
        response = client.post(f"/api/users/{user_id}/income", json={
            "source": "Salary",
            "amount": "0",
            "date": "2024-03-01",
        })
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Amount must be greater than zero"

    def test_expense_list_order(self, client, user_id):
        """Test expenses are listed newest date first."""
        for day, name in (("2024-01-05", "Books"), ("2024-02-05", "Rent")):
            client.post(f"/api/users/{user_id}/expenses", json={
                "item_name": name,
                "amount": "20.00",
                "date": day,
            })
        response = client.get(f"/api/users/{user_id}/expenses")
        names = [e["item_name"] for e in response.json()["data"]]
        assert names == ["Rent", "Books"]

    def test_expense_isolated_between_users(self, client, user_id):
        """Test one user cannot see another user's expense."""
        created = client.post(f"/api/users/{user_id}/expenses", json={
            "item_name": "Coffee",
            "amount": "4.20",
            "date": "2024-03-05",
        })
        expense_id = created.json()["data"]["id"]
        other = client.post("/api/users", json={
            "first_name": "Eve",
            "last_name": "Snoop",
            "email": "eve@example.com",
            "password": "password",
        }).json()["data"]["id"]

        response = client.get(f"/api/users/{other}/expenses/{expense_id}")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Expense record not found"
        assert client.get(f"/api/users/{other}/expenses").json()["data"] == []

    def test_expense_patch_empty_amount(self, client, user_id):
        """Test a sent-but-empty amount is rejected on update."""
        created = client.post(f"/api/users/{user_id}/expenses", json={
            "item_name": "Coffee",
            "amount": "4.20",
            "date": "2024-03-05",
        })
        expense_id = created.json()["data"]["id"]

        response = client.patch(
            f"/api/users/{user_id}/expenses/{expense_id}",
            json={"amount": ""},
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Amount cannot be empty if provided"
