"""Contract tests for the /api/orders endpoints.

Test categories:
- POST /api/orders (201, 400, 422)
- GET /api/orders/{order_id} (200, 404)
- GET /api/orders?status= (200, 422)
"""

from decimal import Decimal
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient
from starlette.status import (
    HTTP_200_OK,
    HTTP_201_CREATED,
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
)

from api.main import app

ORDER_BODY = {
    "game_name": "Mobile Legends",
    "package_name": "86 Diamonds",
    "player_id": "123456789",
    "server_id": "2001",
    "amount": "1.50",
}


@pytest.fixture
def client(dynamodb_tables: Any) -> TestClient:
    return TestClient(app)


class TestCreateOrder:
    def test_creates_pending_order(
        self, client: TestClient, stored_order: Callable[[str], dict | None]
    ):
        response = client.post("/api/orders", json=ORDER_BODY)

        assert response.status_code == HTTP_201_CREATED
        data = response.json()
        assert data["status"] == "pending"
        assert Decimal(data["amount"]) == Decimal("1.50")
        assert data["currency"] == "USD"
        assert data["status_message"] == "Awaiting payment."
        assert stored_order(data["id"])["status"] == "pending"

    def test_rejects_non_initial_status(self, client: TestClient):
        response = client.post("/api/orders", json={**ORDER_BODY, "status": "completed"})

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json() == {"status": "error", "message": "Order status is not valid"}

    def test_rejects_missing_player(self, client: TestClient):
        body = {k: v for k, v in ORDER_BODY.items() if k != "player_id"}

        response = client.post("/api/orders", json=body)

        assert response.status_code == HTTP_422_UNPROCESSABLE_ENTITY


class TestGetOrder:
    def test_returns_order(self, client: TestClient, make_order: Callable[..., dict]):
        make_order("ord_1", status="pending_manual", status_message="Manual processing required.")

        response = client.get("/api/orders/ord_1")

        assert response.status_code == HTTP_200_OK
        data = response.json()
        assert data["id"] == "ord_1"
        assert data["status"] == "pending_manual"
        assert data["status_message"] == "Manual processing required."

    def test_unknown_order(self, client: TestClient):
        response = client.get("/api/orders/nope")

        assert response.status_code == HTTP_404_NOT_FOUND
        assert response.json() == {
            "status": "error",
            "message": "Order not found or could not be resolved.",
        }


class TestListOrders:
    def test_lists_by_status(self, client: TestClient, make_order: Callable[..., dict]):
        make_order("a", status="pending_manual")
        make_order("b", status="processing")

        response = client.get("/api/orders", params={"status": "pending_manual"})

        assert response.status_code == HTTP_200_OK
        data = response.json()
        assert data["status"] == "pending_manual"
        assert data["count"] == 1
        assert [o["id"] for o in data["orders"]] == ["a"]

    def test_status_is_required(self, client: TestClient):
        assert client.get("/api/orders").status_code == HTTP_422_UNPROCESSABLE_ENTITY

    def test_unknown_status_rejected(self, client: TestClient):
        response = client.get("/api/orders", params={"status": "refunded"})

        assert response.status_code == HTTP_422_UNPROCESSABLE_ENTITY
