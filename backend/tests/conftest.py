"""Pytest configuration and fixtures for the top-up backend tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto (orders and payment-gateways tables)
- Gateway secret and sample order fixtures
- A mocked fulfillment dispatcher
"""

import os
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Generator
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "ap-southeast-1")
os.environ["DYNAMODB_TABLE_PREFIX"] = "test-topup"
os.environ.setdefault("FULFILLMENT_FUNCTION_NAME", "test-topup-process-topup")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

TEST_REGION = os.environ["AWS_DEFAULT_REGION"]
TEST_WEBHOOK_SECRET = "whsec_ikhode_test_secret"


# === Service Singletons ===


@pytest.fixture(autouse=True)
def reset_service_singletons() -> Generator[None, None, None]:
    """Reset cached services before and after each test.

    Services built inside a mock_aws context must not leak into the next
    test, where the mock (and its tables) no longer exist.
    """
    from api.dependencies import reset_services

    reset_services()
    yield
    reset_services()


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = TEST_REGION


@pytest.fixture
def dynamodb_tables(aws_credentials: None) -> Generator[Any, None, None]:
    """Create the orders and payment-gateways tables inside mock_aws."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name=TEST_REGION)

        client.create_table(
            TableName="test-topup-orders",
            KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
            AttributeDefinitions=[
                {"AttributeName": "id", "AttributeType": "S"},
                {"AttributeName": "status", "AttributeType": "S"},
            ],
            GlobalSecondaryIndexes=[
                {
                    "IndexName": "status-index",
                    "KeySchema": [{"AttributeName": "status", "KeyType": "HASH"}],
                    "Projection": {"ProjectionType": "ALL"},
                },
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        client.create_table(
            TableName="test-topup-payment-gateways",
            KeySchema=[{"AttributeName": "slug", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "slug", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )

        yield boto3.resource("dynamodb", region_name=TEST_REGION)


@pytest.fixture
def orders_table(dynamodb_tables: Any) -> Any:
    """The mocked orders table resource."""
    return dynamodb_tables.Table("test-topup-orders")


@pytest.fixture
def gateway_secret(dynamodb_tables: Any) -> str:
    """Configure the ikhode-bakong gateway with a webhook secret."""
    dynamodb_tables.Table("test-topup-payment-gateways").put_item(
        Item={
            "slug": "ikhode-bakong",
            "name": "Ikhode Bakong KHQR",
            "config": {"webhook_secret": TEST_WEBHOOK_SECRET},
        }
    )
    return TEST_WEBHOOK_SECRET


@pytest.fixture
def make_order(orders_table: Any) -> Callable[..., dict[str, Any]]:
    """Factory that stores an order row and returns it."""

    def _make(
        order_id: str = "ord_1",
        status: str = "pending",
        amount: Decimal = Decimal("5.00"),
        **fields: Any,
    ) -> dict[str, Any]:
        now = datetime.now(timezone.utc).isoformat()
        item = {
            "id": order_id,
            "status": status,
            "amount": amount,
            "currency": "USD",
            "game_name": "Mobile Legends",
            "package_name": "86 Diamonds",
            "player_id": "123456789",
            "status_message": "Awaiting payment.",
            "created_at": now,
            "updated_at": now,
            **fields,
        }
        orders_table.put_item(Item=item)
        return item

    return _make


@pytest.fixture
def stored_order(orders_table: Any) -> Callable[[str], dict[str, Any] | None]:
    """Read an order row straight from the table."""

    def _get(order_id: str) -> dict[str, Any] | None:
        return orders_table.get_item(Key={"id": order_id}, ConsistentRead=True).get("Item")

    return _get


# === Fulfillment Fixtures ===


@pytest.fixture
def mock_dispatcher() -> MagicMock:
    """Fulfillment dispatcher whose dispatch() succeeds by default."""
    from shared.models import FulfillmentResult
    from shared.services.fulfillment import FulfillmentDispatcher

    dispatcher = MagicMock(spec=FulfillmentDispatcher)
    dispatcher.dispatch.return_value = FulfillmentResult(success=True)
    return dispatcher
