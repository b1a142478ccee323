"""Unit tests for GatewayConfigService."""

from typing import Any

import pytest

from shared.services.dynamodb import DynamoDBService
from shared.services.gateway_config import GatewayConfigService


@pytest.fixture
def gateways(dynamodb_tables: Any) -> GatewayConfigService:
    return GatewayConfigService(DynamoDBService())


@pytest.fixture
def gateways_table(dynamodb_tables: Any) -> Any:
    return dynamodb_tables.Table("test-topup-payment-gateways")


class TestGetGateway:
    def test_returns_configured_gateway(
        self, gateways: GatewayConfigService, gateway_secret: str
    ):
        gateway = gateways.get_gateway("ikhode-bakong")

        assert gateway is not None
        assert gateway.name == "Ikhode Bakong KHQR"
        assert gateway.webhook_secret == gateway_secret

    def test_unknown_gateway_returns_none(self, gateways: GatewayConfigService):
        assert gateways.get_gateway("aba-payway") is None


class TestGetWebhookSecret:
    def test_returns_secret(self, gateways: GatewayConfigService, gateway_secret: str):
        assert gateways.get_webhook_secret("ikhode-bakong") == gateway_secret

    def test_missing_row_is_empty(self, gateways: GatewayConfigService):
        assert gateways.get_webhook_secret("ikhode-bakong") == ""

    def test_row_without_secret_is_empty(
        self, gateways: GatewayConfigService, gateways_table: Any
    ):
        gateways_table.put_item(Item={"slug": "ikhode-bakong", "config": {"merchant": "m"}})

        assert gateways.get_webhook_secret("ikhode-bakong") == ""

    def test_rotation_applies_immediately(
        self,
        gateways: GatewayConfigService,
        gateways_table: Any,
        gateway_secret: str,
    ):
        assert gateways.get_webhook_secret("ikhode-bakong") == gateway_secret

        gateways_table.put_item(
            Item={"slug": "ikhode-bakong", "config": {"webhook_secret": "rotated"}}
        )

        assert gateways.get_webhook_secret("ikhode-bakong") == "rotated"

    def test_secret_value_is_not_logged(
        self,
        gateways: GatewayConfigService,
        gateway_secret: str,
        caplog: pytest.LogCaptureFixture,
    ):
        with caplog.at_level("DEBUG", logger="shared.services.gateway_config"):
            gateways.get_webhook_secret("ikhode-bakong")

        assert "[SET]" in caplog.text
        assert gateway_secret not in caplog.text
