"""Fulfillment dispatcher for paid top-up orders.

Fulfillment itself (bulk-product provider calls, manual routing) lives in
the separate `process-topup` function. This module only invokes it and
reports whether the invocation succeeded.
"""

import json
import os
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from shared.models import FulfillmentAction, FulfillmentResult
from shared.utils.logging import get_logger, log_order_event

logger = get_logger(__name__)


class FulfillmentError(Exception):
    """Raised when the fulfillment function cannot be invoked."""

    pass


class FulfillmentDispatcher:
    """Invokes the fulfillment Lambda for an order.

    Usage:
        dispatcher = FulfillmentDispatcher()
        result = dispatcher.dispatch("ord_1")
        if not result.success:
            ...
    """

    def __init__(
        self,
        function_name: str | None = None,
        client: Any | None = None,
        environment: str | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            function_name: Lambda name. Defaults to FULFILLMENT_FUNCTION_NAME env var.
            client: boto3 Lambda client (injected in tests)
            environment: Environment name. Defaults to ENVIRONMENT env var.
        """
        environment = environment or os.getenv("ENVIRONMENT", "dev")
        self.function_name = function_name or os.getenv(
            "FULFILLMENT_FUNCTION_NAME", f"topup-{environment}-process-topup"
        )
        self._client = client or boto3.client("lambda")

    def dispatch(self, order_id: str) -> FulfillmentResult:
        """Ask the fulfillment function to fulfill an order.

        Args:
            order_id: Order to fulfill

        Returns:
            FulfillmentResult; success is False when the function reported an error

        Raises:
            FulfillmentError: If the function could not be invoked at all
        """
        payload = {"orderId": order_id, "action": FulfillmentAction.FULFILL.value}

        try:
            response = self._client.invoke(
                FunctionName=self.function_name,
                InvocationType="RequestResponse",
                Payload=json.dumps(payload).encode("utf-8"),
            )
        except (ClientError, BotoCoreError) as e:
            raise FulfillmentError(str(e)) from e

        body = self._read_payload(response)

        if response.get("FunctionError"):
            message = body.get("errorMessage") or response["FunctionError"]
            return self._failed(order_id, str(message))

        status_code = response.get("StatusCode", 200)
        if status_code >= 300:
            return self._failed(order_id, f"Fulfillment function returned status {status_code}")

        if body.get("error"):
            error = body["error"]
            message = error.get("message") if isinstance(error, dict) else error
            return self._failed(order_id, str(message or "Unknown fulfillment error"))

        log_order_event(
            logger,
            "fulfillment_dispatched",
            order_id,
            result="success",
            function=self.function_name,
        )
        return FulfillmentResult(success=True)

    def _failed(self, order_id: str, message: str) -> FulfillmentResult:
        log_order_event(
            logger,
            "fulfillment_dispatched",
            order_id,
            result="error",
            error=message,
            function=self.function_name,
        )
        return FulfillmentResult(success=False, error_message=message)

    @staticmethod
    def _read_payload(response: dict[str, Any]) -> dict[str, Any]:
        """Decode the function's JSON response, tolerating empty or non-object bodies."""
        stream = response.get("Payload")
        if stream is None:
            return {}
        raw = stream.read()
        if not raw:
            return {}
        try:
            decoded = json.loads(raw)
        except ValueError:
            logger.warning("Fulfillment function returned non-JSON payload")
            return {}
        return decoded if isinstance(decoded, dict) else {}
