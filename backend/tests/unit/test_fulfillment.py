"""Unit tests for FulfillmentDispatcher.

The boto3 Lambda client is replaced with a MagicMock; no function is
actually invoked.
"""

import io
import json
from typing import Any
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from shared.services.fulfillment import FulfillmentDispatcher, FulfillmentError


def _response(payload: Any = None, function_error: str | None = None, status: int = 200) -> dict:
    raw = b"" if payload is None else json.dumps(payload).encode("utf-8")
    response: dict[str, Any] = {"StatusCode": status, "Payload": io.BytesIO(raw)}
    if function_error:
        response["FunctionError"] = function_error
    return response


@pytest.fixture
def lambda_client() -> MagicMock:
    client = MagicMock()
    client.invoke.return_value = _response({"success": True})
    return client


@pytest.fixture
def dispatcher(lambda_client: MagicMock) -> FulfillmentDispatcher:
    return FulfillmentDispatcher(function_name="process-topup", client=lambda_client)


class TestDispatchRequest:
    """Shape of the invocation."""

    def test_invokes_function_with_fulfill_action(
        self, dispatcher: FulfillmentDispatcher, lambda_client: MagicMock
    ):
        dispatcher.dispatch("ord_1")

        kwargs = lambda_client.invoke.call_args.kwargs
        assert kwargs["FunctionName"] == "process-topup"
        assert kwargs["InvocationType"] == "RequestResponse"
        assert json.loads(kwargs["Payload"]) == {"orderId": "ord_1", "action": "fulfill"}

    def test_function_name_from_environment(
        self, lambda_client: MagicMock, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("FULFILLMENT_FUNCTION_NAME", "custom-fn")
        assert FulfillmentDispatcher(client=lambda_client).function_name == "custom-fn"

    def test_default_function_name_uses_environment_name(
        self, lambda_client: MagicMock, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.delenv("FULFILLMENT_FUNCTION_NAME", raising=False)
        dispatcher = FulfillmentDispatcher(client=lambda_client, environment="prod")
        assert dispatcher.function_name == "topup-prod-process-topup"


class TestDispatchOutcome:
    """Success and failure reporting."""

    def test_success(self, dispatcher: FulfillmentDispatcher):
        result = dispatcher.dispatch("ord_1")

        assert result.success is True
        assert result.error_message is None

    def test_empty_payload_is_success(
        self, dispatcher: FulfillmentDispatcher, lambda_client: MagicMock
    ):
        lambda_client.invoke.return_value = _response()
        assert dispatcher.dispatch("ord_1").success is True

    def test_function_error_is_failure(
        self, dispatcher: FulfillmentDispatcher, lambda_client: MagicMock
    ):
        lambda_client.invoke.return_value = _response(
            {"errorMessage": "G2Bulk timeout", "errorType": "TimeoutError"},
            function_error="Unhandled",
        )

        result = dispatcher.dispatch("ord_1")

        assert result.success is False
        assert result.error_message == "G2Bulk timeout"

    def test_error_in_body_is_failure(
        self, dispatcher: FulfillmentDispatcher, lambda_client: MagicMock
    ):
        lambda_client.invoke.return_value = _response({"error": {"message": "Invalid package"}})

        result = dispatcher.dispatch("ord_1")

        assert result.success is False
        assert result.error_message == "Invalid package"

    def test_string_error_in_body_is_failure(
        self, dispatcher: FulfillmentDispatcher, lambda_client: MagicMock
    ):
        lambda_client.invoke.return_value = _response({"error": "Player not found"})

        assert dispatcher.dispatch("ord_1").error_message == "Player not found"

    def test_non_2xx_status_is_failure(
        self, dispatcher: FulfillmentDispatcher, lambda_client: MagicMock
    ):
        lambda_client.invoke.return_value = _response({}, status=500)

        result = dispatcher.dispatch("ord_1")

        assert result.success is False
        assert "500" in result.error_message

    def test_non_json_payload_is_success(
        self, dispatcher: FulfillmentDispatcher, lambda_client: MagicMock
    ):
        lambda_client.invoke.return_value = {"StatusCode": 200, "Payload": io.BytesIO(b"ok")}
        assert dispatcher.dispatch("ord_1").success is True


class TestDispatchInvocationErrors:
    """Errors reaching the function at all."""

    def test_client_error_raises(
        self, dispatcher: FulfillmentDispatcher, lambda_client: MagicMock
    ):
        lambda_client.invoke.side_effect = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "Function not found"}},
            "Invoke",
        )

        with pytest.raises(FulfillmentError) as exc_info:
            dispatcher.dispatch("ord_1")

        assert "Function not found" in str(exc_info.value)

    def test_connection_error_raises(
        self, dispatcher: FulfillmentDispatcher, lambda_client: MagicMock
    ):
        lambda_client.invoke.side_effect = EndpointConnectionError(endpoint_url="https://lambda")

        with pytest.raises(FulfillmentError):
            dispatcher.dispatch("ord_1")
