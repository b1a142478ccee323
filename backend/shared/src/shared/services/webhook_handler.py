"""Webhook handler for Ikhode (Bakong KHQR) payment notifications.

Provides the business logic for reconciling a payment notification with
its order, separate from HTTP routing concerns:

1. Authenticate the caller against the gateway's shared secret
2. Resolve the order named in the request path
3. Short-circuit if the order is no longer processable
4. Conditionally move the order to processing
5. Dispatch fulfillment, flagging the order for manual handling on failure

Only the invocation whose conditional update wins dispatches fulfillment,
so redelivered or concurrent notifications never fulfill an order twice.
"""

import hmac
from decimal import Decimal

from shared.models import (
    IKHODE_GATEWAY_SLUG,
    IkhodePaymentPayload,
    Order,
    WebhookResponse,
)
from shared.models.errors import ErrorCode, TopupError
from shared.services.fulfillment import FulfillmentDispatcher
from shared.services.gateway_config import GatewayConfigService
from shared.services.order_service import OrderService
from shared.utils.logging import get_logger, log_order_event

logger = get_logger(__name__)

# Last path segment when the provider calls the bare endpoint
WEBHOOK_ROUTE_NAME = "ikhode-webhook"

# Recorded on the order once the gateway confirms payment
IKHODE_PAYMENT_METHOD = "Kesor KHQR"

PAYMENT_RECORDED_MESSAGE = "Payment recorded successfully."


def extract_bearer_token(authorization: str | None) -> str:
    """Strip the Bearer scheme from an Authorization header value."""
    if not authorization:
        return ""
    return authorization.removeprefix("Bearer ")


class IkhodeWebhookHandler:
    """Handler for Ikhode payment webhook notifications."""

    def __init__(
        self,
        orders: OrderService,
        gateways: GatewayConfigService,
        dispatcher: FulfillmentDispatcher,
    ) -> None:
        self._orders = orders
        self._gateways = gateways
        self._dispatcher = dispatcher

    def handle_payment(
        self,
        order_id: str | None,
        authorization: str | None,
        body: bytes,
    ) -> WebhookResponse:
        """Process a payment notification for one order.

        Args:
            order_id: Order ID taken from the last request path segment
            authorization: Raw Authorization header value
            body: Raw JSON request body

        Returns:
            WebhookResponse with status "success"

        Raises:
            TopupError: On authentication failure, unknown order, or a
                failed write moving the order to processing
            pydantic.ValidationError: If the body is not valid JSON
        """
        log_order_event(logger, "webhook_received", order_id or "-")

        self._authenticate(authorization)

        order = self._resolve_order(order_id)
        log_order_event(logger, "order_resolved", order.id, status=order.status.value)

        if not order.is_processable:
            return self._already_processed(order)

        payload = self._parse_payload(body)
        transaction_id = payload.resolved_transaction_id
        amount = payload.resolved_amount(order.amount)
        self._check_amount(order, amount)

        log_order_event(
            logger,
            "payment_confirmed",
            order.id,
            transaction_id=transaction_id,
            amount=str(amount),
        )

        try:
            updated = self._orders.mark_processing(
                order.id,
                payment_method=IKHODE_PAYMENT_METHOD,
                status_message=(
                    f"Payment confirmed. Transaction: {transaction_id}. Processing order..."
                ),
            )
            if updated is None:
                # Another delivery moved the order first
                current = self._orders.get_order(order.id, consistent_read=True) or order
                return self._already_processed(current)

            self._fulfill(updated)
        except TopupError:
            raise
        except Exception as e:
            logger.exception("Fatal payment error for order %s", order.id)
            raise TopupError(
                code=ErrorCode.PAYMENT_PROCESSING_FAILED,
                details={"order_id": order.id, "error": str(e)},
            ) from e

        return WebhookResponse(status="success", message=PAYMENT_RECORDED_MESSAGE)

    def _authenticate(self, authorization: str | None) -> None:
        expected = self._gateways.get_webhook_secret(IKHODE_GATEWAY_SLUG)
        token = extract_bearer_token(authorization)

        logger.info(
            "Webhook auth: expected secret %s, received token %s",
            "[SET]" if expected else "[NOT SET]",
            "[PROVIDED]" if token else "[MISSING]",
        )

        if not expected:
            logger.error(
                "No webhook secret configured for gateway %s; rejecting call",
                IKHODE_GATEWAY_SLUG,
            )
            raise TopupError(code=ErrorCode.WEBHOOK_SECRET_NOT_CONFIGURED)

        if not hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
            logger.error("Webhook unauthorized: invalid secret key")
            raise TopupError(code=ErrorCode.INVALID_WEBHOOK_SECRET)

    def _resolve_order(self, order_id: str | None) -> Order:
        order = None
        if order_id and order_id != WEBHOOK_ROUTE_NAME:
            order = self._orders.get_order(order_id, consistent_read=True)

        if order is None:
            log_order_event(
                logger, "order_resolved", order_id or "-", error="Order not found"
            )
            raise TopupError(
                code=ErrorCode.ORDER_NOT_FOUND,
                details={"order_id": order_id or ""},
            )
        return order

    def _already_processed(self, order: Order) -> WebhookResponse:
        log_order_event(
            logger,
            "webhook_skipped",
            order.id,
            status=order.status.value,
            result="duplicate",
        )
        return WebhookResponse(
            status="success",
            message=f"Order already {order.status.value}.",
        )

    @staticmethod
    def _parse_payload(body: bytes) -> IkhodePaymentPayload:
        if not body.strip():
            return IkhodePaymentPayload()
        return IkhodePaymentPayload.model_validate_json(body)

    @staticmethod
    def _check_amount(order: Order, amount: Decimal) -> None:
        if amount != order.amount:
            logger.warning(
                "Webhook amount %s differs from order %s amount %s",
                amount,
                order.id,
                order.amount,
            )

    def _fulfill(self, order: Order) -> None:
        """Dispatch fulfillment; on failure flag the order for manual handling.

        Fulfillment failures never fail the webhook: the payment itself
        was valid and is already recorded.
        """
        log_order_event(logger, "fulfillment_requested", order.id, status=order.status.value)

        try:
            result = self._dispatcher.dispatch(order.id)
        except Exception as e:
            logger.error("Fulfillment call error for order %s: %s", order.id, e)
            self._flag_manual(
                order.id,
                f"Payment confirmed. Fulfillment error: {str(e) or 'Unknown'}. "
                "Manual processing required.",
            )
            return

        if not result.success:
            self._flag_manual(
                order.id,
                f"Payment confirmed. Auto-fulfillment failed: {result.error_message}. "
                "Manual processing required.",
            )
            return

        log_order_event(logger, "fulfillment_succeeded", order.id, result="success")

    def _flag_manual(self, order_id: str, message: str) -> None:
        """Flag an order for manual fulfillment.

        A failed write is logged and swallowed: the payment is already
        recorded and the provider must still get its acknowledgement.
        """
        try:
            flagged = self._orders.mark_pending_manual(order_id, message)
        except Exception:
            logger.exception(
                "Failed to flag order %s for manual handling; order left in processing",
                order_id,
            )
            return
        if flagged is None:
            logger.warning(
                "Order %s left processing before it could be flagged for manual handling",
                order_id,
            )
            return
        log_order_event(
            logger,
            "flagged_manual",
            order_id,
            status=flagged.status.value,
            reason=message,
        )
