"""Pydantic models for the game top-up backend."""

from .enums import PROCESSABLE_STATUSES, FulfillmentAction, OrderStatus
from .errors import ERROR_MESSAGES, ErrorCode, ErrorResponse, TopupError
from .gateway import IKHODE_GATEWAY_SLUG, PaymentGateway
from .order import Order, OrderCreate
from .webhook import (
    UNKNOWN_TRANSACTION_ID,
    FulfillmentResult,
    IkhodePaymentPayload,
    WebhookResponse,
)

__all__ = [
    # Enums
    "FulfillmentAction",
    "OrderStatus",
    "PROCESSABLE_STATUSES",
    # Orders
    "Order",
    "OrderCreate",
    # Gateways
    "IKHODE_GATEWAY_SLUG",
    "PaymentGateway",
    # Webhook
    "FulfillmentResult",
    "IkhodePaymentPayload",
    "UNKNOWN_TRANSACTION_ID",
    "WebhookResponse",
    # Errors
    "ERROR_MESSAGES",
    "ErrorCode",
    "ErrorResponse",
    "TopupError",
]
