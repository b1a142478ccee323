"""Backend services for the game top-up platform."""

from .dynamodb import DynamoDBService, get_dynamodb_service, reset_dynamodb_service
from .fulfillment import FulfillmentDispatcher, FulfillmentError
from .gateway_config import GatewayConfigService
from .order_service import OrderService
from .webhook_handler import IkhodeWebhookHandler

__all__ = [
    "DynamoDBService",
    "get_dynamodb_service",
    "reset_dynamodb_service",
    "FulfillmentDispatcher",
    "FulfillmentError",
    "GatewayConfigService",
    "OrderService",
    "IkhodeWebhookHandler",
]
