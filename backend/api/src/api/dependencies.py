"""FastAPI dependency injection providers for shared services.

Services are lazily instantiated and cached with @lru_cache, so a warm
Lambda container reuses boto3 clients across invocations.

Usage in routes:
    from api.dependencies import get_order_service

    @router.get("/orders/{order_id}")
    async def get_order(
        order_id: str,
        orders: OrderService = Depends(get_order_service),
    ):
        ...

Service Dependency Graph:
    DynamoDBService (singleton via get_dynamodb_service)
        ├── OrderService
        └── GatewayConfigService
    FulfillmentDispatcher (boto3 Lambda client)

    IkhodeWebhookHandler is assembled per request from the three services
    above, so tests can override any one of them via app.dependency_overrides.

Testing:
    Use reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from fastapi import Depends

from shared.services.dynamodb import get_dynamodb_service
from shared.services.fulfillment import FulfillmentDispatcher
from shared.services.gateway_config import GatewayConfigService
from shared.services.order_service import OrderService
from shared.services.webhook_handler import IkhodeWebhookHandler


@lru_cache
def get_order_service() -> OrderService:
    """Get cached OrderService instance.

    Returns:
        OrderService configured with DynamoDB singleton.
    """
    return OrderService(db=get_dynamodb_service())


@lru_cache
def get_gateway_config_service() -> GatewayConfigService:
    """Get cached GatewayConfigService instance.

    Returns:
        GatewayConfigService configured with DynamoDB singleton.
    """
    return GatewayConfigService(db=get_dynamodb_service())


@lru_cache
def get_fulfillment_dispatcher() -> FulfillmentDispatcher:
    """Get cached FulfillmentDispatcher instance.

    Returns:
        FulfillmentDispatcher targeting FULFILLMENT_FUNCTION_NAME.
    """
    return FulfillmentDispatcher()


def get_webhook_handler(
    orders: OrderService = Depends(get_order_service),
    gateways: GatewayConfigService = Depends(get_gateway_config_service),
    dispatcher: FulfillmentDispatcher = Depends(get_fulfillment_dispatcher),
) -> IkhodeWebhookHandler:
    """Assemble the webhook handler from its collaborators."""
    return IkhodeWebhookHandler(orders=orders, gateways=gateways, dispatcher=dispatcher)


def reset_services() -> None:
    """Clear all cached service instances.

    Call this in test fixtures to ensure clean state between tests.
    Also resets the underlying DynamoDB singleton.

    Example:
        @pytest.fixture(autouse=True)
        def reset_state():
            yield
            reset_services()
    """
    from shared.services.dynamodb import reset_dynamodb_service

    get_order_service.cache_clear()
    get_gateway_config_service.cache_clear()
    get_fulfillment_dispatcher.cache_clear()

    reset_dynamodb_service()
