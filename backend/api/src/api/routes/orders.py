"""Order endpoints for checkout and operator follow-up.

Provides REST endpoints for:
- Creating an order at checkout
- Polling an order's status
- Listing orders by status (e.g. pending_manual for manual fulfillment)
"""

from fastapi import APIRouter, Depends, Query
from starlette.concurrency import run_in_threadpool
from starlette.status import HTTP_201_CREATED

from api.dependencies import get_order_service
from api.models.orders import OrderListResponse
from shared.models import ErrorResponse, Order, OrderCreate, OrderStatus
from shared.models.errors import ErrorCode, TopupError
from shared.services.order_service import OrderService

router = APIRouter(tags=["orders"])


@router.post(
    "/orders",
    summary="Create order",
    description="""
Create a top-up order at checkout.

Orders start as `pending` (awaiting payment) or `paid` (paid out of band).
The payment webhook later moves them to `processing`.
""",
    response_model=Order,
    status_code=HTTP_201_CREATED,
    responses={
        400: {"description": "Initial status not allowed", "model": ErrorResponse},
    },
)
async def create_order(
    body: OrderCreate,
    orders: OrderService = Depends(get_order_service),
) -> Order:
    """Create an order."""
    return await run_in_threadpool(orders.create_order, body)


@router.get(
    "/orders/{order_id}",
    summary="Get order",
    response_model=Order,
    responses={404: {"description": "Order not found", "model": ErrorResponse}},
)
async def get_order(
    order_id: str,
    orders: OrderService = Depends(get_order_service),
) -> Order:
    """Get an order and its current status."""
    order = await run_in_threadpool(orders.get_order, order_id)
    if order is None:
        raise TopupError(code=ErrorCode.ORDER_NOT_FOUND, details={"order_id": order_id})
    return order


@router.get(
    "/orders",
    summary="List orders by status",
    description="Operators use `status=pending_manual` to find paid orders needing manual fulfillment.",
    response_model=OrderListResponse,
)
async def list_orders(
    status: OrderStatus = Query(..., description="Status to filter on"),
    limit: int = Query(default=100, ge=1, le=1000),
    orders: OrderService = Depends(get_order_service),
) -> OrderListResponse:
    """List orders in one status."""
    found = await run_in_threadpool(orders.list_orders_by_status, status, limit)
    return OrderListResponse(status=status, count=len(found), orders=found)
