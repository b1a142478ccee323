"""Webhook endpoints for payment provider notifications.

Provides endpoints for:
- Ikhode (Bakong KHQR) payment completion: POST /webhooks/ikhode-webhook/{order_id}

These endpoints do NOT use end-user authentication; callers present the
gateway's shared secret as a Bearer token.
"""

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from api.dependencies import get_webhook_handler
from api.exceptions import CORS_HEADERS
from shared.models import ErrorResponse, WebhookResponse
from shared.models.errors import ErrorCode, TopupError
from shared.services.webhook_handler import WEBHOOK_ROUTE_NAME, IkhodeWebhookHandler
from shared.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])

_WEBHOOK_RESPONSES = {
    200: {
        "description": "Payment recorded, or order already processed",
        "model": WebhookResponse,
    },
    401: {"description": "Invalid or unconfigured secret key", "model": ErrorResponse},
    404: {"description": "Order not found", "model": ErrorResponse},
    500: {"description": "Processing failed", "model": ErrorResponse},
}


async def _process_payment(
    request: Request,
    order_id: str | None,
    handler: IkhodeWebhookHandler,
) -> JSONResponse:
    body = await request.body()
    try:
        result = await run_in_threadpool(
            handler.handle_payment,
            order_id,
            request.headers.get("Authorization"),
            body,
        )
    except TopupError:
        raise
    except Exception as e:
        logger.exception("Webhook error: %s", e)
        raise TopupError(code=ErrorCode.INTERNAL_ERROR) from e

    return JSONResponse(content=result.model_dump(mode="json"), headers=CORS_HEADERS)


@router.options(f"/webhooks/{WEBHOOK_ROUTE_NAME}", include_in_schema=False)
@router.options(f"/webhooks/{WEBHOOK_ROUTE_NAME}/{{order_id}}", include_in_schema=False)
async def ikhode_webhook_preflight() -> Response:
    """Answer CORS preflight requests."""
    return Response(headers=CORS_HEADERS)


@router.post(
    f"/webhooks/{WEBHOOK_ROUTE_NAME}/{{order_id}}",
    summary="Receive Ikhode payment notification",
    description="""
Endpoint called by the Ikhode payment gateway when a KHQR payment completes.

**Authentication**: `Authorization: Bearer <webhook_secret>` of the
`ikhode-bakong` gateway. Calls are rejected while no secret is configured.

**Idempotent**: Orders no longer pending or paid return 200
`"Order already <status>."` without side effects.

Fulfillment failures do not fail the webhook; the order is flagged
`pending_manual` instead.
""",
    response_model=WebhookResponse,
    responses=_WEBHOOK_RESPONSES,
)
async def handle_ikhode_webhook(
    order_id: str,
    request: Request,
    handler: IkhodeWebhookHandler = Depends(get_webhook_handler),
) -> JSONResponse:
    """Handle a payment notification for the order in the path."""
    return await _process_payment(request, order_id, handler)


@router.post(
    f"/webhooks/{WEBHOOK_ROUTE_NAME}",
    summary="Receive Ikhode payment notification without an order ID",
    description="Always resolves to 404: the order ID must be the last path segment.",
    response_model=WebhookResponse,
    responses=_WEBHOOK_RESPONSES,
)
async def handle_ikhode_webhook_without_order(
    request: Request,
    handler: IkhodeWebhookHandler = Depends(get_webhook_handler),
) -> JSONResponse:
    """Handle a notification posted to the bare endpoint."""
    return await _process_payment(request, WEBHOOK_ROUTE_NAME, handler)
