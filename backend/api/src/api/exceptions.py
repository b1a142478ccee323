"""FastAPI exception handlers for converting TopupError to HTTP responses.

The ErrorCode-to-HTTP status mapping follows REST conventions:
- 400 Bad Request: Business rule violations
- 401 Unauthorized: Webhook authentication failed
- 404 Not Found: Order not found
- 500 Internal Server Error: Processing failures

Error bodies are always `{"status": "error", "message": ...}` and carry
the webhook CORS headers, matching what the payment provider expects.

Usage:
    from api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from shared.models.errors import ErrorCode, TopupError
from shared.utils.logging import get_logger

logger = get_logger(__name__)

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

# Map ErrorCode to HTTP status codes
ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_WEBHOOK_SECRET: HTTP_401_UNAUTHORIZED,
    ErrorCode.WEBHOOK_SECRET_NOT_CONFIGURED: HTTP_401_UNAUTHORIZED,
    ErrorCode.ORDER_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ORDER_STATUS: HTTP_400_BAD_REQUEST,
    ErrorCode.PAYMENT_PROCESSING_FAILED: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.INTERNAL_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode.

    Args:
        code: The ErrorCode to map

    Returns:
        HTTP status code, defaults to 400 if not explicitly mapped.
    """
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def topup_error_handler(request: Request, exc: TopupError) -> JSONResponse:
    """Handle TopupError exceptions and convert to JSON response.

    Args:
        request: The incoming request (unused but required by FastAPI)
        exc: The TopupError exception

    Returns:
        JSONResponse with error body and appropriate status code.
    """
    status_code = get_http_status_for_error(exc.code)
    if exc.details:
        logger.info("%s on %s: %s", exc.code.value, request.url.path, exc.details)

    return JSONResponse(
        status_code=status_code,
        content=exc.to_response().model_dump(mode="json"),
        headers=CORS_HEADERS,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(TopupError, topup_error_handler)  # type: ignore[arg-type]
