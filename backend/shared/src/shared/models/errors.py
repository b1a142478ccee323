"""Standard error codes for the top-up backend.

Messages for webhook-facing codes are part of the payment provider
contract and must not change wording.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes."""

    # Webhook authentication
    INVALID_WEBHOOK_SECRET = "ERR_WEBHOOK_001"
    WEBHOOK_SECRET_NOT_CONFIGURED = "ERR_WEBHOOK_002"

    # Orders
    ORDER_NOT_FOUND = "ERR_ORDER_001"
    INVALID_ORDER_STATUS = "ERR_ORDER_002"

    # Processing
    PAYMENT_PROCESSING_FAILED = "ERR_PAYMENT_001"
    INTERNAL_ERROR = "ERR_INTERNAL"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_WEBHOOK_SECRET: "Unauthorized: Invalid secret key.",
    # Same wording as a bad secret; the caller learns nothing about our config
    ErrorCode.WEBHOOK_SECRET_NOT_CONFIGURED: "Unauthorized: Invalid secret key.",
    ErrorCode.ORDER_NOT_FOUND: "Order not found or could not be resolved.",
    ErrorCode.INVALID_ORDER_STATUS: "Order status is not valid",
    ErrorCode.PAYMENT_PROCESSING_FAILED: "Internal Server Error during payment processing.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred",
}


class ErrorResponse(BaseModel):
    """Error body returned by all endpoints."""

    model_config = ConfigDict(strict=True)

    status: str = "error"
    message: str

    @classmethod
    def from_code(cls, code: ErrorCode) -> "ErrorResponse":
        """Create an ErrorResponse from an error code."""
        return cls(message=ERROR_MESSAGES[code])


class TopupError(Exception):
    """Exception raised by order and webhook operations.

    `details` is for server-side logs only and is never sent to callers.
    """

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.message = ERROR_MESSAGES[code]
        self.details = details
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        """Convert this exception to the wire error body."""
        return ErrorResponse.from_code(self.code)
