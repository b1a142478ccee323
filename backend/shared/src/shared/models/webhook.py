"""Models for the Ikhode (Bakong KHQR) payment webhook."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Placeholder transaction reference when the provider omits one
UNKNOWN_TRANSACTION_ID = "N/A"


class IkhodePaymentPayload(BaseModel):
    """Body posted by the payment provider when a payment completes.

    The transaction reference arrives as either `transaction_id` or
    `transactionId`; `amount` is optional and falls back to the order total.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    transaction_id: str | None = None
    transaction_id_camel: str | None = Field(default=None, alias="transactionId")
    amount: Decimal | None = None

    @field_validator("transaction_id", "transaction_id_camel", mode="before")
    @classmethod
    def _coerce_reference(cls, value: Any) -> Any:
        """Accept numeric transaction references."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def resolved_transaction_id(self) -> str:
        """First non-empty transaction reference, or "N/A"."""
        return self.transaction_id or self.transaction_id_camel or UNKNOWN_TRANSACTION_ID

    def resolved_amount(self, order_amount: Decimal) -> Decimal:
        """Payload amount, defaulting to the stored order amount."""
        return self.amount if self.amount else order_amount


class WebhookResponse(BaseModel):
    """Response body returned to the payment provider."""

    status: str = Field(..., examples=["success"])
    message: str = Field(..., examples=["Payment recorded successfully."])


class FulfillmentResult(BaseModel):
    """Outcome of a fulfillment dispatch."""

    success: bool
    error_message: str | None = None
