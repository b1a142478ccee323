"""Order model for top-up purchases."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from .enums import PROCESSABLE_STATUSES, OrderStatus


class Order(BaseModel):
    """A customer's top-up purchase tracked through its status lifecycle.

    Amounts are decimal currency values (not cents).
    """

    id: str = Field(..., description="Unique order ID")
    status: OrderStatus = Field(..., description="Current lifecycle status")
    amount: Decimal = Field(..., ge=0, description="Order total")
    currency: str = Field(default="USD", description="Currency code")
    game_name: str | None = Field(default=None, description="Game being topped up")
    package_name: str | None = Field(default=None, description="Purchased package")
    player_id: str | None = Field(default=None, description="In-game player ID")
    server_id: str | None = Field(default=None, description="In-game server/zone ID")
    payment_method: str | None = Field(
        default=None,
        description="Payment method label",
        examples=["Kesor KHQR"],
    )
    status_message: str | None = Field(
        default=None,
        description="Human-readable status, overwritten on every transition",
    )
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")

    @property
    def is_processable(self) -> bool:
        """Whether a payment webhook may advance this order."""
        return self.status in PROCESSABLE_STATUSES


class OrderCreate(BaseModel):
    """Data required to create an order at checkout."""

    game_name: str = Field(..., min_length=1)
    package_name: str = Field(..., min_length=1)
    player_id: str = Field(..., min_length=1)
    server_id: str | None = None
    amount: Decimal = Field(..., ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    status: OrderStatus = OrderStatus.PENDING
