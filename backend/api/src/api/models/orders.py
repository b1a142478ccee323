"""Order API response models."""

from pydantic import BaseModel, Field

from shared.models import Order, OrderStatus


class OrderListResponse(BaseModel):
    """Orders currently in one status."""

    status: OrderStatus = Field(..., description="Status filtered on")
    count: int = Field(..., ge=0, description="Number of orders returned")
    orders: list[Order] = Field(default_factory=list)
