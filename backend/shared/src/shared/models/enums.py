"""Enumeration types for top-up data models."""

from enum import Enum


class OrderStatus(str, Enum):
    """Lifecycle status of a top-up order."""

    PENDING = "pending"
    PAID = "paid"
    PROCESSING = "processing"
    COMPLETED = "completed"
    PENDING_MANUAL = "pending_manual"  # Paid, auto-fulfillment failed
    FAILED = "failed"
    CANCELLED = "cancelled"


# Only these statuses may be advanced by a payment webhook
PROCESSABLE_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.PENDING, OrderStatus.PAID}
)


class FulfillmentAction(str, Enum):
    """Actions accepted by the fulfillment function."""

    FULFILL = "fulfill"
