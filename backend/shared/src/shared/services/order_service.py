"""Order service for top-up order persistence and status transitions.

All status transitions are conditional updates against the stored
status, so concurrent writers cannot move an order backwards or
advance it twice.
"""

import datetime as dt
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from shared.models import PROCESSABLE_STATUSES, Order, OrderCreate, OrderStatus
from shared.models.errors import ErrorCode, TopupError
from shared.utils.logging import get_logger, log_order_event

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService

logger = get_logger(__name__)


class OrderService:
    """Service for reading, creating and transitioning orders."""

    ORDERS_TABLE = "orders"
    STATUS_INDEX = "status-index"

    def __init__(self, db: "DynamoDBService") -> None:
        """Initialize order service.

        Args:
            db: DynamoDB service instance
        """
        self.db = db

    def create_order(self, data: OrderCreate) -> Order:
        """Create a new order at checkout.

        Args:
            data: Order creation data

        Returns:
            Created Order

        Raises:
            TopupError: If the initial status is not pending or paid
        """
        if data.status not in PROCESSABLE_STATUSES:
            raise TopupError(
                code=ErrorCode.INVALID_ORDER_STATUS,
                details={"status": data.status.value},
            )

        now = dt.datetime.now(dt.UTC)
        order = Order(
            id=str(uuid.uuid4()),
            status=data.status,
            amount=data.amount,
            currency=data.currency.upper(),
            game_name=data.game_name,
            package_name=data.package_name,
            player_id=data.player_id,
            server_id=data.server_id,
            status_message="Awaiting payment.",
            created_at=now,
            updated_at=now,
        )

        self.db.put_item(
            self.ORDERS_TABLE,
            self._order_to_item(order),
            condition_expression="attribute_not_exists(#id)",
            expression_attribute_names={"#id": "id"},
        )
        log_order_event(
            logger,
            "order_created",
            order.id,
            status=order.status.value,
            amount=str(order.amount),
        )
        return order

    def get_order(self, order_id: str, consistent_read: bool = False) -> Order | None:
        """Get an order by ID.

        Args:
            order_id: Order ID
            consistent_read: Bypass eventually consistent reads

        Returns:
            Order or None if not found
        """
        item = self.db.get_item(
            self.ORDERS_TABLE, {"id": order_id}, consistent_read=consistent_read
        )
        return self._item_to_order(item) if item else None

    def list_orders_by_status(
        self, status: OrderStatus, limit: int | None = None
    ) -> list[Order]:
        """List orders currently in a status.

        Args:
            status: Status to filter on
            limit: Max orders to return

        Returns:
            List of Order objects
        """
        items = self.db.query_by_gsi(
            self.ORDERS_TABLE,
            self.STATUS_INDEX,
            "status",
            status.value,
            limit=limit,
        )
        return [self._item_to_order(item) for item in items]

    def mark_processing(
        self,
        order_id: str,
        *,
        payment_method: str,
        status_message: str,
    ) -> Order | None:
        """Move a processable order to PROCESSING.

        The update only applies while the stored status is still pending
        or paid. Exactly one of several concurrent callers gets an Order
        back; the others get None.

        Args:
            order_id: Order ID
            payment_method: Payment method label to record
            status_message: New status message

        Returns:
            Updated Order, or None if the order was not processable
        """
        values: dict[str, Any] = {
            ":status": OrderStatus.PROCESSING.value,
            ":method": payment_method,
            ":message": status_message,
            ":now": dt.datetime.now(dt.UTC).isoformat(),
        }
        placeholders = []
        for i, allowed in enumerate(sorted(s.value for s in PROCESSABLE_STATUSES)):
            values[f":allowed{i}"] = allowed
            placeholders.append(f":allowed{i}")

        attrs = self.db.update_item(
            self.ORDERS_TABLE,
            {"id": order_id},
            "SET #status = :status, payment_method = :method, "
            "status_message = :message, updated_at = :now",
            values,
            {"#status": "status"},  # status is a reserved word
            condition_expression=f"#status IN ({', '.join(placeholders)})",
        )
        return self._item_to_order(attrs) if attrs else None

    def mark_pending_manual(self, order_id: str, status_message: str) -> Order | None:
        """Flag a PROCESSING order for manual fulfillment.

        Args:
            order_id: Order ID
            status_message: Diagnostic message for operators

        Returns:
            Updated Order, or None if the order had already left PROCESSING
        """
        attrs = self.db.update_item(
            self.ORDERS_TABLE,
            {"id": order_id},
            "SET #status = :status, status_message = :message, updated_at = :now",
            {
                ":status": OrderStatus.PENDING_MANUAL.value,
                ":message": status_message,
                ":now": dt.datetime.now(dt.UTC).isoformat(),
                ":expected": OrderStatus.PROCESSING.value,
            },
            {"#status": "status"},
            condition_expression="#status = :expected",
        )
        return self._item_to_order(attrs) if attrs else None

    # Conversion helpers

    def _order_to_item(self, order: Order) -> dict[str, Any]:
        """Convert Order model to DynamoDB item."""
        item: dict[str, Any] = {
            "id": order.id,
            "status": order.status.value,
            "amount": order.amount,
            "currency": order.currency,
            "created_at": order.created_at.isoformat(),
        }
        for field in (
            "game_name",
            "package_name",
            "player_id",
            "server_id",
            "payment_method",
            "status_message",
        ):
            value = getattr(order, field)
            if value:
                item[field] = value
        if order.updated_at:
            item["updated_at"] = order.updated_at.isoformat()
        return item

    def _item_to_order(self, item: dict[str, Any]) -> Order:
        """Convert DynamoDB item to Order model."""
        return Order(
            id=item["id"],
            status=OrderStatus(item["status"]),
            amount=Decimal(str(item.get("amount", 0))),
            currency=item.get("currency", "USD"),
            game_name=item.get("game_name"),
            package_name=item.get("package_name"),
            player_id=item.get("player_id"),
            server_id=item.get("server_id"),
            payment_method=item.get("payment_method"),
            status_message=item.get("status_message"),
            created_at=dt.datetime.fromisoformat(item["created_at"]),
            updated_at=(
                dt.datetime.fromisoformat(item["updated_at"])
                if item.get("updated_at")
                else None
            ),
        )
