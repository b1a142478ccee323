"""Payment gateway configuration lookup.

Gateway rows live in the `payment-gateways` table keyed by slug. Secrets
are read on every call so a rotated secret applies to the next webhook
without a redeploy.
"""

from typing import TYPE_CHECKING

from shared.models import PaymentGateway
from shared.utils.logging import get_logger

if TYPE_CHECKING:
    from .dynamodb import DynamoDBService

logger = get_logger(__name__)


class GatewayConfigService:
    """Reads payment gateway configuration from DynamoDB."""

    GATEWAYS_TABLE = "payment-gateways"

    def __init__(self, db: "DynamoDBService") -> None:
        self.db = db

    def get_gateway(self, slug: str) -> PaymentGateway | None:
        """Get a gateway by slug, or None if it is not configured."""
        item = self.db.get_item(self.GATEWAYS_TABLE, {"slug": slug}, consistent_read=True)
        if not item:
            return None
        return PaymentGateway(
            slug=item["slug"],
            name=item.get("name"),
            config=dict(item.get("config") or {}),
        )

    def get_webhook_secret(self, slug: str) -> str:
        """Get the inbound webhook secret for a gateway.

        Returns:
            The secret, or an empty string when none is configured
        """
        gateway = self.get_gateway(slug)
        secret = gateway.webhook_secret if gateway else ""
        logger.debug(
            "Webhook secret for %s: %s", slug, "[SET]" if secret else "[NOT SET]"
        )
        return secret
