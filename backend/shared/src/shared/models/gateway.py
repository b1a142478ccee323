"""Payment gateway configuration model."""

from typing import Any

from pydantic import BaseModel, Field

# The one supported gateway
IKHODE_GATEWAY_SLUG = "ikhode-bakong"


class PaymentGateway(BaseModel):
    """A configured payment gateway.

    `config` is a free-form map; only `webhook_secret` is read by the backend.
    """

    slug: str = Field(..., description="Gateway identifier", examples=[IKHODE_GATEWAY_SLUG])
    name: str | None = Field(default=None, description="Display name")
    config: dict[str, Any] = Field(default_factory=dict)

    @property
    def webhook_secret(self) -> str:
        """Shared secret for inbound webhooks, empty if not configured."""
        secret = self.config.get("webhook_secret") or ""
        return str(secret)
