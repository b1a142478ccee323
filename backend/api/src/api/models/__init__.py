"""API-specific request/response models.

Domain models (Order, OrderCreate, WebhookResponse, etc.) live in
shared.models and are reused directly where they fit.

Modules:
- orders: Order listing response models
"""

from api.models.orders import OrderListResponse

__all__ = ["OrderListResponse"]
