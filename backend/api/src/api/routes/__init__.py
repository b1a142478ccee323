"""API routes package.

Routers are organized by domain:

- health: Health check endpoints
- orders: Checkout order creation and status
- webhooks: Payment provider notifications

health and orders are registered in main.py under the /api prefix;
webhooks are mounted at the root so provider URLs stay short.
"""

from api.routes.health import router as health_router
from api.routes.orders import router as orders_router
from api.routes.webhooks import router as webhooks_router

__all__ = [
    "health_router",
    "orders_router",
    "webhooks_router",
]
