"""FastAPI application for the game top-up REST API.

This package provides REST endpoints for:
- Health checks
- Checkout orders (create, status, operator listing)
- Payment provider webhooks

Deployed behind API Gateway on AWS Lambda via Mangum.
"""

from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from mangum import Mangum

from api import __version__
from api.exceptions import register_exception_handlers
from api.middleware.correlation import CorrelationIdMiddleware
from api.middleware.cors import StorefrontCORSMiddleware
from api.routes.health import router as health_router
from api.routes.orders import router as orders_router
from api.routes.webhooks import router as webhooks_router
from shared.utils.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)

app = FastAPI(
    title="Game Top-up API",
    description="REST API for top-up orders and payment webhooks",
    version=__version__,
)

# Storefront calls from arbitrary origins; webhook routes answer their own preflights
app.add_middleware(
    StorefrontCORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)
app.add_middleware(CorrelationIdMiddleware)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

# Storefront routes under /api (CloudFront routes /api/* → API Gateway)
app.include_router(health_router, prefix="/api")
app.include_router(orders_router, prefix="/api")
# Webhook URLs are registered with the payment provider; keep them unprefixed
app.include_router(webhooks_router)


@app.get("/api/ping")
async def ping() -> dict[str, Any]:
    """Root health check endpoint at /api/ping."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "topup-api",
    }


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = True) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 8080)
        reload: Enable hot reload for development (default: True)
    """
    import uvicorn

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run(
            "api.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["backend/api/src", "backend/shared/src"],
        )
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
