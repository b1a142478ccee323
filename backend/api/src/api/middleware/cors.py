"""CORS middleware for the storefront routes.

Webhook paths are passed straight through: their own OPTIONS routes answer
every preflight with an empty 200 and the permissive CORS headers the
payment provider expects, whatever headers the request lists.
"""

from starlette.middleware.cors import CORSMiddleware
from starlette.types import Receive, Scope, Send

WEBHOOK_PATH_PREFIX = "/webhooks/"


class StorefrontCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that skips webhook paths."""

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].startswith(WEBHOOK_PATH_PREFIX):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)
