"""
Webhook receiver endpoint.

Mount the router on any FastAPI app to accept signed Blaaiz deliveries:

    app.include_router(build_webhook_router(secret, handle_event))

POST {prefix}: verify ``x-blaaiz-signature`` over the raw body, decode the
  event and hand it to ``handler``. Responds 400 on a missing or
  bad signature or an undecodable body.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Union

from fastapi import APIRouter, HTTPException, Request

from blaaiz.errors import BlaaizError, WebhookSignatureError
from blaaiz.services.webhooks import WebhookService

logger = logging.getLogger("blaaiz.api.webhooks")

SIGNATURE_HEADER = "x-blaaiz-signature"

EventHandler = Callable[[dict[str, Any]], Union[Awaitable[None], None]]


def build_webhook_router(
    secret: str,
    handler: EventHandler,
    prefix: str = "/webhooks/blaaiz",
) -> APIRouter:
    if not secret:
        raise ValueError("Webhook secret is required")

    router = APIRouter(prefix=prefix, tags=["webhooks"])
    # verification needs no HTTP client
    verifier = WebhookService(client=None)

    @router.post("")
    async def receive_webhook(request: Request) -> dict[str, bool]:
        """Verify and dispatch one webhook delivery."""
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            raise HTTPException(status_code=400, detail=f"Missing {SIGNATURE_HEADER} header")

        body = await request.body()
        if not body:
            raise HTTPException(status_code=400, detail="Empty webhook payload")
        try:
            event = verifier.construct_event(body, signature, secret)
        except WebhookSignatureError as e:
            logger.warning("Rejected webhook with bad signature")
            raise HTTPException(status_code=400, detail=str(e)) from e
        except BlaaizError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        result = handler(event)
        if inspect.isawaitable(result):
            await result
        logger.info("Webhook received: %s", event.get("transaction_id") or event.get("event") or "-")
        return {"received": True}

    return router
