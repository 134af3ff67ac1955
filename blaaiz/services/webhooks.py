"""
Webhook registration and signature verification.

Blaaiz signs each webhook delivery with HMAC-SHA256 over the raw JSON body
using the merchant's webhook secret. The signature arrives as a hex digest,
optionally prefixed with ``sha256=``.
"""

import hashlib
import hmac
import json
from datetime import datetime, timezone
from typing import Any, Union

from blaaiz.client import APIResponse
from blaaiz.errors import BlaaizError, ValidationError, WebhookSignatureError, require_fields
from blaaiz.services.base import BaseService, resource_path

Payload = Union[str, bytes, dict[str, Any]]


def _payload_bytes(payload: Payload) -> bytes:
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def compute_signature(payload: Payload, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), _payload_bytes(payload), hashlib.sha256).hexdigest()


class WebhookService(BaseService):
    async def register(self, webhook_data: dict[str, Any]) -> APIResponse:
        require_fields(webhook_data, ["collection_url", "payout_url"])
        return await self.client.make_request("POST", resource_path("webhook"), webhook_data)

    async def get(self) -> APIResponse:
        return await self.client.make_request("GET", resource_path("webhook"))

    async def update(self, webhook_data: dict[str, Any]) -> APIResponse:
        return await self.client.make_request("PUT", resource_path("webhook"), webhook_data)

    async def replay(self, replay_data: dict[str, Any]) -> APIResponse:
        require_fields(replay_data, ["transaction_id"])
        return await self.client.make_request("POST", resource_path("webhook", "replay"), replay_data)

    @staticmethod
    def verify_signature(payload: Payload, signature: str, secret: str) -> bool:
        """
        Check ``signature`` against the HMAC-SHA256 of ``payload``.

        Dict payloads are serialized as compact JSON, so pass the raw request
        body whenever it is available.

        Raises:
            ValidationError: if any argument is missing.
        """
        if not payload:
            raise ValidationError("Payload is required for signature verification")
        if not signature:
            raise ValidationError("Signature is required for signature verification")
        if not secret:
            raise ValidationError("Webhook secret is required for signature verification")

        provided = signature.strip()
        if provided.startswith("sha256="):
            provided = provided[len("sha256="):]
        expected = compute_signature(payload, secret)
        try:
            return hmac.compare_digest(bytes.fromhex(provided), bytes.fromhex(expected))
        except ValueError:
            return False

    def construct_event(self, payload: Payload, signature: str, secret: str) -> dict[str, Any]:
        """
        Verify and decode a webhook delivery.

        Raises:
            WebhookSignatureError: signature mismatch.
            BlaaizError: payload is not a JSON object.
        """
        if not self.verify_signature(payload, signature, secret):
            raise WebhookSignatureError()

        if isinstance(payload, dict):
            event = payload
        else:
            try:
                event = json.loads(payload)
            except (ValueError, UnicodeDecodeError) as e:
                raise BlaaizError("Invalid webhook payload: unable to parse JSON", code="PARSE_ERROR") from e
        if not isinstance(event, dict):
            raise BlaaizError("Invalid webhook payload: unable to parse JSON", code="PARSE_ERROR")

        return {
            **event,
            "verified": True,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
