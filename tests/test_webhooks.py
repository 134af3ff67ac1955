"""Tests for webhook signature verification and the receiver router."""

import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from blaaiz.api import build_webhook_router
from blaaiz.api.webhooks import SIGNATURE_HEADER
from blaaiz.errors import BlaaizError, ValidationError, WebhookSignatureError
from blaaiz.services.webhooks import WebhookService, compute_signature

SECRET = "whsec_test"
EVENT = {"event": "payout.completed", "transaction_id": "tx-1", "amount": 100}
BODY = json.dumps(EVENT).encode("utf-8")


class TestVerifySignature:
    def test_valid_signature(self):
        assert WebhookService.verify_signature(BODY, compute_signature(BODY, SECRET), SECRET)

    def test_sha256_prefix_is_accepted(self):
        signature = "sha256=" + compute_signature(BODY, SECRET)
        assert WebhookService.verify_signature(BODY, signature, SECRET)

    def test_wrong_secret(self):
        assert not WebhookService.verify_signature(BODY, compute_signature(BODY, "other"), SECRET)

    def test_tampered_body(self):
        signature = compute_signature(BODY, SECRET)
        assert not WebhookService.verify_signature(BODY + b" ", signature, SECRET)

    def test_non_hex_signature(self):
        assert not WebhookService.verify_signature(BODY, "not-a-digest", SECRET)

    def test_dict_payload_uses_compact_json(self):
        compact = json.dumps(EVENT, separators=(",", ":")).encode("utf-8")
        assert WebhookService.verify_signature(EVENT, compute_signature(compact, SECRET), SECRET)

    @pytest.mark.parametrize(
        "payload,signature,secret,message",
        [
            ("", "abc", SECRET, "Payload is required"),
            (BODY, "", SECRET, "Signature is required"),
            (BODY, "abc", "", "Webhook secret is required"),
        ],
    )
    def test_missing_arguments(self, payload, signature, secret, message):
        with pytest.raises(ValidationError, match=message):
            WebhookService.verify_signature(payload, signature, secret)


class TestConstructEvent:
    def test_returns_verified_event(self):
        event = WebhookService(client=None).construct_event(BODY, compute_signature(BODY, SECRET), SECRET)
        assert event["transaction_id"] == "tx-1"
        assert event["verified"] is True
        assert "timestamp" in event

    def test_bad_signature(self):
        with pytest.raises(WebhookSignatureError, match="Invalid webhook signature"):
            WebhookService(client=None).construct_event(BODY, "00" * 32, SECRET)

    def test_unparseable_payload(self):
        body = b"not json"
        with pytest.raises(BlaaizError, match="unable to parse JSON"):
            WebhookService(client=None).construct_event(body, compute_signature(body, SECRET), SECRET)


class TestWebhookRouter:
    @pytest.fixture
    def received(self):
        return []

    @pytest.fixture
    def client(self, received):
        async def handle(event):
            received.append(event)

        app = FastAPI()
        app.include_router(build_webhook_router(SECRET, handle))
        return TestClient(app)

    def test_requires_secret(self):
        with pytest.raises(ValueError, match="Webhook secret is required"):
            build_webhook_router("", lambda event: None)

    def test_accepts_signed_delivery(self, client, received):
        response = client.post(
            "/webhooks/blaaiz",
            content=BODY,
            headers={SIGNATURE_HEADER: compute_signature(BODY, SECRET)},
        )
        assert response.status_code == 200
        assert response.json() == {"received": True}
        assert received[0]["event"] == "payout.completed"
        assert received[0]["verified"] is True

    def test_sync_handler(self):
        seen = []
        app = FastAPI()
        app.include_router(build_webhook_router(SECRET, seen.append, prefix="/hooks"))
        response = TestClient(app).post(
            "/hooks", content=BODY, headers={SIGNATURE_HEADER: compute_signature(BODY, SECRET)}
        )
        assert response.status_code == 200
        assert len(seen) == 1

    def test_missing_signature(self, client, received):
        response = client.post("/webhooks/blaaiz", content=BODY)
        assert response.status_code == 400
        assert SIGNATURE_HEADER in response.json()["detail"]
        assert received == []

    def test_bad_signature(self, client, received):
        response = client.post("/webhooks/blaaiz", content=BODY, headers={SIGNATURE_HEADER: "00" * 32})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid webhook signature"
        assert received == []

    def test_empty_body(self, client):
        response = client.post("/webhooks/blaaiz", content=b"", headers={SIGNATURE_HEADER: "00" * 32})
        assert response.status_code == 400
