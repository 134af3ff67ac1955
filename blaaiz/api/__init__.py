from blaaiz.api.webhooks import SIGNATURE_HEADER, build_webhook_router

__all__ = ["SIGNATURE_HEADER", "build_webhook_router"]
