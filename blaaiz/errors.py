"""Base exceptions raised by the Blaaiz client."""

from typing import Optional


class BlaaizError(Exception):
    """Any failure reported by the API or the transport underneath it."""

    def __init__(self, message: str, status: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class ValidationError(BlaaizError):
    """A required field is missing or malformed. Raised before any request is sent."""

    def __init__(self, message: str):
        super().__init__(message, status=None, code="VALIDATION_ERROR")


def require_fields(data: Optional[dict], fields: list[str], suffix: str = "") -> None:
    """Raise ValidationError for the first field in ``fields`` that is falsy in ``data``."""
    data = data or {}
    for field in fields:
        if not data.get(field):
            raise ValidationError(f"{field} is required{suffix}")


class WebhookSignatureError(BlaaizError):
    """A webhook payload did not match its HMAC signature."""

    def __init__(self, message: str = "Invalid webhook signature"):
        super().__init__(message, status=None, code="INVALID_SIGNATURE")
