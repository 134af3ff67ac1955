"""Async Python client for the Blaaiz remittance and payments API."""

from blaaiz.client import APIResponse, HttpClient
from blaaiz.config import Settings, configure_logging
from blaaiz.errors import BlaaizError, ValidationError, WebhookSignatureError
from blaaiz.models import FileCategory, FileOptions, UploadResult
from blaaiz.sdk import Blaaiz
from blaaiz.uploads.exceptions import AssociationError, FileUploadError

__version__ = "1.0.0"

__all__ = [
    "APIResponse",
    "AssociationError",
    "Blaaiz",
    "BlaaizError",
    "FileCategory",
    "FileOptions",
    "FileUploadError",
    "HttpClient",
    "Settings",
    "UploadResult",
    "ValidationError",
    "WebhookSignatureError",
    "configure_logging",
]
