"""
Failure taxonomy for the file upload pipeline.

Stage errors are raised by the individual components. The pipeline catches
them once at its boundary and re-raises a single ``FileUploadError`` whose
message is ``"File upload failed: <cause>"``. ``ValidationError`` is never
wrapped so callers can match on its exact message.
"""

from typing import Optional

from blaaiz.errors import BlaaizError

FAILURE_PREFIX = "File upload failed:"


class UploadPipelineError(BlaaizError):
    """Base class for errors raised by a pipeline stage."""


class NegotiationError(UploadPipelineError):
    """The presigned URL request failed or returned an unrecognized shape."""


class DownloadError(UploadPipelineError):
    """Fetching a URL-form file input failed."""


class TooManyRedirectsError(DownloadError):
    """A remote file URL redirected more times than allowed."""

    def __init__(self, url: str, max_redirects: int):
        super().__init__(
            f"File download failed: exceeded {max_redirects} redirects fetching {url}",
            code="TOO_MANY_REDIRECTS",
        )
        self.url = url
        self.max_redirects = max_redirects


class PayloadTooLargeError(UploadPipelineError):
    """A file exceeded the configured size ceiling."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"File is too large: {size} bytes exceeds the {limit} byte limit",
            code="PAYLOAD_TOO_LARGE",
        )
        self.size = size
        self.limit = limit


class UploadError(UploadPipelineError):
    """The direct PUT to the object store failed or was not acknowledged."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message, status=status, code="UPLOAD_ERROR")
        self.body = body


class AssociationError(UploadPipelineError):
    """
    Linking the uploaded object to the customer failed.

    The object is already in the store at this point. ``file_id`` is kept so
    the caller can reconcile it manually.
    """

    def __init__(
        self,
        message: str,
        file_id: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message, status=status, code=code)
        self.file_id = file_id


class FileUploadError(BlaaizError):
    """Single caller-facing failure for any stage after validation."""

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        status: Optional[int] = None,
        code: Optional[str] = None,
        file_id: Optional[str] = None,
    ):
        super().__init__(message, status=status, code=code)
        self.stage = stage
        self.file_id = file_id

    @classmethod
    def wrap(
        cls,
        error: BaseException,
        stage: Optional[str] = None,
        file_id: Optional[str] = None,
    ) -> "FileUploadError":
        """Build the caller-facing error for ``error`` unless it already carries the prefix."""
        message = str(error)
        if FAILURE_PREFIX not in message:
            message = f"{FAILURE_PREFIX} {message}"
        return cls(
            message,
            stage=stage,
            status=getattr(error, "status", None),
            code=getattr(error, "code", None),
            file_id=getattr(error, "file_id", None) or file_id,
        )
