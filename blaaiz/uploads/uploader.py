"""Direct PUT of a normalized file to its presigned object-store URL."""

import logging
import unicodedata
from urllib.parse import quote, urlsplit

import httpx

from blaaiz.models.files import NormalizedFile
from blaaiz.uploads.exceptions import UploadError
from blaaiz.uploads.fetcher import ClientFactory

logger = logging.getLogger("blaaiz.uploads.uploader")


def content_disposition(filename: str) -> str:
    """
    Build an attachment header that survives ASCII-only header encoding.

    Non-ASCII names go in an RFC 5987 ``filename*`` parameter, with an ASCII
    approximation in ``filename`` for stores that ignore the extended form.
    """
    fallback = (
        unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    )
    fallback = fallback.replace("\\", "_").replace('"', "_")
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    return (
        f'attachment; filename="{fallback or "file"}"; '
        f"filename*=UTF-8''{quote(filename, safe='')}"
    )


class ObjectStoreUploader:
    """
    Pushes bytes to a presigned URL.

    A 2xx status alone is not treated as success: the store must also return an
    ETag, otherwise the object is assumed not to have been durably written.
    """

    def __init__(self, client_factory: ClientFactory, timeout: float = 30.0):
        self._client_factory = client_factory
        self._timeout = timeout

    async def upload(self, presigned_url: str, file: NormalizedFile) -> str:
        """
        PUT ``file`` to ``presigned_url`` and return the ETag.

        Raises:
            UploadError: transport failure, non-2xx status, or missing ETag.
        """
        headers = {"Content-Length": str(file.size)}
        if file.content_type:
            headers["Content-Type"] = file.content_type
        if file.filename:
            headers["Content-Disposition"] = content_disposition(file.filename)

        try:
            async with self._client_factory(self._timeout) as client:
                response = await client.put(presigned_url, content=file.content, headers=headers)
        except httpx.HTTPError as e:
            raise UploadError(f"S3 upload request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise UploadError(
                f"S3 upload failed with status {response.status_code}: {response.text}",
                status=response.status_code,
                body=response.text,
            )

        etag = response.headers.get("etag")
        if not etag:
            raise UploadError(
                "S3 upload failed: No ETag received from S3",
                status=response.status_code,
                body=response.text,
            )

        logger.info(
            "Uploaded %d bytes to %s (etag=%s)",
            file.size,
            urlsplit(presigned_url).netloc,
            etag,
        )
        return etag
