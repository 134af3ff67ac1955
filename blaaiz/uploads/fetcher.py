"""
Remote file fetcher.

Downloads URL-form file inputs so they can be re-uploaded to the presigned
destination. Redirects are followed manually up to a fixed cap, the body is
buffered in memory up to the configured size ceiling, and a filename is
inferred when the caller did not give one:

  1. ``filename`` parameter of the Content-Disposition header
  2. last path segment of the final URL (left percent-encoded)
  3. ...plus an extension guessed from the Content-Type when the segment has none
"""

import logging
import posixpath
import re
from typing import Callable, Optional
from urllib.parse import unquote, urlsplit

import httpx

from blaaiz.models.files import NormalizedFile
from blaaiz.uploads.exceptions import DownloadError, PayloadTooLargeError, TooManyRedirectsError

logger = logging.getLogger("blaaiz.uploads.fetcher")

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_REDIRECTS = 5

MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
    "image/tiff": ".tiff",
    "application/pdf": ".pdf",
    "text/plain": ".txt",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
}

CONTENT_DISPOSITION_FILENAME = re.compile(r"filename[^;=\n]*=(([\'\"]).*?\2|[^;\n]*)")

ClientFactory = Callable[[float], httpx.AsyncClient]


def extension_for(content_type: Optional[str]) -> Optional[str]:
    if not content_type:
        return None
    return MIME_EXTENSIONS.get(content_type.split(";")[0].strip().lower())


def filename_from_disposition(header: Optional[str]) -> Optional[str]:
    if not header:
        return None
    match = CONTENT_DISPOSITION_FILENAME.search(header)
    if not match:
        return None
    value = match.group(1).strip().strip("'\"")
    # RFC 5987 form: filename*=UTF-8''name%20with%20spaces.pdf
    if value.lower().startswith("utf-8''"):
        value = unquote(value[7:])
    return value or None


def filename_from_url(url: str, content_type: Optional[str]) -> Optional[str]:
    """Last path segment of ``url``, still percent-encoded as it appears in the URL."""
    name = posixpath.basename(urlsplit(url).path)
    if not name:
        return None
    if not posixpath.splitext(name)[1]:
        name += extension_for(content_type) or ""
    return name


class RemoteFetcher:
    """Downloads a file from an http(s) URL into memory."""

    def __init__(
        self,
        client_factory: ClientFactory,
        timeout: float = DEFAULT_TIMEOUT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        max_file_size_bytes: int = 0,
    ):
        self._client_factory = client_factory
        self._timeout = timeout
        self._max_redirects = max_redirects
        self._max_file_size_bytes = max_file_size_bytes

    async def fetch(self, url: str) -> NormalizedFile:
        """
        Download ``url``, following at most ``max_redirects`` redirects.

        Raises:
            DownloadError: non-2xx terminal status, timeout, or transport failure.
            TooManyRedirectsError: the redirect cap was exceeded.
            PayloadTooLargeError: the body exceeds the size ceiling.
        """
        current = url
        async with self._client_factory(self._timeout) as client:
            for hop in range(self._max_redirects + 1):
                try:
                    async with client.stream("GET", current) as response:
                        location = response.headers.get("location")
                        if 300 <= response.status_code < 400 and location:
                            current = str(response.url.join(location))
                            logger.debug("Redirect %d -> %s", hop + 1, current)
                            continue

                        if not 200 <= response.status_code < 300:
                            raise DownloadError(
                                f"Failed to download file: HTTP {response.status_code}",
                                status=response.status_code,
                            )

                        content = await self._read_body(response)
                        content_type = response.headers.get("content-type")
                        filename = filename_from_disposition(
                            response.headers.get("content-disposition")
                        ) or filename_from_url(str(response.url), content_type)
                except httpx.TimeoutException as e:
                    raise DownloadError("File download timeout", code="TIMEOUT_ERROR") from e
                except httpx.HTTPError as e:
                    raise DownloadError(f"File download failed: {e}", code="REQUEST_ERROR") from e

                logger.info("Downloaded %d bytes from %s", len(content), urlsplit(current).netloc)
                return NormalizedFile(content=content, content_type=content_type, filename=filename)

        raise TooManyRedirectsError(url, self._max_redirects)

    async def _read_body(self, response: httpx.Response) -> bytes:
        limit = self._max_file_size_bytes
        declared = response.headers.get("content-length")
        if limit and declared and declared.isdigit() and int(declared) > limit:
            raise PayloadTooLargeError(int(declared), limit)

        chunks: list[bytes] = []
        total = 0
        async for chunk in response.aiter_bytes():
            total += len(chunk)
            if limit and total > limit:
                raise PayloadTooLargeError(total, limit)
            chunks.append(chunk)
        return b"".join(chunks)
