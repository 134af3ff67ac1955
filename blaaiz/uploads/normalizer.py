"""
Input normalization for file uploads.

Callers may hand over a file in several shapes. Each is reduced to a single
``NormalizedFile`` (bytes plus optional content type and filename), checked
in this order:

  1. bytes-like object                  → used as-is
  2. ``data:<mime>;base64,<payload>``   → payload decoded, mime adopted if none given
  3. ``http://`` / ``https://`` string  → downloaded by the RemoteFetcher
  4. any other string                   → decoded as plain base64
  5. list/tuple of byte values          → coerced to bytes

Explicit ``content_type`` / ``filename`` from the caller always win over
anything inferred.
"""

import base64
import binascii
import re
from typing import Any, Optional

from blaaiz.errors import ValidationError
from blaaiz.models.enums import FileInputKind
from blaaiz.models.files import NormalizedFile
from blaaiz.uploads.exceptions import PayloadTooLargeError
from blaaiz.uploads.fetcher import RemoteFetcher

DATA_URL_MIME = re.compile(r"^data:([^;,]+)")
_URL_SAFE_TO_STANDARD = str.maketrans("-_", "+/")


def classify_input(file: Any) -> FileInputKind:
    """
    Decide which branch of normalization applies to ``file``.

    Raises:
        ValidationError: if ``file`` is empty or of an unsupported type.
    """
    if file is None or (hasattr(file, "__len__") and len(file) == 0):
        raise ValidationError("File is required")
    if isinstance(file, (bytes, bytearray, memoryview)):
        return FileInputKind.RAW_BYTES
    if isinstance(file, str):
        if file.startswith("data:"):
            return FileInputKind.DATA_URL
        if file.startswith(("http://", "https://")):
            return FileInputKind.REMOTE_URL
        return FileInputKind.BASE64
    if isinstance(file, (list, tuple)):
        return FileInputKind.BYTE_SEQUENCE
    raise ValidationError(
        "File must be bytes, a base64 string, a data URL or an http(s) URL"
    )


def split_data_url(data_url: str) -> tuple[Optional[str], str]:
    """Return (mime type, base64 payload) for a data URL."""
    header, sep, payload = data_url.partition(",")
    if not sep:
        raise ValidationError("File is not a valid data URL")
    match = DATA_URL_MIME.match(header)
    return (match.group(1) if match else None), payload


def decode_base64(payload: str) -> bytes:
    """
    Strictly decode a base64 string.

    Whitespace and missing padding are tolerated, as is the URL-safe alphabet.
    Anything else outside the base64 alphabet is rejected instead of being
    silently dropped.

    Raises:
        ValidationError: if the payload is not valid base64 or decodes to nothing.
    """
    cleaned = "".join(payload.split()).translate(_URL_SAFE_TO_STANDARD)
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        decoded = base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("File is not valid base64") from e
    if not decoded:
        raise ValidationError("File is not valid base64")
    return decoded


def check_file_input(file: Any, max_file_size_bytes: int = 0) -> FileInputKind:
    """
    Validate ``file`` without performing I/O. Returns its kind.

    Local inputs are decoded here so a malformed or oversized file fails before
    any request is made. Remote URLs are only size-checked once downloaded.

    Raises:
        ValidationError: empty, malformed, or unsupported input.
        PayloadTooLargeError: a local input exceeds ``max_file_size_bytes``.
    """
    kind = classify_input(file)
    if kind is not FileInputKind.REMOTE_URL:
        content, _ = _decode_local(file, kind)
        _check_size(content, max_file_size_bytes)
    return kind


def _decode_local(file: Any, kind: FileInputKind) -> tuple[bytes, Optional[str]]:
    """Return (content, mime type inferred from the input) for a non-URL input."""
    if kind is FileInputKind.RAW_BYTES:
        return bytes(file), None
    if kind is FileInputKind.DATA_URL:
        mime, payload = split_data_url(file)
        return decode_base64(payload), mime
    if kind is FileInputKind.BASE64:
        return decode_base64(file), None
    if kind is FileInputKind.BYTE_SEQUENCE:
        return _coerce_sequence(file), None
    raise ValidationError("Remote URLs must be normalized with normalize()")


def _check_size(content: bytes, limit: int) -> None:
    if limit and len(content) > limit:
        raise PayloadTooLargeError(len(content), limit)


def _coerce_sequence(file: Any) -> bytes:
    try:
        return bytes(file)
    except (TypeError, ValueError) as e:
        raise ValidationError("File byte sequence must contain integers in range 0-255") from e


class InputNormalizer:
    """Turns any supported file input into a NormalizedFile."""

    def __init__(self, fetcher: RemoteFetcher, max_file_size_bytes: int = 0):
        self._fetcher = fetcher
        self._max_file_size_bytes = max_file_size_bytes

    @property
    def max_file_size_bytes(self) -> int:
        return self._max_file_size_bytes

    async def normalize(
        self,
        file: Any,
        content_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> NormalizedFile:
        """
        Normalize ``file``, downloading it first when it is a URL.

        Raises:
            ValidationError: empty, malformed, or unsupported input.
            DownloadError: the URL could not be fetched.
            PayloadTooLargeError: the content exceeds the configured ceiling.
        """
        kind = classify_input(file)
        if kind is FileInputKind.REMOTE_URL:
            downloaded = await self._fetcher.fetch(file)
            return NormalizedFile(
                content=downloaded.content,
                content_type=content_type or downloaded.content_type,
                filename=filename or downloaded.filename,
            )
        return self.normalize_local(file, content_type=content_type, filename=filename)

    def normalize_local(
        self,
        file: Any,
        content_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> NormalizedFile:
        """Normalize every input shape that does not need the network."""
        content, mime = _decode_local(file, classify_input(file))
        _check_size(content, self._max_file_size_bytes)
        return NormalizedFile(content=content, content_type=content_type or mime, filename=filename)
