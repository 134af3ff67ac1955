"""Tests for file input normalization."""

import base64
from unittest.mock import AsyncMock

import pytest

from blaaiz.errors import ValidationError
from blaaiz.models.enums import FileInputKind
from blaaiz.models.files import NormalizedFile
from blaaiz.uploads.exceptions import PayloadTooLargeError
from blaaiz.uploads.normalizer import InputNormalizer, check_file_input, classify_input, decode_base64

PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
PNG_BYTES = base64.b64decode(PNG_B64)


def _normalizer(max_size: int = 0) -> tuple[InputNormalizer, AsyncMock]:
    fetcher = AsyncMock()
    return InputNormalizer(fetcher, max_file_size_bytes=max_size), fetcher


class TestClassifyInput:
    def test_bytes(self):
        assert classify_input(b"abc") is FileInputKind.RAW_BYTES
        assert classify_input(bytearray(b"abc")) is FileInputKind.RAW_BYTES

    def test_data_url(self):
        assert classify_input(f"data:image/png;base64,{PNG_B64}") is FileInputKind.DATA_URL

    def test_remote_urls(self):
        assert classify_input("https://files.example/a.pdf") is FileInputKind.REMOTE_URL
        assert classify_input("http://files.example/a.pdf") is FileInputKind.REMOTE_URL

    def test_plain_base64(self):
        assert classify_input(PNG_B64) is FileInputKind.BASE64

    def test_byte_sequence(self):
        assert classify_input([116, 101, 115, 116]) is FileInputKind.BYTE_SEQUENCE

    @pytest.mark.parametrize("empty", [None, b"", "", []])
    def test_empty_input_is_rejected(self, empty):
        with pytest.raises(ValidationError, match="^File is required$"):
            classify_input(empty)

    def test_unsupported_type(self):
        with pytest.raises(ValidationError, match="File must be"):
            classify_input(42)


class TestBase64Validation:
    def test_decodes_valid_payload(self):
        assert decode_base64(PNG_B64) == PNG_BYTES

    def test_tolerates_whitespace_and_missing_padding(self):
        assert decode_base64("dGVz\ndA") == b"test"

    def test_accepts_url_safe_alphabet(self):
        raw = bytes([251, 255, 191])
        assert decode_base64(base64.urlsafe_b64encode(raw).decode()) == raw

    def test_rejects_characters_outside_alphabet(self):
        with pytest.raises(ValidationError, match="not valid base64"):
            decode_base64("not base64 at all!!")

    def test_check_rejects_malformed_data_url_payload(self):
        with pytest.raises(ValidationError, match="not valid base64"):
            check_file_input("data:image/png;base64,@@@@")

    def test_check_rejects_data_url_without_comma(self):
        with pytest.raises(ValidationError, match="not a valid data URL"):
            check_file_input("data:image/png;base64")

    def test_check_does_not_touch_urls(self):
        assert check_file_input("https://files.example/a.pdf") is FileInputKind.REMOTE_URL

    def test_check_enforces_size_on_decoded_content(self):
        encoded = base64.b64encode(b"12345").decode()
        assert check_file_input(encoded, max_file_size_bytes=5) is FileInputKind.BASE64
        with pytest.raises(PayloadTooLargeError) as exc_info:
            check_file_input(f"data:text/plain;base64,{encoded}", max_file_size_bytes=4)
        assert exc_info.value.size == 5

    def test_check_skips_size_for_urls(self):
        assert check_file_input("https://files.example/a.pdf", max_file_size_bytes=1) is FileInputKind.REMOTE_URL


class TestInputNormalizer:
    @pytest.mark.asyncio
    async def test_bytes_pass_through(self):
        normalizer, fetcher = _normalizer()
        result = await normalizer.normalize(b"test")
        assert result == NormalizedFile(content=b"test")
        fetcher.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_base64_matches_raw_bytes(self):
        """Feeding base64 of a buffer yields the same buffer as feeding it directly."""
        normalizer, _ = _normalizer()
        raw = bytes(range(256))
        from_raw = await normalizer.normalize(raw)
        from_b64 = await normalizer.normalize(base64.b64encode(raw).decode())
        assert from_b64.content == from_raw.content == raw

    @pytest.mark.asyncio
    async def test_data_url_extracts_content_type(self):
        normalizer, _ = _normalizer()
        result = await normalizer.normalize(f"data:image/png;base64,{PNG_B64}")
        assert result.content_type == "image/png"
        assert result.content == PNG_BYTES

    @pytest.mark.asyncio
    async def test_explicit_content_type_wins_over_data_url(self):
        normalizer, _ = _normalizer()
        result = await normalizer.normalize(
            f"data:image/png;base64,{PNG_B64}", content_type="application/octet-stream"
        )
        assert result.content_type == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_byte_sequence_is_coerced(self):
        normalizer, _ = _normalizer()
        result = await normalizer.normalize([116, 101, 115, 116], filename="t.txt")
        assert result.content == b"test"
        assert result.filename == "t.txt"

    @pytest.mark.asyncio
    async def test_url_delegates_to_fetcher(self):
        normalizer, fetcher = _normalizer()
        fetcher.fetch.return_value = NormalizedFile(
            content=b"%PDF", content_type="application/pdf", filename="doc.pdf"
        )
        result = await normalizer.normalize("https://files.example/doc")
        fetcher.fetch.assert_awaited_once_with("https://files.example/doc")
        assert result == NormalizedFile(content=b"%PDF", content_type="application/pdf", filename="doc.pdf")

    @pytest.mark.asyncio
    async def test_caller_metadata_wins_over_downloaded(self):
        normalizer, fetcher = _normalizer()
        fetcher.fetch.return_value = NormalizedFile(
            content=b"%PDF", content_type="application/pdf", filename="doc.pdf"
        )
        result = await normalizer.normalize(
            "https://files.example/doc", content_type="image/jpeg", filename="id.jpg"
        )
        assert result.content_type == "image/jpeg"
        assert result.filename == "id.jpg"

    @pytest.mark.asyncio
    async def test_size_ceiling(self):
        normalizer, _ = _normalizer(max_size=3)
        with pytest.raises(PayloadTooLargeError) as exc_info:
            await normalizer.normalize(b"test")
        assert exc_info.value.size == 4
        assert exc_info.value.limit == 3

    @pytest.mark.asyncio
    async def test_empty_file_rejected_before_any_branch(self):
        normalizer, fetcher = _normalizer()
        with pytest.raises(ValidationError, match="^File is required$"):
            await normalizer.normalize("")
        fetcher.fetch.assert_not_called()
