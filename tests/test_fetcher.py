"""Tests for downloading URL-form file inputs."""

import httpx
import pytest

from blaaiz.uploads.exceptions import DownloadError, PayloadTooLargeError, TooManyRedirectsError
from blaaiz.uploads.fetcher import RemoteFetcher, extension_for, filename_from_disposition, filename_from_url


def _fetcher(mock_transport, handler, max_redirects=5, max_size=0) -> RemoteFetcher:
    transport = mock_transport(handler)

    def client_factory(timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=False)

    return RemoteFetcher(client_factory, timeout=5.0, max_redirects=max_redirects, max_file_size_bytes=max_size)


class TestFilenameResolution:
    def test_quoted_disposition(self):
        assert filename_from_disposition('attachment; filename="passport.pdf"') == "passport.pdf"

    def test_unquoted_disposition(self):
        assert filename_from_disposition("inline; filename=bill.png; size=10") == "bill.png"

    def test_rfc5987_disposition(self):
        assert filename_from_disposition("attachment; filename*=UTF-8''my%20id.jpg") == "my id.jpg"

    def test_no_filename_in_disposition(self):
        assert filename_from_disposition("attachment") is None

    def test_url_segment_keeps_extension(self):
        assert filename_from_url("https://cdn.example/docs/id.jpeg?sig=1", "image/png") == "id.jpeg"

    def test_url_segment_gets_extension_from_content_type(self):
        assert filename_from_url("https://cdn.example/docs/passport", "application/pdf; charset=binary") == "passport.pdf"

    def test_url_segment_stays_percent_encoded(self):
        assert filename_from_url("https://cdn.example/docs/r%C3%A9sum%C3%A9.pdf", None) == "r%C3%A9sum%C3%A9.pdf"

    def test_unknown_content_type_adds_nothing(self):
        assert filename_from_url("https://cdn.example/docs/blob", "application/x-unknown") == "blob"
        assert extension_for(None) is None


class TestRemoteFetcher:
    @pytest.mark.asyncio
    async def test_downloads_body_and_metadata(self, mock_transport):
        def handler(request):
            return httpx.Response(
                200,
                content=b"%PDF-1.4",
                headers={"content-type": "application/pdf", "content-disposition": 'attachment; filename="utility.pdf"'},
            )

        result = await _fetcher(mock_transport, handler).fetch("https://cdn.example/download?id=7")
        assert result.content == b"%PDF-1.4"
        assert result.content_type == "application/pdf"
        assert result.filename == "utility.pdf"

    @pytest.mark.asyncio
    async def test_follows_single_redirect(self, mock_transport, sent_requests):
        """A URL that redirects once to a 200 yields the final body."""

        def handler(request):
            if request.url.path == "/start":
                return httpx.Response(302, headers={"location": "/final/selfie"})
            return httpx.Response(200, content=b"B", headers={"content-type": "image/jpeg"})

        result = await _fetcher(mock_transport, handler).fetch("https://cdn.example/start")
        assert result.content == b"B"
        assert result.filename == "selfie.jpg"
        assert [str(r.url) for r in sent_requests] == [
            "https://cdn.example/start",
            "https://cdn.example/final/selfie",
        ]

    @pytest.mark.asyncio
    async def test_redirect_cycle_is_capped(self, mock_transport, sent_requests):
        def handler(request):
            target = "/b" if request.url.path == "/a" else "/a"
            return httpx.Response(301, headers={"location": target})

        with pytest.raises(TooManyRedirectsError) as exc_info:
            await _fetcher(mock_transport, handler, max_redirects=3).fetch("https://cdn.example/a")
        assert isinstance(exc_info.value, DownloadError)
        assert len(sent_requests) == 4

    @pytest.mark.asyncio
    async def test_non_2xx_status(self, mock_transport):
        def handler(request):
            return httpx.Response(404, content=b"missing")

        with pytest.raises(DownloadError, match="Failed to download file: HTTP 404") as exc_info:
            await _fetcher(mock_transport, handler).fetch("https://cdn.example/gone.pdf")
        assert exc_info.value.status == 404

    @pytest.mark.asyncio
    async def test_redirect_without_location_is_terminal(self, mock_transport):
        def handler(request):
            return httpx.Response(304)

        with pytest.raises(DownloadError, match="HTTP 304"):
            await _fetcher(mock_transport, handler).fetch("https://cdn.example/x")

    @pytest.mark.asyncio
    async def test_timeout(self, mock_transport):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(DownloadError, match="File download timeout"):
            await _fetcher(mock_transport, handler).fetch("https://cdn.example/slow.png")

    @pytest.mark.asyncio
    async def test_transport_error(self, mock_transport):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(DownloadError, match="File download failed: connection refused"):
            await _fetcher(mock_transport, handler).fetch("https://cdn.example/a.png")

    @pytest.mark.asyncio
    async def test_body_over_ceiling(self, mock_transport):
        def handler(request):
            return httpx.Response(200, content=b"x" * 64)

        with pytest.raises(PayloadTooLargeError):
            await _fetcher(mock_transport, handler, max_size=16).fetch("https://cdn.example/big.bin")
