"""
HTTP transport for the Blaaiz API.

Wraps a single ``httpx.AsyncClient`` bound to the API base URL with the
authentication and content headers every endpoint expects. Responses are
normalized into ``APIResponse`` on success and ``BlaaizError`` on failure:

  - 2xx with a JSON body        → APIResponse(data, status, headers)
  - non-2xx with a JSON body    → BlaaizError(body["message"], status, body["code"])
  - body that is not JSON       → BlaaizError("Failed to parse API response", status, "PARSE_ERROR")
  - timeout                     → BlaaizError("Request timeout", None, "TIMEOUT_ERROR")
  - connection / protocol error → BlaaizError("Request failed: ...", None, "REQUEST_ERROR")

Third-party hosts (remote file URLs, presigned object-store URLs) are reached
through ``external_client()`` so the API key never leaves the API origin.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from blaaiz.config import Settings
from blaaiz.errors import BlaaizError

logger = logging.getLogger("blaaiz.client")


@dataclass
class APIResponse:
    """Successful API response envelope."""

    data: Any
    status: int
    headers: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "status": self.status, "headers": dict(self.headers)}


class HttpClient:
    """Authenticated JSON client for ``/api/external`` endpoints."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or Settings()
        self.api_key = api_key or self.settings.api_key
        if not self.api_key:
            raise ValueError("API key is required")

        self.base_url = base_url or self.settings.base_url
        self.timeout = timeout if timeout is not None else self.settings.timeout_seconds
        self._transport = transport
        self.default_headers = {
            "x-blaaiz-api-key": self.api_key,
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": self.settings.user_agent,
        }
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.default_headers,
            timeout=self.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def external_client(self, timeout: Optional[float] = None) -> httpx.AsyncClient:
        """
        Build an unauthenticated client for hosts outside the API.

        Redirects are not followed automatically; callers that need them
        (the remote fetcher) handle them with an explicit cap.
        """
        return httpx.AsyncClient(
            timeout=timeout if timeout is not None else self.timeout,
            headers={"User-Agent": self.settings.user_agent},
            follow_redirects=False,
            transport=self._transport,
        )

    async def make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> APIResponse:
        """
        Send one request to the API and decode its JSON body.

        Args:
            method: HTTP verb, case-insensitive.
            endpoint: Path relative to the base URL (may carry a query string).
            data: JSON-serializable body. Ignored for GET.
            headers: Extra headers merged over the defaults.

        Raises:
            BlaaizError: on any non-2xx status, unparseable body, or transport failure.
        """
        method = method.upper()
        content = None
        if data is not None and method != "GET":
            content = json.dumps(data).encode("utf-8")

        logger.debug("%s %s", method, endpoint)
        try:
            response = await self._client.request(method, endpoint, content=content, headers=headers)
        except httpx.TimeoutException as e:
            raise BlaaizError("Request timeout", None, "TIMEOUT_ERROR") from e
        except httpx.HTTPError as e:
            raise BlaaizError(f"Request failed: {e}", None, "REQUEST_ERROR") from e

        try:
            parsed = response.json() if response.content else {}
        except ValueError as e:
            raise BlaaizError("Failed to parse API response", response.status_code, "PARSE_ERROR") from e

        if 200 <= response.status_code < 300:
            return APIResponse(
                data=parsed,
                status=response.status_code,
                headers=dict(response.headers),
            )

        message = "API request failed"
        code = None
        if isinstance(parsed, dict):
            message = parsed.get("message") or message
            code = parsed.get("code")
        logger.debug("%s %s failed with HTTP %d", method, endpoint, response.status_code)
        raise BlaaizError(message, response.status_code, code)
