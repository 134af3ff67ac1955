"""
Presigned upload destination negotiation.

The presigned URL endpoint has been seen answering in three nestings. Each is
modelled as a named shape with a key path; shapes are tried in a fixed order
and the first one carrying both ``url`` and ``file_id`` wins.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from blaaiz.client import APIResponse, HttpClient
from blaaiz.errors import BlaaizError
from blaaiz.models.enums import FileCategory
from blaaiz.models.files import PresignedTarget
from blaaiz.uploads.exceptions import NegotiationError

logger = logging.getLogger("blaaiz.uploads.negotiator")

PRESIGNED_URL_PATH = "/api/external/file/get-presigned-url"


@dataclass(frozen=True)
class ResponseShape:
    name: str
    path: tuple[str, ...]

    def extract(self, response: Mapping[str, Any]) -> Optional[PresignedTarget]:
        node: Any = response
        for key in self.path:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
        if not isinstance(node, Mapping):
            return None
        url, file_id = node.get("url"), node.get("file_id")
        if not url or not file_id:
            return None
        return PresignedTarget(url=str(url), file_id=str(file_id))


PRESIGNED_SHAPES = (
    ResponseShape("flat", ()),                     # {url, file_id}
    ResponseShape("wrapped", ("data",)),           # {data: {url, file_id}}
    ResponseShape("doubly_wrapped", ("data", "data")),  # {data: {data: {url, file_id}}}
)


def parse_presigned_target(response: Any) -> PresignedTarget:
    """
    Pull the presigned target out of a negotiation response.

    Raises:
        NegotiationError: if no known shape matches.
    """
    raw = response.to_dict() if isinstance(response, APIResponse) else response
    if isinstance(raw, Mapping):
        for shape in PRESIGNED_SHAPES:
            target = shape.extract(raw)
            if target is not None:
                logger.debug("Presigned response matched %s shape", shape.name)
                return target
    raise NegotiationError(
        "Invalid presigned URL response structure. Expected 'url' and 'file_id' keys. "
        f"Got: {json.dumps(raw, default=str)}",
        code="INVALID_RESPONSE",
    )


class UploadNegotiator:
    """Requests a presigned upload destination for a customer document."""

    def __init__(self, client: HttpClient):
        self._client = client

    async def negotiate(self, customer_id: str, file_category: FileCategory) -> PresignedTarget:
        try:
            response = await self._client.make_request(
                "POST",
                PRESIGNED_URL_PATH,
                {"customer_id": customer_id, "file_category": file_category.value},
            )
        except BlaaizError as e:
            raise NegotiationError(e.message, status=e.status, code=e.code) from e
        return parse_presigned_target(response)
