"""Links an uploaded object to the customer record."""

from typing import Any
from urllib.parse import quote

from blaaiz.client import APIResponse, HttpClient
from blaaiz.errors import BlaaizError
from blaaiz.models.enums import FileCategory
from blaaiz.uploads.exceptions import AssociationError


def customer_files_path(customer_id: str) -> str:
    return f"/api/external/customer/{quote(str(customer_id), safe='')}/files"


class AssociationCommitter:
    def __init__(self, client: HttpClient):
        self._client = client

    async def associate(
        self,
        customer_id: str,
        file_category: FileCategory,
        file_id: str,
    ) -> dict[str, Any]:
        """
        POST ``{<slot field>: file_id}`` to the customer's files endpoint.

        Returns the API response as a plain dict.

        Raises:
            AssociationError: carrying ``file_id`` so the stored object can be reconciled.
        """
        body = {file_category.association_field: file_id}
        try:
            response = await self._client.make_request("POST", customer_files_path(customer_id), body)
        except BlaaizError as e:
            raise AssociationError(e.message, file_id=file_id, status=e.status, code=e.code) from e

        if isinstance(response, APIResponse):
            return response.to_dict()
        return dict(response)
