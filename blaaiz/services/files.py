from typing import Any

from blaaiz.client import APIResponse
from blaaiz.errors import require_fields
from blaaiz.services.base import BaseService
from blaaiz.uploads.negotiator import PRESIGNED_URL_PATH


class FileService(BaseService):
    async def get_presigned_url(self, file_data: dict[str, Any]) -> APIResponse:
        """Raw presigned URL request. Most callers want CustomerService.upload_file_complete."""
        require_fields(file_data, ["customer_id", "file_category"])
        return await self.client.make_request("POST", PRESIGNED_URL_PATH, file_data)
