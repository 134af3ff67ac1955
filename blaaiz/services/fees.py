from typing import Any

from blaaiz.client import APIResponse
from blaaiz.errors import require_fields
from blaaiz.services.base import BaseService, resource_path


class FeesService(BaseService):
    async def get_breakdown(self, fee_data: dict[str, Any]) -> APIResponse:
        require_fields(fee_data, ["from_currency_id", "to_currency_id", "from_amount"])
        return await self.client.make_request("POST", resource_path("fees", "breakdown"), fee_data)
