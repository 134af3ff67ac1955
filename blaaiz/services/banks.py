from typing import Any

from blaaiz.client import APIResponse
from blaaiz.errors import require_fields
from blaaiz.services.base import BaseService, resource_path


class BankService(BaseService):
    async def list(self) -> APIResponse:
        return await self.client.make_request("GET", resource_path("bank"))

    async def lookup_account(self, lookup_data: dict[str, Any]) -> APIResponse:
        require_fields(lookup_data, ["account_number", "bank_id"])
        return await self.client.make_request("POST", resource_path("bank", "account-lookup"), lookup_data)
