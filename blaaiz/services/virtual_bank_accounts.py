from typing import Any, Optional
from urllib.parse import urlencode

from blaaiz.client import APIResponse
from blaaiz.errors import ValidationError, require_fields
from blaaiz.services.base import BaseService, resource_path


class VirtualBankAccountService(BaseService):
    async def create(self, vba_data: dict[str, Any]) -> APIResponse:
        require_fields(vba_data, ["wallet_id"])
        return await self.client.make_request("POST", resource_path("virtual-bank-account"), vba_data)

    async def list(self, wallet_id: Optional[str] = None) -> APIResponse:
        path = resource_path("virtual-bank-account")
        if wallet_id:
            path += "?" + urlencode({"wallet_id": wallet_id})
        return await self.client.make_request("GET", path)

    async def get(self, vba_id: str) -> APIResponse:
        if not vba_id:
            raise ValidationError("Virtual bank account ID is required")
        return await self.client.make_request("GET", resource_path("virtual-bank-account", vba_id))
