from blaaiz.client import APIResponse
from blaaiz.services.base import BaseService, resource_path


class CurrencyService(BaseService):
    async def list(self) -> APIResponse:
        return await self.client.make_request("GET", resource_path("currency"))
