from blaaiz.client import APIResponse
from blaaiz.errors import ValidationError
from blaaiz.services.base import BaseService, resource_path


class WalletService(BaseService):
    async def list(self) -> APIResponse:
        return await self.client.make_request("GET", resource_path("wallet"))

    async def get(self, wallet_id: str) -> APIResponse:
        if not wallet_id:
            raise ValidationError("Wallet ID is required")
        return await self.client.make_request("GET", resource_path("wallet", wallet_id))
