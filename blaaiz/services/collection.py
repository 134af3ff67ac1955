from typing import Any

from blaaiz.client import APIResponse
from blaaiz.errors import require_fields
from blaaiz.services.base import BaseService, resource_path


class CollectionService(BaseService):
    async def initiate(self, collection_data: dict[str, Any]) -> APIResponse:
        require_fields(collection_data, ["method", "amount", "wallet_id"])
        return await self.client.make_request("POST", resource_path("collection"), collection_data)

    async def initiate_crypto(self, crypto_data: dict[str, Any]) -> APIResponse:
        return await self.client.make_request("POST", resource_path("collection", "crypto"), crypto_data)

    async def attach_customer(self, attach_data: dict[str, Any]) -> APIResponse:
        require_fields(attach_data, ["customer_id", "transaction_id"])
        return await self.client.make_request(
            "POST", resource_path("collection", "attach-customer"), attach_data
        )

    async def get_crypto_networks(self) -> APIResponse:
        return await self.client.make_request("GET", resource_path("collection", "crypto", "networks"))
