from typing import Any, Optional

from blaaiz.client import APIResponse
from blaaiz.errors import ValidationError
from blaaiz.services.base import BaseService, resource_path


class TransactionService(BaseService):
    async def list(self, filters: Optional[dict[str, Any]] = None) -> APIResponse:
        """Filters (page, limit, status, currency, type) travel in a POST body."""
        return await self.client.make_request("POST", resource_path("transaction"), filters or {})

    async def get(self, transaction_id: str) -> APIResponse:
        if not transaction_id:
            raise ValidationError("Transaction ID is required")
        return await self.client.make_request("GET", resource_path("transaction", transaction_id))
