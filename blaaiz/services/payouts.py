from typing import Any

from blaaiz.client import APIResponse
from blaaiz.errors import require_fields
from blaaiz.models.enums import PayoutMethod
from blaaiz.services.base import BaseService, resource_path

PAYOUT_REQUIRED_FIELDS = ["wallet_id", "method", "from_amount", "from_currency_id", "to_currency_id"]
INTERAC_REQUIRED_FIELDS = ["email", "interac_first_name", "interac_last_name"]


class PayoutService(BaseService):
    async def initiate(self, payout_data: dict[str, Any]) -> APIResponse:
        """
        Send money out of a wallet.

        Method-specific fields: ``account_number`` for bank_transfer; ``email``,
        ``interac_first_name`` and ``interac_last_name`` for interac.
        """
        require_fields(payout_data, PAYOUT_REQUIRED_FIELDS)

        method = payout_data["method"]
        if method == PayoutMethod.BANK_TRANSFER.value:
            require_fields(payout_data, ["account_number"], suffix=" for bank_transfer method")
        elif method == PayoutMethod.INTERAC.value:
            require_fields(payout_data, INTERAC_REQUIRED_FIELDS, suffix=" for interac method")

        return await self.client.make_request("POST", resource_path("payout"), payout_data)
