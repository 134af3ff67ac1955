"""
Blaaiz client facade.

Bundles one HttpClient with every resource service and adds the compound
workflows that chain several calls together:

    async with Blaaiz("api-key") as blaaiz:
        await blaaiz.customers.upload_file_complete(customer_id, {
            "file": pdf_bytes,
            "file_category": "identity",
        })
"""

import logging
from typing import Any, Optional

import httpx

from blaaiz.audit.database import create_audit_engine, create_session_factory, init_audit_db
from blaaiz.audit.logger import UploadAuditTrail
from blaaiz.client import HttpClient
from blaaiz.config import Settings
from blaaiz.errors import BlaaizError
from blaaiz.services import (
    BankService,
    CollectionService,
    CurrencyService,
    CustomerService,
    FeesService,
    FileService,
    PayoutService,
    TransactionService,
    VirtualBankAccountService,
    WalletService,
    WebhookService,
)
from blaaiz.uploads.orchestrator import build_upload_pipeline

logger = logging.getLogger("blaaiz")


class Blaaiz:
    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        audit_trail: Optional[UploadAuditTrail] = None,
    ):
        """
        Args:
            api_key: Falls back to ``BLAAIZ_API_KEY``.
            base_url: Falls back to ``BLAAIZ_BASE_URL``.
            timeout: Seconds per API call; falls back to ``BLAAIZ_TIMEOUT_SECONDS``.
            settings: Explicit configuration instead of the environment.
            transport: httpx transport shared by all outgoing requests.
            audit_trail: Records every file upload milestone when given. Without
                one, a ledger is opened at ``BLAAIZ_AUDIT_DATABASE_URL`` if set;
                its tables are created on ``async with`` entry or ``init_audit()``.
        """
        self.settings = settings or Settings()
        self.client = HttpClient(
            api_key,
            base_url=base_url,
            timeout=timeout,
            settings=self.settings,
            transport=transport,
        )

        self._audit_engine = None
        if audit_trail is None and self.settings.audit_database_url:
            self._audit_engine = create_audit_engine(self.settings.audit_database_url)
            audit_trail = UploadAuditTrail(create_session_factory(self._audit_engine))
        self.audit_trail = audit_trail

        self.customers = CustomerService(
            self.client,
            upload_pipeline=build_upload_pipeline(self.client, self.settings, audit_trail),
        )
        self.collections = CollectionService(self.client)
        self.payouts = PayoutService(self.client)
        self.wallets = WalletService(self.client)
        self.virtual_bank_accounts = VirtualBankAccountService(self.client)
        self.transactions = TransactionService(self.client)
        self.banks = BankService(self.client)
        self.currencies = CurrencyService(self.client)
        self.fees = FeesService(self.client)
        self.files = FileService(self.client)
        self.webhooks = WebhookService(self.client)

    async def __aenter__(self) -> "Blaaiz":
        await self.init_audit()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def init_audit(self) -> None:
        """Create the audit ledger tables when the ledger was opened from settings."""
        if self._audit_engine is not None:
            await init_audit_db(self._audit_engine)

    async def aclose(self) -> None:
        await self.client.aclose()
        if self._audit_engine is not None:
            await self._audit_engine.dispose()

    async def test_connection(self) -> bool:
        """True when the API accepts the key and answers a cheap read."""
        try:
            await self.currencies.list()
        except BlaaizError as e:
            logger.warning("Connection test failed: %s", e)
            return False
        return True

    async def create_complete_payout(
        self,
        payout_data: dict[str, Any],
        customer_data: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Create the customer if needed, quote fees, then initiate the payout.

        Returns:
            {"customer_id", "payout", "fees"} with the raw response bodies.

        Raises:
            BlaaizError: "Complete payout failed: ..." wrapping the first failing step.
        """
        try:
            customer_id = payout_data.get("customer_id")
            if not customer_id and customer_data:
                created = await self.customers.create(customer_data)
                customer_id = created.data["data"]["id"]

            fees = await self.fees.get_breakdown({
                "from_currency_id": payout_data.get("from_currency_id"),
                "to_currency_id": payout_data.get("to_currency_id"),
                "from_amount": payout_data.get("from_amount"),
            })
            payout = await self.payouts.initiate({**payout_data, "customer_id": customer_id})
        except Exception as e:
            raise BlaaizError(
                f"Complete payout failed: {e}",
                getattr(e, "status", None),
                getattr(e, "code", None),
            ) from e

        return {"customer_id": customer_id, "payout": payout.data, "fees": fees.data}

    async def create_complete_collection(
        self,
        collection_data: dict[str, Any],
        customer_data: Optional[dict[str, Any]] = None,
        create_vba: bool = False,
    ) -> dict[str, Any]:
        """
        Create the customer if needed, optionally open a virtual bank account,
        then initiate the collection.

        Returns:
            {"customer_id", "collection", "virtual_account"}.

        Raises:
            BlaaizError: "Complete collection failed: ..." wrapping the first failing step.
        """
        try:
            customer_id = collection_data.get("customer_id")
            if not customer_id and customer_data:
                created = await self.customers.create(customer_data)
                customer_id = created.data["data"]["id"]

            virtual_account = None
            if create_vba:
                account_name = (
                    f"{customer_data['first_name']} {customer_data['last_name']}"
                    if customer_data
                    else "Customer Account"
                )
                vba = await self.virtual_bank_accounts.create({
                    "wallet_id": collection_data.get("wallet_id"),
                    "account_name": account_name,
                })
                virtual_account = vba.data

            collection = await self.collections.initiate({**collection_data, "customer_id": customer_id})
        except Exception as e:
            raise BlaaizError(
                f"Complete collection failed: {e}",
                getattr(e, "status", None),
                getattr(e, "code", None),
            ) from e

        return {
            "customer_id": customer_id,
            "collection": collection.data,
            "virtual_account": virtual_account,
        }
