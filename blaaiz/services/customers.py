"""Customer records, KYC data and customer documents."""

from collections.abc import Mapping
from typing import Any, Optional, Union

from blaaiz.client import APIResponse, HttpClient
from blaaiz.errors import ValidationError, require_fields
from blaaiz.models.enums import CustomerType
from blaaiz.models.files import FileOptions
from blaaiz.services.base import BaseService, resource_path
from blaaiz.uploads.orchestrator import FileUploadPipeline, build_upload_pipeline

CUSTOMER_REQUIRED_FIELDS = ["first_name", "last_name", "type", "email", "country", "id_type", "id_number"]


def _require_customer_id(customer_id: Optional[str]) -> None:
    if not customer_id:
        raise ValidationError("Customer ID is required")


class CustomerService(BaseService):
    def __init__(self, client: HttpClient, upload_pipeline: Optional[FileUploadPipeline] = None):
        super().__init__(client)
        self._upload_pipeline = upload_pipeline

    @property
    def upload_pipeline(self) -> FileUploadPipeline:
        if self._upload_pipeline is None:
            self._upload_pipeline = build_upload_pipeline(self.client)
        return self._upload_pipeline

    async def create(self, customer_data: dict[str, Any]) -> APIResponse:
        require_fields(customer_data, CUSTOMER_REQUIRED_FIELDS)
        if customer_data["type"] == CustomerType.BUSINESS.value and not customer_data.get("business_name"):
            raise ValidationError("business_name is required when type is business")
        return await self.client.make_request("POST", resource_path("customer"), customer_data)

    async def list(self) -> APIResponse:
        return await self.client.make_request("GET", resource_path("customer"))

    async def get(self, customer_id: str) -> APIResponse:
        _require_customer_id(customer_id)
        return await self.client.make_request("GET", resource_path("customer", customer_id))

    async def update(self, customer_id: str, update_data: dict[str, Any]) -> APIResponse:
        _require_customer_id(customer_id)
        return await self.client.make_request("PUT", resource_path("customer", customer_id), update_data)

    async def add_kyc(self, customer_id: str, kyc_data: dict[str, Any]) -> APIResponse:
        _require_customer_id(customer_id)
        return await self.client.make_request(
            "POST", resource_path("customer", customer_id, "kyc-data"), kyc_data
        )

    async def upload_files(self, customer_id: str, file_data: dict[str, str]) -> APIResponse:
        """Link already-uploaded file ids (id_file, proof_of_address_file, liveness_check_file)."""
        _require_customer_id(customer_id)
        return await self.client.make_request(
            "PUT", resource_path("customer", customer_id, "files"), file_data
        )

    async def upload_file_complete(
        self,
        customer_id: str,
        file_options: Union[FileOptions, Mapping[str, Any], None],
    ) -> dict[str, Any]:
        """
        Upload a document and link it to the customer in one call.

        Returns the association response merged with ``file_id`` and
        ``presigned_url``. See FileUploadPipeline.run for the failure modes.
        """
        result = await self.upload_pipeline.run(customer_id, file_options)
        return result.to_dict()
