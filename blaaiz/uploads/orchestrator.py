"""
File upload pipeline: the end-to-end ``upload_file_complete`` operation.

One invocation walks a linear sequence of stages:

  VALIDATE → NEGOTIATE → NORMALIZE → UPLOAD → ASSOCIATE → DONE

and drops into FAILED from any of them. Validation runs entirely locally and
its ValidationError (or PayloadTooLargeError for an oversized local file)
reaches the caller untouched. Anything that goes wrong
afterwards is re-raised once as ``FileUploadError("File upload failed: ...")``,
chained to the original error.

Invocations share no state. Nothing is retried, and an object uploaded before
a failed association is left in place (its file_id rides on the error and, when
an audit trail is configured, in the ledger).
"""

import logging
import uuid
from collections.abc import Mapping
from typing import Any, Optional, Union

from blaaiz.audit import logger as audit
from blaaiz.audit.logger import UploadAuditTrail
from blaaiz.client import HttpClient
from blaaiz.config import Settings
from blaaiz.errors import ValidationError
from blaaiz.models.enums import FileCategory, UploadStage
from blaaiz.models.files import FileOptions, UploadResult
from blaaiz.uploads.associator import AssociationCommitter
from blaaiz.uploads.exceptions import FAILURE_PREFIX, FileUploadError
from blaaiz.uploads.fetcher import RemoteFetcher
from blaaiz.uploads.negotiator import UploadNegotiator
from blaaiz.uploads.normalizer import InputNormalizer, check_file_input
from blaaiz.uploads.uploader import ObjectStoreUploader

logger = logging.getLogger("blaaiz.uploads.pipeline")

VALID_CATEGORIES = ", ".join(c.value for c in FileCategory)


def validate_upload_request(
    customer_id: Optional[str],
    file_options: Union[FileOptions, Mapping[str, Any], None],
    max_file_size_bytes: int = 0,
) -> tuple[FileOptions, FileCategory]:
    """
    Check everything that can be checked without the network.

    Checks run in a fixed order and the first failure wins.

    Raises:
        ValidationError: with the exact message for the first failing check.
        PayloadTooLargeError: a local file exceeds ``max_file_size_bytes``.
    """
    if not customer_id:
        raise ValidationError("Customer ID is required")

    if file_options is None:
        raise ValidationError("File options are required")
    if isinstance(file_options, Mapping):
        options = FileOptions.from_mapping(file_options)
    elif isinstance(file_options, FileOptions):
        options = file_options
    else:
        raise ValidationError("File options must be a mapping or FileOptions")

    file = options.file
    if file is None or (hasattr(file, "__len__") and len(file) == 0):
        raise ValidationError("File is required")

    if not options.file_category:
        raise ValidationError("file_category is required")

    try:
        category = FileCategory(options.file_category)
    except ValueError:
        raise ValidationError(f"file_category must be one of: {VALID_CATEGORIES}") from None

    check_file_input(file, max_file_size_bytes)
    return options, category


class FileUploadPipeline:
    """Runs one file upload invocation at a time per call; safe to share across tasks."""

    def __init__(
        self,
        negotiator: UploadNegotiator,
        normalizer: InputNormalizer,
        uploader: ObjectStoreUploader,
        associator: AssociationCommitter,
        audit_trail: Optional[UploadAuditTrail] = None,
    ):
        self._negotiator = negotiator
        self._normalizer = normalizer
        self._uploader = uploader
        self._associator = associator
        self._audit_trail = audit_trail

    async def run(
        self,
        customer_id: str,
        file_options: Union[FileOptions, Mapping[str, Any], None],
    ) -> UploadResult:
        """
        Upload a customer document and link it to the customer record.

        Args:
            customer_id: Customer the document belongs to.
            file_options: ``file`` (bytes, base64, data URL, or http(s) URL),
                ``file_category`` and optionally ``filename`` / ``content_type``.

        Returns:
            UploadResult with the association response, file_id and presigned URL.

        Raises:
            ValidationError: input rejected before any network call.
            PayloadTooLargeError: a local file over the size ceiling, also before any call.
            FileUploadError: any later stage failed.
        """
        options, category = validate_upload_request(
            customer_id, file_options, self._normalizer.max_file_size_bytes
        )

        invocation_id = uuid.uuid4().hex
        stage = UploadStage.NEGOTIATE
        file_id: Optional[str] = None

        try:
            await self._audit(audit.UPLOAD_STARTED, invocation_id, customer_id, category)

            target = await self._negotiator.negotiate(customer_id, category)
            file_id = target.file_id
            await self._audit(audit.PRESIGNED_URL_ISSUED, invocation_id, customer_id, category, file_id)

            stage = UploadStage.NORMALIZE
            normalized = await self._normalizer.normalize(
                options.file,
                content_type=options.content_type,
                filename=options.filename,
            )

            stage = UploadStage.UPLOAD
            etag = await self._uploader.upload(target.url, normalized)
            await self._audit(
                audit.OBJECT_UPLOADED,
                invocation_id,
                customer_id,
                category,
                file_id,
                details={"size": normalized.size, "etag": etag, "content_type": normalized.content_type},
            )

            stage = UploadStage.ASSOCIATE
            association = await self._associator.associate(customer_id, category, file_id)
            await self._audit(audit.FILE_ASSOCIATED, invocation_id, customer_id, category, file_id)

        except Exception as e:
            logger.warning(
                "Upload %s for customer %s failed at %s: %s",
                invocation_id[:8],
                customer_id,
                stage.value,
                e,
            )
            if isinstance(e, FileUploadError) and FAILURE_PREFIX in str(e):
                error = e
            else:
                error = FileUploadError.wrap(e, stage=stage.value, file_id=file_id)
            await self._record_failure(invocation_id, customer_id, category, stage, error.file_id, e)
            if error is e:
                raise
            raise error from e

        logger.info(
            "Upload %s for customer %s done: %s linked as %s",
            invocation_id[:8],
            customer_id,
            file_id,
            category.association_field,
        )
        return UploadResult(
            association=association,
            file_id=file_id,
            presigned_url=target.url,
            file_category=category,
        )

    async def _record_failure(
        self,
        invocation_id: str,
        customer_id: str,
        category: FileCategory,
        stage: UploadStage,
        file_id: Optional[str],
        error: Exception,
    ) -> None:
        """Ledger the failure; a ledger outage must not mask the stage error."""
        try:
            await self._audit(
                audit.UPLOAD_FAILED,
                invocation_id,
                customer_id,
                category,
                file_id,
                details={"stage": stage.value, "error": str(error)},
            )
        except Exception as audit_error:
            logger.warning(
                "Could not record failure of upload %s in audit trail: %s",
                invocation_id[:8],
                audit_error,
            )

    async def _audit(
        self,
        action: str,
        invocation_id: str,
        customer_id: str,
        category: FileCategory,
        file_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        if self._audit_trail is None:
            return
        await self._audit_trail.record(
            action,
            invocation_id=invocation_id,
            customer_id=customer_id,
            file_category=category.value,
            file_id=file_id,
            details=details,
        )


def build_upload_pipeline(
    client: HttpClient,
    settings: Optional[Settings] = None,
    audit_trail: Optional[UploadAuditTrail] = None,
) -> FileUploadPipeline:
    """Build a FileUploadPipeline wired to ``client`` and its settings."""
    settings = settings or client.settings
    fetcher = RemoteFetcher(
        client.external_client,
        timeout=settings.download_timeout_seconds,
        max_redirects=settings.max_redirects,
        max_file_size_bytes=settings.max_file_size_bytes,
    )
    return FileUploadPipeline(
        negotiator=UploadNegotiator(client),
        normalizer=InputNormalizer(fetcher, max_file_size_bytes=settings.max_file_size_bytes),
        uploader=ObjectStoreUploader(client.external_client, timeout=client.timeout),
        associator=AssociationCommitter(client),
        audit_trail=audit_trail,
    )
