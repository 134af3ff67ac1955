"""
Immutable audit trail for file uploads.

Each pipeline invocation appends one entry per milestone:

  upload_started → presigned_url_issued → object_uploaded → file_associated

or ``upload_failed`` with the failing stage. Nothing cleans up an object whose
association failed; ``find_orphaned_uploads`` lists them so they can be
reconciled by hand.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from blaaiz.audit.models import UploadAuditLog

logger = logging.getLogger("blaaiz.audit")

UPLOAD_STARTED = "upload_started"
PRESIGNED_URL_ISSUED = "presigned_url_issued"
OBJECT_UPLOADED = "object_uploaded"
FILE_ASSOCIATED = "file_associated"
UPLOAD_FAILED = "upload_failed"


class UploadAuditTrail:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def record(
        self,
        action: str,
        invocation_id: str,
        customer_id: str,
        file_category: Optional[str] = None,
        file_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> UploadAuditLog:
        """
        Append one audit entry and commit it immediately.

        Args:
            action: Milestone name (e.g. "object_uploaded", "upload_failed").
            invocation_id: Groups all entries of one pipeline run.
            customer_id: Customer the file belongs to.
            file_category: Document slot being filled.
            file_id: Server-issued file id, once known.
            details: Arbitrary context (serialized to JSON).
        """
        entry = UploadAuditLog(
            invocation_id=invocation_id,
            customer_id=customer_id,
            file_category=file_category,
            file_id=file_id,
            action=action,
            details=json.dumps(details) if details else None,
            timestamp=datetime.now(timezone.utc),
        )
        async with self._session_factory() as session:
            session.add(entry)
            await session.commit()

        logger.info(
            "AUDIT | invocation=%s customer=%s file=%s action=%s | %s",
            invocation_id[:8],
            customer_id,
            file_id or "-",
            action,
            json.dumps(details)[:200] if details else "",
        )
        return entry

    async def trace(self, invocation_id: str) -> list[UploadAuditLog]:
        """All entries of one invocation, oldest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(UploadAuditLog)
                .where(UploadAuditLog.invocation_id == invocation_id)
                .order_by(UploadAuditLog.id)
            )
            return list(result.scalars().all())

    async def trace_for_file(self, file_id: str) -> list[UploadAuditLog]:
        """All entries that mention ``file_id``, oldest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(UploadAuditLog)
                .where(UploadAuditLog.file_id == file_id)
                .order_by(UploadAuditLog.id)
            )
            return list(result.scalars().all())

    async def find_orphaned_uploads(self, customer_id: Optional[str] = None) -> list[str]:
        """File ids that reached the object store but were never associated."""
        associated = select(UploadAuditLog.file_id).where(
            UploadAuditLog.action == FILE_ASSOCIATED
        )
        query = (
            select(UploadAuditLog.file_id)
            .where(UploadAuditLog.action == OBJECT_UPLOADED)
            .where(UploadAuditLog.file_id.not_in(associated))
            .order_by(UploadAuditLog.id)
        )
        if customer_id is not None:
            query = query.where(UploadAuditLog.customer_id == customer_id)

        async with self._session_factory() as session:
            result = await session.execute(query)
            file_ids = result.scalars().all()

        return list(dict.fromkeys(file_ids))
