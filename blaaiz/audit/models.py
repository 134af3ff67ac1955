"""SQLAlchemy models for the upload audit ledger."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UploadAuditLog(Base):
    """
    Append-only record of one upload pipeline event.

    Rows are never updated or deleted. An invocation that has an
    ``object_uploaded`` row but no ``file_associated`` row left an object in
    the store that the customer record does not point to.
    """

    __tablename__ = "upload_audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    invocation_id = Column(String(32), nullable=False, index=True)
    customer_id = Column(String(100), nullable=False, index=True)
    file_category = Column(String(30), nullable=True)
    file_id = Column(String(100), nullable=True, index=True)
    action = Column(String(50), nullable=False)
    details = Column(Text, nullable=True)  # JSON
    timestamp = Column(DateTime(timezone=True), default=_utcnow)
