from blaaiz.audit.database import create_audit_engine, create_session_factory, init_audit_db
from blaaiz.audit.logger import UploadAuditTrail
from blaaiz.audit.models import Base, UploadAuditLog

__all__ = [
    "Base",
    "UploadAuditLog",
    "UploadAuditTrail",
    "create_audit_engine",
    "create_session_factory",
    "init_audit_db",
]
