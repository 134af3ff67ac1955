from blaaiz.models.enums import (
    ASSOCIATION_FIELDS,
    CollectionMethod,
    CustomerType,
    FileCategory,
    FileInputKind,
    PayoutMethod,
    UploadStage,
)
from blaaiz.models.files import FileOptions, NormalizedFile, PresignedTarget, UploadResult

__all__ = [
    "ASSOCIATION_FIELDS",
    "CollectionMethod",
    "CustomerType",
    "FileCategory",
    "FileInputKind",
    "FileOptions",
    "NormalizedFile",
    "PayoutMethod",
    "PresignedTarget",
    "UploadResult",
    "UploadStage",
]
