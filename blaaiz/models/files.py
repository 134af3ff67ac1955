"""Value objects passed between the stages of a file upload."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from blaaiz.models.enums import FileCategory

FileInput = Union[bytes, bytearray, memoryview, str, list, tuple]


@dataclass(frozen=True)
class FileOptions:
    """What the caller wants uploaded and where it belongs."""

    file: Optional[FileInput]
    file_category: Optional[str] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "FileOptions":
        # camelCase accepted for payloads built against the JS SDK
        return cls(
            file=options.get("file"),
            file_category=options.get("file_category"),
            filename=options.get("filename"),
            content_type=options.get("content_type") or options.get("contentType"),
        )


@dataclass(frozen=True)
class NormalizedFile:
    """Canonical byte buffer plus whatever metadata could be inferred."""

    content: bytes
    content_type: Optional[str] = None
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class PresignedTarget:
    """Single-use object-store destination issued by the API."""

    url: str
    file_id: str


@dataclass(frozen=True)
class UploadResult:
    """Terminal artifact of a successful upload invocation."""

    association: Mapping[str, Any]
    file_id: str
    presigned_url: str
    file_category: Optional[FileCategory] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.association,
            "file_id": self.file_id,
            "presigned_url": self.presigned_url,
        }
