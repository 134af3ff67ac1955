"""Enumerations for the Blaaiz client domain model."""

from enum import Enum


class FileCategory(str, Enum):
    """Document slots a customer file can be linked to."""

    IDENTITY = "identity"
    PROOF_OF_ADDRESS = "proof_of_address"
    LIVENESS_CHECK = "liveness_check"

    @property
    def association_field(self) -> str:
        """Field name the customer files endpoint expects for this category."""
        return ASSOCIATION_FIELDS[self]


ASSOCIATION_FIELDS = {
    FileCategory.IDENTITY: "id_file",
    FileCategory.PROOF_OF_ADDRESS: "proof_of_address_file",
    FileCategory.LIVENESS_CHECK: "liveness_check_file",
}


class FileInputKind(str, Enum):
    """Shapes a caller-supplied file can arrive in."""

    RAW_BYTES = "raw_bytes"
    DATA_URL = "data_url"
    REMOTE_URL = "remote_url"
    BASE64 = "base64"
    BYTE_SEQUENCE = "byte_sequence"


class UploadStage(str, Enum):
    """Steps of a single file upload invocation."""

    VALIDATE = "validate"
    NEGOTIATE = "negotiate"
    NORMALIZE = "normalize"
    UPLOAD = "upload"
    ASSOCIATE = "associate"
    DONE = "done"
    FAILED = "failed"


class CustomerType(str, Enum):
    INDIVIDUAL = "individual"
    BUSINESS = "business"


class PayoutMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    INTERAC = "interac"


class CollectionMethod(str, Enum):
    OPEN_BANKING = "open_banking"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    CRYPTO = "crypto"
