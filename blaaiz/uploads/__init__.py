from blaaiz.uploads.associator import AssociationCommitter
from blaaiz.uploads.exceptions import (
    AssociationError,
    DownloadError,
    FileUploadError,
    NegotiationError,
    PayloadTooLargeError,
    TooManyRedirectsError,
    UploadError,
    UploadPipelineError,
)
from blaaiz.uploads.fetcher import RemoteFetcher
from blaaiz.uploads.negotiator import UploadNegotiator, parse_presigned_target
from blaaiz.uploads.normalizer import InputNormalizer
from blaaiz.uploads.orchestrator import FileUploadPipeline, build_upload_pipeline, validate_upload_request
from blaaiz.uploads.uploader import ObjectStoreUploader

__all__ = [
    "AssociationCommitter",
    "AssociationError",
    "DownloadError",
    "FileUploadError",
    "FileUploadPipeline",
    "InputNormalizer",
    "NegotiationError",
    "ObjectStoreUploader",
    "PayloadTooLargeError",
    "RemoteFetcher",
    "TooManyRedirectsError",
    "UploadError",
    "UploadNegotiator",
    "UploadPipelineError",
    "build_upload_pipeline",
    "parse_presigned_target",
    "validate_upload_request",
]
