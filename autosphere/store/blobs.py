"""Blob store for listing images and KYC artifacts.

Uploads go to Firebase Cloud Storage through the Admin SDK. Files are
validated before transmission: only JPEG, PNG, WEBP and HEIC images under
the configured size limit are accepted, and the leading bytes must match a
known image signature. Stored names are random so a client-supplied
filename never reaches the bucket.
"""

import logging
import uuid
from dataclasses import dataclass
from functools import lru_cache
from typing import Protocol

from firebase_admin import storage
from firebase_admin.exceptions import FirebaseError
from google.api_core.exceptions import GoogleAPIError

from autosphere.core.exceptions import StoreUnavailableError, ValidationFailed
from autosphere.core.settings import get_settings

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/heic": "heic",
}

# content type -> (offset, magic bytes); every pair must match
_SIGNATURES: dict[str, tuple[tuple[int, bytes], ...]] = {
    "image/jpeg": ((0, b"\xff\xd8\xff"),),
    "image/png": ((0, b"\x89PNG\r\n\x1a\n"),),
    "image/webp": ((0, b"RIFF"), (8, b"WEBP")),
    # ISO-BMFF: 4-byte box size then "ftyp"
    "image/heic": ((4, b"ftyp"),),
}


class InvalidUploadError(ValidationFailed):
    """Raised when an uploaded file fails type, size or signature checks."""

    error_type = "invalid_upload"

    def __init__(self, message: str = "Invalid file"):
        super().__init__(message)


@dataclass(frozen=True)
class StoredBlob:
    url: str
    path: str
    content_type: str
    size: int


def _has_image_signature(data: bytes, content_type: str) -> bool:
    return all(
        data[offset : offset + len(magic)] == magic
        for offset, magic in _SIGNATURES[content_type]
    )


def validate_image(data: bytes, content_type: str | None, max_bytes: int) -> str:
    """Check an upload and return the file extension to store it under."""
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidUploadError(
            "Unsupported file format. Only JPEG, PNG, WEBP and HEIC are permitted."
        )
    if not data:
        raise InvalidUploadError("File is empty")
    if len(data) > max_bytes:
        raise InvalidUploadError(
            f"File exceeds the {max_bytes // (1024 * 1024)}MB size limit"
        )
    if not _has_image_signature(data, content_type):
        raise InvalidUploadError(
            "File integrity check failed: content does not match its declared type"
        )
    return ALLOWED_CONTENT_TYPES[content_type]


class BlobStore(Protocol):
    def upload(self, data: bytes, content_type: str | None) -> StoredBlob:
        """Validate and store a file, returning its public URL."""
        ...


class FirebaseBlobStore:
    """Blob store backed by a Firebase Cloud Storage bucket."""

    def __init__(
        self,
        bucket_name: str | None = None,
        max_bytes: int = 5 * 1024 * 1024,
        folder: str = "images",
    ):
        self._bucket_name = bucket_name
        self._max_bytes = max_bytes
        self._folder = folder

    def upload(self, data: bytes, content_type: str | None) -> StoredBlob:
        extension = validate_image(data, content_type, self._max_bytes)
        path = f"{self._folder}/{uuid.uuid4()}.{extension}"
        try:
            bucket = storage.bucket(self._bucket_name)
            blob = bucket.blob(path)
            blob.cache_control = "public, max-age=3600"
            blob.upload_from_string(data, content_type=content_type)
            blob.make_public()
        except (ValueError, FirebaseError, GoogleAPIError) as e:
            logger.error(
                "Blob upload failed: %s",
                type(e).__name__,
                extra={"event": "blob_upload_failed"},
            )
            raise StoreUnavailableError("File storage is unavailable") from e

        logger.info("Stored blob %s (%d bytes)", path, len(data))
        return StoredBlob(
            url=blob.public_url, path=path, content_type=content_type, size=len(data)
        )


@lru_cache
def get_blob_store() -> FirebaseBlobStore:
    """Get cached blob store configured from settings."""
    settings = get_settings()
    return FirebaseBlobStore(
        bucket_name=settings.storage_bucket, max_bytes=settings.upload_max_bytes
    )
