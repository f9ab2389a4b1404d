"""
Errors raised by the blob storage layer.
"""
from typing import Optional


class StorageError(Exception):
    """Base class for storage backend failures."""


class BlobNotFoundError(StorageError):
    """No blob exists with the requested identifier."""

    def __init__(self, blob_id: str):
        super().__init__(f"Blob with id {blob_id} not found")
        self.blob_id = blob_id


class DuplicateBlobError(StorageError):
    """A blob with the same identifier is already stored."""

    def __init__(self, blob_id: str):
        super().__init__(f"A blob with id: {blob_id} already exists.")
        self.blob_id = blob_id


class InvalidBlobError(ValueError):
    """Blob identifier or payload failed validation."""


class S3RequestError(StorageError):
    """
    Object storage answered with a non-success status.

    Attributes:
        status_code: HTTP status returned by the service
        body: Response body, passed through unparsed
    """

    def __init__(self, status_code: int, body: Optional[str] = None, method: Optional[str] = None):
        message = f"S3 request failed with status {status_code}"
        if method:
            message = f"S3 {method} request failed with status {status_code}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.method = method
