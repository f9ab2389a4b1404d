"""
S3-compatible object storage backend.
"""
import logging

from ..exceptions import DuplicateBlobError
from ..models.blob import Blob
from .base import BackendType, StorageBackend
from .s3_client import S3Client

logger = logging.getLogger(__name__)


class S3StorageBackend(StorageBackend):
    """
    Stores each blob as an object keyed by its id.

    S3 overwrites existing keys, so duplicate detection relies on the
    metadata store when one is configured.
    """

    backend_type = BackendType.S3

    def __init__(self, s3_client: S3Client, metadata_store=None):
        super().__init__(metadata_store)
        self.s3_client = s3_client

    def save_blob(self, blob: Blob) -> None:
        if self._load_metadata(blob.blob_id) is not None:
            raise DuplicateBlobError(blob.blob_id)

        self.s3_client.put_object(blob.blob_id, blob.raw_data)
        logger.info("Blob uploaded", extra={
            'blob_id': blob.blob_id,
            'size': blob.size,
            'bucket': self.s3_client.bucket,
            'backend': self.backend_type.value
        })
        self._record_metadata(blob)

    def get_blob(self, blob_id: str) -> Blob:
        response = self.s3_client.get_object(blob_id)
        return self._blob_from_bytes(blob_id, response.body)

    def close(self) -> None:
        self.s3_client.close()
