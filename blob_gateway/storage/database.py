"""
PostgreSQL storage backend.
"""
import logging

from ..database.driver import BlobStoreDB
from ..exceptions import BlobNotFoundError
from ..models.blob import Blob
from .base import BackendType, StorageBackend

logger = logging.getLogger(__name__)


class DatabaseStorageBackend(StorageBackend):
    """Stores blob bytes in the blobs table and metadata in blob_metadata, in one transaction."""

    backend_type = BackendType.DATABASE

    def __init__(self, db: BlobStoreDB):
        super().__init__(metadata_store=db)
        self.db = db

    def save_blob(self, blob: Blob) -> None:
        logger.info("Saving blob", extra={'blob_id': blob.blob_id, 'backend': self.backend_type.value})
        self.db.save_blob(blob)

    def get_blob(self, blob_id: str) -> Blob:
        stored = self.db.load_blob(blob_id)
        if stored is None:
            logger.warning("Blob not found", extra={'blob_id': blob_id, 'backend': self.backend_type.value})
            raise BlobNotFoundError(blob_id)

        metadata = self._load_metadata(blob_id)
        if metadata:
            stored.size = metadata['size']
            stored.created_at = metadata['created_at']
        return stored

    def close(self) -> None:
        self.db.close()
