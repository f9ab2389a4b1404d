"""
Storage backend interface and backend selection enum.
"""
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from ..models.blob import Blob

logger = logging.getLogger(__name__)


class BackendType(Enum):
    """Persistence strategies for blob bytes."""
    LOCAL = "local"
    DATABASE = "database"
    FTP = "ftp"
    S3 = "s3"

    @classmethod
    def parse(cls, value: str) -> 'BackendType':
        """
        Convert a configuration string to BackendType.

        Raises:
            ValueError: If the backend name is unknown
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Invalid storage backend: {value}") from None


class StorageBackend(ABC):
    """
    Base class for blob storage backends.

    Backends that keep bytes outside PostgreSQL may be given a metadata
    store (BlobStoreDB) which records size and creation time after a
    successful write.
    """

    backend_type: BackendType

    def __init__(self, metadata_store=None):
        self.metadata_store = metadata_store

    @abstractmethod
    def save_blob(self, blob: Blob) -> None:
        """
        Persist a blob.

        Raises:
            DuplicateBlobError: If the id is already stored
            StorageError: If the backend fails
        """

    @abstractmethod
    def get_blob(self, blob_id: str) -> Blob:
        """
        Retrieve a blob by id.

        Raises:
            BlobNotFoundError: If no blob has this id
            StorageError: If the backend fails
        """

    def close(self) -> None:
        """Release backend resources."""

    def _record_metadata(self, blob: Blob) -> None:
        if self.metadata_store is None:
            return
        self.metadata_store.save_metadata(blob)
        logger.debug("Recorded blob metadata", extra={
            'blob_id': blob.blob_id,
            'size': blob.size,
            'backend': self.backend_type.value
        })

    def _load_metadata(self, blob_id: str) -> Optional[dict]:
        if self.metadata_store is None:
            return None
        return self.metadata_store.load_metadata(blob_id)

    def _blob_from_bytes(self, blob_id: str, raw: bytes) -> Blob:
        """Build a Blob from stored bytes, applying recorded metadata if present."""
        metadata = self._load_metadata(blob_id)
        if metadata:
            return Blob.from_bytes(
                blob_id,
                raw,
                size=metadata.get('size'),
                created_at=metadata.get('created_at')
            )
        return Blob.from_bytes(blob_id, raw)
