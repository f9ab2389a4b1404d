"""
Local filesystem storage backend.
"""
import contextlib
import logging
import os
import tempfile

from ..exceptions import BlobNotFoundError, DuplicateBlobError, StorageError
from ..models.blob import Blob
from .base import BackendType, StorageBackend

logger = logging.getLogger(__name__)

# '~' is not allowed in blob ids, so staging files never shadow a blob
STAGING_PREFIX = '~incoming-'


class LocalFileStorageBackend(StorageBackend):
    """
    Stores each blob as a file named after its id under base_path.

    Bytes are written to a staging file first and hard-linked into place
    once complete, so a failed write never leaves a readable blob.
    """

    backend_type = BackendType.LOCAL

    def __init__(self, base_path: str, metadata_store=None):
        """
        Initialize the backend and create the storage directory if needed.

        Args:
            base_path: Directory that holds blob files
            metadata_store: Optional BlobStoreDB for size/creation metadata
        """
        super().__init__(metadata_store)
        self.base_path = os.path.abspath(base_path)
        if not os.path.isdir(self.base_path):
            logger.info("Creating storage directory", extra={'path': self.base_path})
            os.makedirs(self.base_path, exist_ok=True)

    def _path_for(self, blob_id: str) -> str:
        return os.path.join(self.base_path, blob_id)

    def _write_file(self, f, raw: bytes) -> None:
        f.write(raw)
        f.flush()
        os.fsync(f.fileno())

    def save_blob(self, blob: Blob) -> None:
        file_path = self._path_for(blob.blob_id)
        if os.path.exists(file_path):
            raise DuplicateBlobError(blob.blob_id)

        try:
            fd, staging_path = tempfile.mkstemp(prefix=STAGING_PREFIX, dir=self.base_path)
        except OSError as e:
            raise StorageError(f"Failed to write blob {blob.blob_id}: {e}") from e

        try:
            with os.fdopen(fd, 'wb') as f:
                self._write_file(f, blob.raw_data)
            # link refuses an existing target: the id is taken
            os.link(staging_path, file_path)
        except FileExistsError:
            raise DuplicateBlobError(blob.blob_id) from None
        except OSError as e:
            raise StorageError(f"Failed to write blob {blob.blob_id}: {e}") from e
        finally:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(staging_path)

        try:
            self._record_metadata(blob)
        except Exception:
            logger.error("Failed to record blob metadata, removing file", extra={
                'blob_id': blob.blob_id,
                'backend': self.backend_type.value
            }, exc_info=True)
            os.unlink(file_path)
            raise

        logger.info("Blob saved", extra={
            'blob_id': blob.blob_id,
            'size': blob.size,
            'backend': self.backend_type.value
        })

    def get_blob(self, blob_id: str) -> Blob:
        file_path = self._path_for(blob_id)
        try:
            with open(file_path, 'rb') as f:
                raw = f.read()
        except FileNotFoundError:
            raise BlobNotFoundError(blob_id) from None
        except OSError as e:
            raise StorageError(f"Failed to read blob {blob_id}: {e}") from e

        return self._blob_from_bytes(blob_id, raw)
