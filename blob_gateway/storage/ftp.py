"""
FTP storage backend.
"""
import io
import ftplib
import logging
import threading
from typing import Callable

from ..exceptions import BlobNotFoundError, DuplicateBlobError, StorageError
from ..models.blob import Blob
from .base import BackendType, StorageBackend

logger = logging.getLogger(__name__)

DEFAULT_FTP_PORT = 21
DEFAULT_FTP_TIMEOUT = 30


def _is_missing_file(error: ftplib.error_perm) -> bool:
    return str(error).startswith('550')


class FtpStorageBackend(StorageBackend):
    """
    Stores each blob as a file on an FTP server.

    Holds a single control connection; transfers are serialized with a lock.
    """

    backend_type = BackendType.FTP

    def __init__(
        self,
        host: str,
        user: str,
        password: str,
        port: int = DEFAULT_FTP_PORT,
        metadata_store=None,
        timeout: int = DEFAULT_FTP_TIMEOUT,
        ftp_factory: Callable[[], ftplib.FTP] = ftplib.FTP
    ):
        """
        Connect and log in to the FTP server.

        Args:
            host: FTP server host
            user: FTP user
            password: FTP password
            port: FTP port (default: 21)
            metadata_store: Optional BlobStoreDB for size/creation metadata
            timeout: Socket timeout in seconds
            ftp_factory: Callable returning an unconnected ftplib.FTP (for testing)

        Raises:
            StorageError: If the server refuses the connection or login
        """
        super().__init__(metadata_store)
        self.host = host
        self.port = port
        self._lock = threading.Lock()
        self._ftp = ftp_factory()

        try:
            self._ftp.connect(host, port, timeout=timeout)
            self._ftp.login(user, password)
            self._ftp.set_pasv(True)
            self._ftp.voidcmd('TYPE I')
        except (ftplib.Error, OSError) as e:
            raise StorageError(f"Error connecting to the FTP server {host}:{port}: {e}") from e

        logger.info("Connected to the FTP server", extra={'ftp_host': host, 'ftp_port': port})

    def _exists(self, name: str) -> bool:
        try:
            self._ftp.size(name)
            return True
        except ftplib.error_perm as e:
            if _is_missing_file(e):
                return False
            raise

    def _discard(self, name: str) -> None:
        """Delete a partially stored file; failures are logged."""
        try:
            self._ftp.delete(name)
        except (ftplib.Error, OSError) as e:
            logger.warning("Failed to remove file from the FTP server", extra={
                'blob_id': name,
                'error_message': str(e)
            })

    def save_blob(self, blob: Blob) -> None:
        with self._lock:
            try:
                if self._exists(blob.blob_id):
                    raise DuplicateBlobError(blob.blob_id)
            except (ftplib.Error, OSError) as e:
                raise StorageError(f"Error uploading blob {blob.blob_id} to the FTP server: {e}") from e

            try:
                self._ftp.storbinary(f"STOR {blob.blob_id}", io.BytesIO(blob.raw_data))
            except (ftplib.Error, OSError) as e:
                self._discard(blob.blob_id)
                raise StorageError(f"Error uploading blob {blob.blob_id} to the FTP server: {e}") from e

            try:
                self._record_metadata(blob)
            except Exception:
                self._discard(blob.blob_id)
                raise

        logger.info("Blob uploaded", extra={
            'blob_id': blob.blob_id,
            'size': blob.size,
            'backend': self.backend_type.value
        })

    def get_blob(self, blob_id: str) -> Blob:
        buffer = io.BytesIO()
        with self._lock:
            try:
                self._ftp.retrbinary(f"RETR {blob_id}", buffer.write)
            except ftplib.error_perm as e:
                if _is_missing_file(e):
                    raise BlobNotFoundError(blob_id) from None
                raise StorageError(f"Error retrieving blob {blob_id} from the FTP server: {e}") from e
            except (ftplib.Error, OSError) as e:
                raise StorageError(f"Error retrieving blob {blob_id} from the FTP server: {e}") from e

        return self._blob_from_bytes(blob_id, buffer.getvalue())

    def close(self) -> None:
        with self._lock:
            try:
                self._ftp.quit()
            except (ftplib.Error, OSError):
                self._ftp.close()
