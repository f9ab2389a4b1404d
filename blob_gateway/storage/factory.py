"""
Storage backend selection.

The backend is chosen once at startup from a BackendType; there is no
runtime lookup by class name.
"""
import logging
from typing import Optional

from ..database.driver import BlobStoreDB
from .base import BackendType, StorageBackend
from .database import DatabaseStorageBackend
from .ftp import FtpStorageBackend, DEFAULT_FTP_PORT
from .local import LocalFileStorageBackend
from .s3 import S3StorageBackend
from .s3_client import S3Client

logger = logging.getLogger(__name__)


def create_storage_backend(
    backend_type: BackendType,
    db: Optional[BlobStoreDB] = None,
    local_path: Optional[str] = None,
    ftp_config: Optional[dict] = None,
    s3_client: Optional[S3Client] = None
) -> StorageBackend:
    """
    Create the storage backend for a backend type.

    Args:
        backend_type: Which backend to build
        db: BlobStoreDB; required for DATABASE, used as metadata store otherwise
        local_path: Storage directory for LOCAL
        ftp_config: Dict with host, port, user, password for FTP
        s3_client: Configured S3Client for S3

    Returns:
        StorageBackend instance

    Raises:
        ValueError: If a dependency required by the backend is missing
    """
    if backend_type == BackendType.LOCAL:
        if not local_path:
            raise ValueError("local_path is required for the local backend")
        backend = LocalFileStorageBackend(local_path, metadata_store=db)

    elif backend_type == BackendType.DATABASE:
        if db is None:
            raise ValueError("A database connection is required for the database backend")
        backend = DatabaseStorageBackend(db)

    elif backend_type == BackendType.FTP:
        if not ftp_config or not ftp_config.get('host'):
            raise ValueError("FTP host is required for the ftp backend")
        backend = FtpStorageBackend(
            host=ftp_config['host'],
            port=int(ftp_config.get('port') or DEFAULT_FTP_PORT),
            user=ftp_config.get('user', ''),
            password=ftp_config.get('password', ''),
            metadata_store=db
        )

    elif backend_type == BackendType.S3:
        if s3_client is None:
            raise ValueError("An S3 client is required for the s3 backend")
        backend = S3StorageBackend(s3_client, metadata_store=db)

    else:
        raise ValueError(f"Invalid storage backend: {backend_type}")

    logger.info("Storage backend initialized", extra={
        'backend': backend_type.value,
        'metadata_store': db is not None
    })
    return backend
