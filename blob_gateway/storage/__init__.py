"""
Interchangeable blob storage backends.
"""
from .base import BackendType, StorageBackend
from .local import LocalFileStorageBackend
from .database import DatabaseStorageBackend
from .ftp import FtpStorageBackend
from .s3_client import S3Client, S3Response
from .s3 import S3StorageBackend
from .factory import create_storage_backend

__all__ = [
    'BackendType',
    'StorageBackend',
    'LocalFileStorageBackend',
    'DatabaseStorageBackend',
    'FtpStorageBackend',
    'S3Client',
    'S3Response',
    'S3StorageBackend',
    'create_storage_backend',
]
