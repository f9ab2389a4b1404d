"""
PostgreSQL persistence for blob payloads and metadata.
"""
from .driver import BlobStoreDB

__all__ = ['BlobStoreDB']
