"""
Data models for the blob gateway.
"""
from .http_method import HttpMethod
from .blob import Blob

__all__ = [
    'HttpMethod',
    'Blob',
]
