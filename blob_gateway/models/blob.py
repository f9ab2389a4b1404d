"""
Blob model for stored payloads.
"""
import base64
import binascii
import re
import time
from typing import Optional
from dataclasses import dataclass

from ..exceptions import InvalidBlobError

# Identifiers double as file names and object keys
BLOB_ID_PATTERN = re.compile(r'^[A-Za-z0-9._-]{1,255}$')


def decode_data(data: str) -> bytes:
    """
    Decode strict base64 blob data.

    Raises:
        InvalidBlobError: If data is not valid base64
    """
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidBlobError("Invalid Base64 data") from e


def encode_data(raw: bytes) -> str:
    """Encode raw bytes as base64 text."""
    return base64.b64encode(raw).decode('ascii')


def is_valid_blob_id(blob_id: str) -> bool:
    """Check that an id is usable as a file name and object key."""
    return bool(BLOB_ID_PATTERN.match(blob_id)) and blob_id not in ('.', '..')


@dataclass
class Blob:
    """
    A stored blob.

    Attributes:
        blob_id: Unique identifier supplied by the client
        data: Base64-encoded payload
        size: Number of decoded bytes
        created_at: Unix timestamp of when the blob was stored (None if unknown)
    """
    blob_id: str
    data: str
    size: int = 0
    created_at: Optional[int] = None

    def __post_init__(self) -> None:
        self._validate_blob_id()
        if self.data is None:
            raise InvalidBlobError("Invalid JSON: id and data are required")

    def _validate_blob_id(self) -> None:
        """Validate that the identifier is usable as a file name and object key."""
        if not self.blob_id:
            raise InvalidBlobError("Invalid JSON: id and data are required")
        if not is_valid_blob_id(self.blob_id):
            raise InvalidBlobError(
                "id must be 1-255 characters of letters, digits, '.', '_' or '-'"
            )

    @property
    def raw_data(self) -> bytes:
        """Decoded payload bytes."""
        return decode_data(self.data)

    @classmethod
    def create_new(cls, blob_id: str, data: str) -> 'Blob':
        """
        Create a new Blob with validated data and current timestamp.

        Args:
            blob_id: Unique identifier
            data: Base64-encoded payload

        Returns:
            New Blob instance

        Raises:
            InvalidBlobError: If the id or data is invalid
        """
        if data is None:
            raise InvalidBlobError("Invalid JSON: id and data are required")
        raw = decode_data(data)
        return cls(
            blob_id=blob_id,
            data=data,
            size=len(raw),
            created_at=int(time.time())
        )

    @classmethod
    def from_bytes(
        cls,
        blob_id: str,
        raw: bytes,
        size: Optional[int] = None,
        created_at: Optional[int] = None
    ) -> 'Blob':
        """
        Create a Blob from stored bytes.

        Args:
            blob_id: Unique identifier
            raw: Payload bytes as read from a backend
            size: Stored size (defaults to len(raw))
            created_at: Stored creation time

        Returns:
            Blob instance
        """
        return cls(
            blob_id=blob_id,
            data=encode_data(raw),
            size=len(raw) if size is None else size,
            created_at=created_at
        )

    @classmethod
    def from_dict(cls, data: dict) -> 'Blob':
        """
        Create a Blob from a request payload.

        Args:
            data: Dictionary with 'id' and 'data' keys

        Returns:
            Validated Blob instance

        Raises:
            InvalidBlobError: If fields are missing or invalid
        """
        if not isinstance(data, dict):
            raise InvalidBlobError("Invalid JSON: expected an object")
        blob_id = data.get('id')
        payload = data.get('data')
        if blob_id is None or payload is None:
            raise InvalidBlobError("Invalid JSON: id and data are required")
        if not isinstance(blob_id, str) or not isinstance(payload, str):
            raise InvalidBlobError("Invalid JSON: id and data must be strings")
        return cls.create_new(blob_id, payload)

    def to_dict(self) -> dict:
        """
        Convert Blob instance to a dictionary for JSON responses.

        Returns:
            Dictionary representation of the blob
        """
        return {
            'id': self.blob_id,
            'data': self.data,
            'size': self.size,
            'created_at': self.created_at
        }

    def __repr__(self) -> str:
        return f"Blob(blob_id={self.blob_id!r}, size={self.size}, created_at={self.created_at})"
