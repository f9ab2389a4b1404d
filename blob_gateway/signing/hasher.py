"""
SHA-256 digests and HMAC-SHA256 keyed hashing for request signing.
"""
import hashlib
import hmac
from typing import Union

from .constants import EMPTY_PAYLOAD_HASH
from .exceptions import HashingUnavailable, InvalidKey

HASH_ALGORITHM = 'sha256'


def ensure_available() -> None:
    """
    Verify that the runtime provides SHA-256.

    Called once at application startup; a missing primitive is fatal.

    Raises:
        HashingUnavailable: If hashlib cannot construct SHA-256
    """
    try:
        hashlib.new(HASH_ALGORITHM)
    except ValueError as e:
        raise HashingUnavailable(f"{HASH_ALGORITHM} is not available: {e}") from e


def digest(data: Union[bytes, str]) -> str:
    """
    Compute the lowercase hex SHA-256 of the input.

    Args:
        data: Raw bytes, or text which is encoded as UTF-8

    Returns:
        64-character lowercase hex digest
    """
    if isinstance(data, str):
        data = data.encode('utf-8')
    return hashlib.sha256(data).hexdigest()


def hmac_sha256(key: bytes, message: str) -> bytes:
    """
    Compute HMAC-SHA256 of a UTF-8 message.

    Args:
        key: HMAC key, any non-zero length
        message: Text to authenticate

    Returns:
        32-byte MAC

    Raises:
        InvalidKey: If the key is not bytes or is empty
    """
    if not isinstance(key, (bytes, bytearray)):
        raise InvalidKey(f"HMAC key must be bytes, got {type(key).__name__}")
    if len(key) == 0:
        raise InvalidKey("HMAC key must not be empty")
    return hmac.new(bytes(key), message.encode('utf-8'), hashlib.sha256).digest()


__all__ = ['EMPTY_PAYLOAD_HASH', 'digest', 'ensure_available', 'hmac_sha256']
