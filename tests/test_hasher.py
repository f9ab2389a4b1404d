"""
Unit tests for SHA-256 and HMAC-SHA256 primitives.
"""
from unittest.mock import patch

import pytest

from blob_gateway.signing import hasher
from blob_gateway.signing.exceptions import HashingUnavailable, InvalidKey, SigningError


class TestDigest:
    """Test hex SHA-256 digests."""

    def test_empty_payload_hash(self):
        """Test the digest of an empty body is the well-known constant."""
        assert hasher.digest(b'') == 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
        assert hasher.digest(b'') == hasher.EMPTY_PAYLOAD_HASH

    def test_text_is_utf8_encoded(self):
        """Test str input hashes like its UTF-8 bytes."""
        assert hasher.digest('héllo') == hasher.digest('héllo'.encode('utf-8'))

    def test_digest_is_lowercase_hex(self):
        result = hasher.digest(b'some payload')

        assert len(result) == 64
        assert result == result.lower()
        int(result, 16)


class TestHmacSha256:
    """Test keyed hashing."""

    def test_returns_32_bytes(self):
        assert len(hasher.hmac_sha256(b'key', 'message')) == 32

    def test_known_value(self):
        """Test against RFC 4231 test case 2."""
        mac = hasher.hmac_sha256(b'Jefe', 'what do ya want for nothing?')

        assert mac.hex() == '5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843'

    def test_empty_key_rejected(self):
        with pytest.raises(InvalidKey):
            hasher.hmac_sha256(b'', 'message')

    def test_non_bytes_key_rejected(self):
        with pytest.raises(InvalidKey):
            hasher.hmac_sha256('text-key', 'message')

    def test_invalid_key_is_signing_error(self):
        """Test InvalidKey can be handled as a generic signing failure."""
        with pytest.raises(SigningError):
            hasher.hmac_sha256(b'', 'message')


class TestEnsureAvailable:
    """Test the startup availability check."""

    def test_available(self):
        hasher.ensure_available()

    def test_unavailable_raises(self):
        """Test a runtime without SHA-256 fails fast."""
        with patch('blob_gateway.signing.hasher.hashlib.new', side_effect=ValueError('unsupported hash type')):
            with pytest.raises(HashingUnavailable):
                hasher.ensure_available()
