"""
JWT issuance and validation with RSA key pairs (RS256).
"""
import uuid
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "RS256"
DEFAULT_EXPIRATION_SECONDS = 3600
DEFAULT_ISSUER = "blob-gateway"


class JwtKeyManager:
    """
    Generates and validates JWTs signed with an RSA private key.

    Tokens carry sub, iat, exp, jti and iss claims.
    """

    def __init__(
        self,
        private_key_pem: bytes,
        public_key_pem: bytes,
        expiration_seconds: int = DEFAULT_EXPIRATION_SECONDS,
        issuer: str = DEFAULT_ISSUER
    ):
        """
        Initialize the key manager.

        Args:
            private_key_pem: PEM-encoded RSA private key (PKCS#8 or PKCS#1)
            public_key_pem: PEM-encoded RSA public key
            expiration_seconds: Token lifetime in seconds (default: 1 hour)
            issuer: Value of the iss claim
        """
        if not private_key_pem or not public_key_pem:
            raise ValueError("Both RSA private and public keys are required")
        self._private_key = private_key_pem
        self._public_key = public_key_pem
        self.expiration_seconds = expiration_seconds
        self.issuer = issuer

    @classmethod
    def from_files(
        cls,
        private_key_path: str,
        public_key_path: str,
        expiration_seconds: int = DEFAULT_EXPIRATION_SECONDS
    ) -> 'JwtKeyManager':
        """
        Load the RSA key pair from PEM files.

        Args:
            private_key_path: Path to the private key
            public_key_path: Path to the public key
            expiration_seconds: Token lifetime in seconds

        Returns:
            JwtKeyManager instance

        Raises:
            OSError: If a key file cannot be read
        """
        with open(private_key_path, 'rb') as f:
            private_key = f.read()
        with open(public_key_path, 'rb') as f:
            public_key = f.read()
        return cls(private_key, public_key, expiration_seconds=expiration_seconds)

    def generate_token(self, subject: str) -> str:
        """
        Generate a signed JWT for a subject.

        Args:
            subject: Value of the sub claim

        Returns:
            Encoded JWT
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "iat": now,
            "exp": now + timedelta(seconds=self.expiration_seconds),
            "jti": str(uuid.uuid4()),
            "iss": self.issuer,
        }
        token = jwt.encode(payload, self._private_key, algorithm=JWT_ALGORITHM)
        logger.info("Generated JWT", extra={'subject': subject, 'jti': payload['jti']})
        return token

    def validate_token(self, token: str) -> Optional[dict]:
        """
        Validate a JWT signature, expiration and issuer.

        Args:
            token: Encoded JWT

        Returns:
            Decoded claims if valid, None otherwise
        """
        try:
            return jwt.decode(
                token,
                self._public_key,
                algorithms=[JWT_ALGORITHM],
                issuer=self.issuer,
                options={"require": ["exp", "iat", "sub"]}
            )
        except jwt.ExpiredSignatureError:
            logger.warning("JWT validation failed: expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning("JWT validation failed: invalid token", extra={'error_message': str(e)})
            return None
