"""
Scoped signing-key derivation.

    kSecret  = "AWS4" + secret key
    kDate    = HMAC(kSecret, date)
    kRegion  = HMAC(kDate, region)
    kService = HMAC(kRegion, service)
    kSigning = HMAC(kService, "aws4_request")

Each step keys the next one, so the order is fixed.
"""
from .constants import SECRET_KEY_PREFIX
from .hasher import hmac_sha256
from .models import Credentials, Scope


def derive_signing_key(credentials: Credentials, scope: Scope) -> bytes:
    """
    Derive the signing key for a credential scope.

    Args:
        credentials: Access key pair
        scope: Date/region/service scope of the request

    Returns:
        32-byte signing key
    """
    k_secret = (SECRET_KEY_PREFIX + credentials.secret_key).encode('utf-8')
    k_date = hmac_sha256(k_secret, scope.date)
    k_region = hmac_sha256(k_date, scope.region)
    k_service = hmac_sha256(k_region, scope.service)
    return hmac_sha256(k_service, scope.terminator)
