"""
Request signing for S3-compatible object storage (AWS Signature Version 4).
"""
import logging
from datetime import datetime
from typing import Mapping, Optional, Union

from . import hasher
from .canonical_request import build_canonical_request
from .constants import ALGORITHM_ID, CONTENT_SHA256_HEADER, AMZ_DATE_HEADER, S3_SERVICE
from .models import (
    Credentials,
    RequestDescriptor,
    Scope,
    SignedRequestHeaders,
    format_amz_date,
)
from .signing_key import derive_signing_key
from .string_to_sign import build_string_to_sign

logger = logging.getLogger(__name__)


def sign(string_to_sign: str, signing_key: bytes) -> str:
    """
    HMAC-sign the string-to-sign with a derived key.

    Args:
        string_to_sign: Output of build_string_to_sign()
        signing_key: Output of derive_signing_key()

    Returns:
        64-character lowercase hex signature
    """
    return hasher.hmac_sha256(signing_key, string_to_sign).hex()


def build_authorization_header(
    descriptor: RequestDescriptor,
    credentials: Credentials,
    scope: Scope,
    signature: str
) -> str:
    """
    Assemble the Authorization header value.

    Format (spacing is significant):
        AWS4-HMAC-SHA256 Credential=<access key>/<scope>, SignedHeaders=<names>, Signature=<hex>

    Args:
        descriptor: The signed request (provides the signed header list)
        credentials: Access key pair
        scope: Scope used to derive the signing key
        signature: Output of sign()

    Returns:
        Authorization header value
    """
    return (
        f"{ALGORITHM_ID} "
        f"Credential={credentials.access_key}/{scope.value}, "
        f"SignedHeaders={descriptor.signed_headers}, "
        f"Signature={signature}"
    )


class RequestSigner:
    """
    Signs outbound object-storage requests.

    Holds only the immutable credentials, region and service, so one
    instance can be shared across threads. The signing timestamp is
    always supplied by the caller and used for both the x-amz-date value
    and the scope date.

    Usage:
        signer = RequestSigner(Credentials('AKID', 'secret'), region='us-west-2')
        descriptor = RequestDescriptor.create('GET', '/key', headers={...})
        signed = signer.sign_request(descriptor, datetime.now(timezone.utc))
        request_headers.update(signed.to_headers())
    """

    def __init__(self, credentials: Credentials, region: str, service: str = S3_SERVICE):
        """
        Initialize the request signer.

        Args:
            credentials: Access key pair
            region: Region name (e.g., "us-west-2")
            service: Service identifier (default: "s3")
        """
        if not region:
            raise ValueError("region is required")
        self.credentials = credentials
        self.region = region
        self.service = service

    def scope_for(self, timestamp: datetime) -> Scope:
        """Scope for a signing timestamp."""
        return Scope.from_timestamp(timestamp, self.region, self.service)

    def sign_request(self, descriptor: RequestDescriptor, timestamp: datetime) -> SignedRequestHeaders:
        """
        Run the full signing pipeline for one request.

        If the descriptor signs x-amz-date or x-amz-content-sha256, their
        values must match the timestamp and payload hash, otherwise the
        remote service would reject the request.

        Args:
            descriptor: The unsigned request
            timestamp: The signing timestamp, captured once by the caller

        Returns:
            SignedRequestHeaders with the values to attach

        Raises:
            ValueError: If signed date/content-hash headers disagree with the inputs
            SigningError: If hashing fails or the key is rejected
        """
        amz_date = format_amz_date(timestamp)
        self._check_signed_values(descriptor, amz_date)

        scope = self.scope_for(timestamp)
        canonical_request = build_canonical_request(descriptor)
        string_to_sign = build_string_to_sign(canonical_request, timestamp, scope)
        signing_key = derive_signing_key(self.credentials, scope)
        signature = sign(string_to_sign, signing_key)
        authorization = build_authorization_header(descriptor, self.credentials, scope, signature)

        logger.debug("Signed request", extra={
            'method': descriptor.method.value,
            'uri': descriptor.canonical_uri,
            'access_key': self.credentials.access_key,
            'scope': scope.value,
            'signed_headers': descriptor.signed_headers
        })

        return SignedRequestHeaders(
            authorization=authorization,
            amz_date=amz_date,
            content_sha256=descriptor.payload_hash,
            signature=signature,
            scope=scope
        )

    def sign_get(
        self,
        canonical_uri: str,
        headers: Mapping[str, str],
        timestamp: datetime,
        canonical_query_string: str = ''
    ) -> SignedRequestHeaders:
        """
        Sign a GET request with an empty body.

        Args:
            canonical_uri: Percent-encoded URI path
            headers: Headers to sign (host at least)
            timestamp: The signing timestamp
            canonical_query_string: Sorted, percent-encoded query string

        Returns:
            SignedRequestHeaders
        """
        return self._sign_with_body('GET', canonical_uri, headers, b'', timestamp, canonical_query_string)

    def sign_put(
        self,
        canonical_uri: str,
        headers: Mapping[str, str],
        body: Union[bytes, str],
        timestamp: datetime,
        canonical_query_string: str = ''
    ) -> SignedRequestHeaders:
        """
        Sign a PUT request; the payload hash is computed from body.

        Args:
            canonical_uri: Percent-encoded URI path
            headers: Headers to sign (host at least)
            body: Request body
            timestamp: The signing timestamp
            canonical_query_string: Sorted, percent-encoded query string

        Returns:
            SignedRequestHeaders
        """
        return self._sign_with_body('PUT', canonical_uri, headers, body, timestamp, canonical_query_string)

    def _sign_with_body(
        self,
        method: str,
        canonical_uri: str,
        headers: Mapping[str, str],
        body: Union[bytes, str],
        timestamp: datetime,
        canonical_query_string: str
    ) -> SignedRequestHeaders:
        payload_hash = hasher.digest(body)
        all_headers = dict(headers)
        all_headers[AMZ_DATE_HEADER] = format_amz_date(timestamp)
        all_headers[CONTENT_SHA256_HEADER] = payload_hash

        descriptor = RequestDescriptor.create(
            method,
            canonical_uri,
            headers=all_headers,
            canonical_query_string=canonical_query_string,
            payload_hash=payload_hash
        )
        return self.sign_request(descriptor, timestamp)

    @staticmethod
    def _check_signed_values(descriptor: RequestDescriptor, amz_date: str) -> None:
        signed_date: Optional[str] = descriptor.headers.get(AMZ_DATE_HEADER)
        if signed_date is not None and signed_date != amz_date:
            raise ValueError(
                f"Signed {AMZ_DATE_HEADER} {signed_date} does not match signing timestamp {amz_date}"
            )
        signed_hash: Optional[str] = descriptor.headers.get(CONTENT_SHA256_HEADER)
        if signed_hash is not None and signed_hash != descriptor.payload_hash:
            raise ValueError(f"Signed {CONTENT_SHA256_HEADER} does not match payload hash")
