"""
Signed HTTP client for S3-compatible object storage.

Every request is signed with AWS Signature Version 4 before it is sent;
if signing fails the request is never transmitted.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional
from urllib.parse import quote, urlsplit

import httpx

from ..exceptions import BlobNotFoundError, S3RequestError, StorageError
from ..models.http_method import HttpMethod
from ..monitoring import S3_REQUESTS_TOTAL, SIGNING_ERRORS_TOTAL
from ..signing import RequestSigner, SigningError
from ..signing.constants import HOST_HEADER

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30

# Characters SigV4 leaves unencoded in a URI path, besides A-Z a-z 0-9
URI_SAFE_CHARACTERS = '-._~/'


def encode_object_key(key: str) -> str:
    """
    Percent-encode an object key for use as a canonical URI path.

    Args:
        key: Object key (without leading slash)

    Returns:
        Encoded key
    """
    return quote(key, safe=URI_SAFE_CHARACTERS)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class S3Response:
    """Status and body of an object-storage response, passed through unparsed."""
    status_code: int
    body: bytes

    @property
    def text(self) -> str:
        return self.body.decode('utf-8', errors='replace')


class S3Client:
    """
    Minimal GET/PUT object client for one bucket.

    Uses virtual-hosted addressing (<bucket>.s3.<region>.amazonaws.com)
    unless an endpoint is given, in which case path-style addressing
    (<endpoint>/<bucket>/<key>) is used, as with MinIO or LocalStack.
    """

    def __init__(
        self,
        signer: RequestSigner,
        bucket: str,
        endpoint: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize the S3 client.

        Args:
            signer: RequestSigner holding credentials and region
            bucket: Bucket name
            endpoint: Optional custom endpoint URL (path-style addressing)
            http_client: Optional httpx.Client (for testing)
            timeout: HTTP timeout in seconds
            clock: Returns the signing timestamp (for testing)

        Raises:
            ValueError: If bucket is empty or endpoint is not an HTTP(S) URL
        """
        if not bucket:
            raise ValueError("bucket is required")

        self.signer = signer
        self.bucket = bucket
        self._clock = clock

        if endpoint:
            parts = urlsplit(endpoint)
            if parts.scheme not in ('http', 'https') or not parts.netloc:
                raise ValueError("endpoint must be a valid HTTP/HTTPS URL")
            self.host = parts.netloc
            self.base_url = f"{parts.scheme}://{parts.netloc}"
            self.path_prefix = f"/{encode_object_key(bucket)}"
        else:
            self.host = f"{bucket}.s3.{signer.region}.amazonaws.com"
            self.base_url = f"https://{self.host}"
            self.path_prefix = ''

        self._http = http_client or httpx.Client(timeout=httpx.Timeout(timeout, connect=timeout))

        logger.info("S3 client initialized", extra={
            'bucket': bucket,
            'region': signer.region,
            'host': self.host
        })

    def canonical_uri(self, key: str) -> str:
        """Percent-encoded request path for an object key."""
        return f"{self.path_prefix}/{encode_object_key(key)}"

    def put_object(self, key: str, data: bytes) -> S3Response:
        """
        Upload an object.

        Args:
            key: Object key
            data: Object bytes

        Returns:
            S3Response

        Raises:
            S3RequestError: If the service answers with a non-2xx status
            StorageError: If the request cannot be sent
            SigningError: If the request cannot be signed
        """
        return self._send(HttpMethod.PUT, key, data)

    def get_object(self, key: str) -> S3Response:
        """
        Download an object.

        Args:
            key: Object key

        Returns:
            S3Response with the object bytes as body

        Raises:
            BlobNotFoundError: If the object does not exist
            S3RequestError: If the service answers with another non-2xx status
            StorageError: If the request cannot be sent
            SigningError: If the request cannot be signed
        """
        return self._send(HttpMethod.GET, key, b'')

    def _send(self, method: HttpMethod, key: str, body: bytes) -> S3Response:
        canonical_uri = self.canonical_uri(key)
        timestamp = self._clock()

        try:
            if method == HttpMethod.PUT:
                signed = self.signer.sign_put(canonical_uri, {HOST_HEADER: self.host}, body, timestamp)
            else:
                signed = self.signer.sign_get(canonical_uri, {HOST_HEADER: self.host}, timestamp)
        except SigningError as e:
            SIGNING_ERRORS_TOTAL.labels(error_type=type(e).__name__).inc()
            logger.error("Request signing failed", extra={
                'method': method.value,
                'key': key,
                'error_type': type(e).__name__,
                'error_message': str(e)
            })
            raise

        headers = {'Host': self.host}
        headers.update(signed.to_headers())
        if method == HttpMethod.PUT:
            headers['Content-Type'] = 'application/octet-stream'

        try:
            response = self._http.request(
                method.value,
                self.base_url + canonical_uri,
                headers=headers,
                content=body if method == HttpMethod.PUT else None
            )
        except httpx.HTTPError as e:
            S3_REQUESTS_TOTAL.labels(method=method.value, status='error').inc()
            raise StorageError(f"Error sending {method.value} request to object storage: {e}") from e

        S3_REQUESTS_TOTAL.labels(method=method.value, status=str(response.status_code)).inc()
        logger.info("Executed S3 request", extra={
            'method': method.value,
            'key': key,
            'status_code': response.status_code
        })

        if method == HttpMethod.GET and response.status_code == 404:
            raise BlobNotFoundError(key)
        if not 200 <= response.status_code < 300:
            logger.warning("S3 request failed", extra={
                'method': method.value,
                'key': key,
                'status_code': response.status_code,
                'response_body': response.text[:1024]
            })
            raise S3RequestError(response.status_code, response.text, method=method.value)

        return S3Response(status_code=response.status_code, body=response.content)

    def close(self) -> None:
        self._http.close()
