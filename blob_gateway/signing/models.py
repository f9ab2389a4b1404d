"""
Value types consumed and produced by the request-signing pipeline.
"""
from typing import Dict, Mapping, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..models.http_method import HttpMethod
from .constants import (
    ALGORITHM_ID,
    AMZ_DATE_FORMAT,
    AMZ_DATE_HEADER,
    AUTHORIZATION_HEADER,
    CONTENT_SHA256_HEADER,
    EMPTY_PAYLOAD_HASH,
    S3_SERVICE,
    SCOPE_DATE_FORMAT,
    SCOPE_TERMINATOR,
)
from .exceptions import InvalidKey


def normalize_timestamp(timestamp: datetime) -> datetime:
    """Return the timestamp in UTC; naive datetimes are taken as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def format_amz_date(timestamp: datetime) -> str:
    """Format a signing timestamp as YYYYMMDD'T'HHMMSS'Z'."""
    return normalize_timestamp(timestamp).strftime(AMZ_DATE_FORMAT)


def format_scope_date(timestamp: datetime) -> str:
    """Format the date part of a signing timestamp as YYYYMMDD."""
    return normalize_timestamp(timestamp).strftime(SCOPE_DATE_FORMAT)


def trim_header_value(value: str) -> str:
    """Strip surrounding whitespace and collapse inner runs to one space."""
    return ' '.join(str(value).split())


class Credentials:
    """
    Access key pair used to sign outbound requests.

    Immutable. The secret key is excluded from repr() and is not a
    dataclass field, so dataclasses.asdict() and vars() cannot serialize
    it; to_dict() is the only serialization and carries the access key only.

    Attributes:
        access_key: Access key identifier, sent in the Authorization header
        secret_key: Secret access key, only used to derive signing keys
    """

    __slots__ = ('_access_key', '_secret_key')

    def __init__(self, access_key: str, secret_key: str):
        if not access_key:
            raise InvalidKey("access_key is required")
        if not secret_key:
            raise InvalidKey("secret_key is required")
        object.__setattr__(self, '_access_key', access_key)
        object.__setattr__(self, '_secret_key', secret_key)

    @property
    def access_key(self) -> str:
        return self._access_key

    @property
    def secret_key(self) -> str:
        return self._secret_key

    def __setattr__(self, name, value):
        raise AttributeError("Credentials are immutable")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Credentials):
            return NotImplemented
        return (self._access_key, self._secret_key) == (other._access_key, other._secret_key)

    def __hash__(self) -> int:
        return hash((self._access_key, self._secret_key))

    def __repr__(self) -> str:
        return f"Credentials(access_key={self._access_key!r})"

    def to_dict(self) -> dict:
        """
        Convert to a dictionary for logging.

        Returns:
            Dictionary containing only the access key identifier
        """
        return {'access_key': self._access_key}


@dataclass(frozen=True)
class Scope:
    """
    Credential scope: date/region/service/terminator.

    Always build it with from_timestamp() so the date matches the
    timestamp used in the string-to-sign.
    """
    date: str
    region: str
    service: str = S3_SERVICE
    terminator: str = SCOPE_TERMINATOR

    def __post_init__(self) -> None:
        if len(self.date) != 8 or not self.date.isdigit():
            raise ValueError(f"scope date must be YYYYMMDD, got {self.date!r}")
        if not self.region:
            raise ValueError("region is required")
        if not self.service:
            raise ValueError("service is required")

    @classmethod
    def from_timestamp(
        cls,
        timestamp: datetime,
        region: str,
        service: str = S3_SERVICE
    ) -> 'Scope':
        """
        Create the scope for a signing timestamp.

        Args:
            timestamp: The signing timestamp
            region: Region name (e.g., "us-west-2")
            service: Service identifier (default: "s3")

        Returns:
            Scope instance
        """
        return cls(date=format_scope_date(timestamp), region=region, service=service)

    @property
    def value(self) -> str:
        """Scope string as it appears in the string-to-sign and credential."""
        return f"{self.date}/{self.region}/{self.service}/{self.terminator}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RequestDescriptor:
    """
    An unsigned request in canonical form.

    Attributes:
        method: HTTP method
        canonical_uri: Percent-encoded URI path
        canonical_query_string: Sorted, percent-encoded query string ('' if none)
        headers: Lower-cased header name -> value
        payload_hash: Hex SHA-256 of the body
    """
    method: HttpMethod
    canonical_uri: str
    canonical_query_string: str = ''
    headers: Mapping[str, str] = field(default_factory=dict)
    payload_hash: str = EMPTY_PAYLOAD_HASH

    def __post_init__(self) -> None:
        if not self.canonical_uri.startswith('/'):
            raise ValueError("canonical_uri must start with /")
        for name in self.headers:
            if name != name.lower() or name != name.strip() or not name:
                raise ValueError(f"header names must be lower-cased and trimmed: {name!r}")

    @classmethod
    def create(
        cls,
        method,
        canonical_uri: str,
        headers: Optional[Mapping[str, str]] = None,
        canonical_query_string: str = '',
        payload_hash: Optional[str] = None,
        trim_values: bool = True
    ) -> 'RequestDescriptor':
        """
        Create a descriptor from raw request parts.

        Header names are lower-cased and trimmed. Values are trimmed and
        inner whitespace collapsed unless trim_values is False.

        Args:
            method: HttpMethod or method name
            canonical_uri: Percent-encoded URI path
            headers: Headers to sign (any name case)
            canonical_query_string: Sorted, percent-encoded query string
            payload_hash: Hex SHA-256 of the body (default: empty-body hash)
            trim_values: Apply SigV4 whitespace normalization to values

        Returns:
            RequestDescriptor instance

        Raises:
            ValueError: If two header names collide after lower-casing
        """
        normalized: Dict[str, str] = {}
        for name, value in (headers or {}).items():
            key = name.strip().lower()
            if key in normalized:
                raise ValueError(f"Duplicate header after normalization: {key}")
            normalized[key] = trim_header_value(value) if trim_values else str(value)

        return cls(
            method=HttpMethod.parse(method),
            canonical_uri=canonical_uri,
            canonical_query_string=canonical_query_string,
            headers=normalized,
            payload_hash=payload_hash or EMPTY_PAYLOAD_HASH
        )

    @property
    def sorted_header_names(self) -> list:
        """Header names in canonical (ascending) order."""
        return sorted(self.headers)

    @property
    def signed_headers(self) -> str:
        """Semicolon-joined list of the signed header names."""
        return ';'.join(self.sorted_header_names)


@dataclass(frozen=True)
class SignedRequestHeaders:
    """
    Output of a signing operation: the values the transport must attach.
    """
    authorization: str
    amz_date: str
    content_sha256: str
    signature: str
    scope: Scope

    @property
    def algorithm(self) -> str:
        return ALGORITHM_ID

    def to_headers(self) -> Dict[str, str]:
        """
        Headers to attach to the outbound request.

        Returns:
            Dictionary with date, content-hash and Authorization headers
        """
        return {
            AMZ_DATE_HEADER: self.amz_date,
            CONTENT_SHA256_HEADER: self.content_sha256,
            AUTHORIZATION_HEADER: self.authorization,
        }
