"""
Canonical request construction for AWS Signature Version 4.

Layout:
    METHOD
    CANONICAL_URI
    CANONICAL_QUERY_STRING
    CANONICAL_HEADERS      (one "name:value" per line, sorted by name)
    <blank line>
    SIGNED_HEADERS         (semicolon-joined names, same order)
    HASHED_PAYLOAD

This module only assembles strings. URI and query encoding, header-name
lower-casing and value trimming happen before a RequestDescriptor is built.
"""
from typing import Mapping

from .models import RequestDescriptor


def assemble_canonical_request(
    method: str,
    canonical_uri: str,
    canonical_query_string: str,
    canonical_headers: str,
    signed_headers: str,
    hashed_payload: str
) -> str:
    """
    Join six already-canonical components with newlines.

    canonical_headers is used as given: a block rendered by
    render_canonical_headers() ends with a newline, which produces the
    blank line of the canonical layout.

    Args:
        method: HTTP method name
        canonical_uri: Percent-encoded URI path
        canonical_query_string: Sorted, percent-encoded query string
        canonical_headers: Rendered canonical header block
        signed_headers: Semicolon-joined signed header names
        hashed_payload: Hex SHA-256 of the body

    Returns:
        Canonical request string
    """
    return '\n'.join([
        method,
        canonical_uri,
        canonical_query_string,
        canonical_headers,
        signed_headers,
        hashed_payload,
    ])


def render_canonical_headers(headers: Mapping[str, str]) -> str:
    """
    Render headers as sorted "name:value" lines, each ending with a newline.

    Names are lower-cased; values are used verbatim.
    """
    lowered = {name.lower(): value for name, value in headers.items()}
    return ''.join(f"{name}:{lowered[name]}\n" for name in sorted(lowered))


def render_signed_headers(headers: Mapping[str, str]) -> str:
    """Render the semicolon-joined, sorted, lower-cased header names."""
    return ';'.join(sorted(name.lower() for name in headers))


def build_canonical_request(descriptor: RequestDescriptor) -> str:
    """
    Build the canonical request for a descriptor.

    Args:
        descriptor: The unsigned request

    Returns:
        Canonical request string (same descriptor -> byte-identical output)
    """
    return assemble_canonical_request(
        method=descriptor.method.value,
        canonical_uri=descriptor.canonical_uri,
        canonical_query_string=descriptor.canonical_query_string,
        canonical_headers=render_canonical_headers(descriptor.headers),
        signed_headers=descriptor.signed_headers,
        hashed_payload=descriptor.payload_hash,
    )
