"""
AWS Signature Version 4 request signing for object-storage calls.
"""
from .constants import ALGORITHM_ID, EMPTY_PAYLOAD_HASH, S3_SERVICE, SCOPE_TERMINATOR
from .exceptions import SigningError, HashingUnavailable, InvalidKey
from .models import (
    Credentials,
    Scope,
    RequestDescriptor,
    SignedRequestHeaders,
    format_amz_date,
    format_scope_date,
)
from .canonical_request import (
    assemble_canonical_request,
    build_canonical_request,
    render_canonical_headers,
    render_signed_headers,
)
from .string_to_sign import build_string_to_sign
from .signing_key import derive_signing_key
from .signer import RequestSigner, sign, build_authorization_header

__all__ = [
    'ALGORITHM_ID',
    'EMPTY_PAYLOAD_HASH',
    'S3_SERVICE',
    'SCOPE_TERMINATOR',
    'SigningError',
    'HashingUnavailable',
    'InvalidKey',
    'Credentials',
    'Scope',
    'RequestDescriptor',
    'SignedRequestHeaders',
    'format_amz_date',
    'format_scope_date',
    'assemble_canonical_request',
    'build_canonical_request',
    'render_canonical_headers',
    'render_signed_headers',
    'build_string_to_sign',
    'derive_signing_key',
    'RequestSigner',
    'sign',
    'build_authorization_header',
]
