"""
String-to-sign construction.
"""
from datetime import datetime

from . import hasher
from .constants import ALGORITHM_ID
from .models import Scope, format_amz_date, format_scope_date


def build_string_to_sign(canonical_request: str, timestamp: datetime, scope: Scope) -> str:
    """
    Build the string-to-sign:

        AWS4-HMAC-SHA256
        <timestamp as YYYYMMDD'T'HHMMSS'Z'>
        <date>/<region>/<service>/aws4_request
        <hex SHA-256 of the canonical request>

    Args:
        canonical_request: Output of build_canonical_request()
        timestamp: The signing timestamp
        scope: Scope derived from the same timestamp

    Returns:
        String-to-sign

    Raises:
        ValueError: If the scope date was not derived from timestamp
    """
    if scope.date != format_scope_date(timestamp):
        raise ValueError(
            f"Scope date {scope.date} does not match signing timestamp {format_amz_date(timestamp)}"
        )

    return '\n'.join([
        ALGORITHM_ID,
        format_amz_date(timestamp),
        scope.value,
        hasher.digest(canonical_request),
    ])
