"""
Bearer token extraction and the JWT guard for blob endpoints.
"""
from functools import wraps
from typing import Callable, Optional

from flask import current_app, g, make_response, request


class BearerTokenExtractor:
    """
    Extracts Bearer tokens from request headers.

    Header name and the "Bearer" prefix are matched case-insensitively.
    """

    def __init__(self, header_name: str = "Authorization"):
        """
        Initialize the extractor.

        Args:
            header_name: Name of the header to check (default: "Authorization")
        """
        self.header_name = header_name

    def extract(self, headers: dict) -> Optional[str]:
        """
        Extract the token from a "Bearer <token>" header.

        Args:
            headers: Dictionary of HTTP headers

        Returns:
            Token if present, None otherwise
        """
        auth_header = None
        for key, value in headers.items():
            if key.lower() == self.header_name.lower():
                auth_header = value
                break

        if not auth_header:
            return None

        auth_header = auth_header.strip()
        if not auth_header.lower().startswith('bearer '):
            return None

        token = auth_header[7:].strip()
        return token or None


def require_jwt(func: Callable) -> Callable:
    """
    Reject requests without a valid Bearer JWT.

    Uses the JwtKeyManager stored in app config under 'JWT_MANAGER'.
    The decoded claims are available as flask.g.jwt_claims.

    Returns:
        401 "Missing Authorization header" or 401 "Invalid JWT token" on failure
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        token = BearerTokenExtractor().extract(dict(request.headers))
        if token is None:
            return make_response('Missing Authorization header', 401)

        claims = current_app.config['JWT_MANAGER'].validate_token(token)
        if claims is None:
            return make_response('Invalid JWT token', 401)

        g.jwt_claims = claims
        return func(*args, **kwargs)

    return wrapper
