"""
HTTP method enumeration shared by the signer and the storage transport.
"""
from enum import Enum


class HttpMethod(Enum):
    """HTTP methods that can be signed."""
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    HEAD = "HEAD"

    @classmethod
    def parse(cls, value) -> 'HttpMethod':
        """
        Convert a method name (any case) or HttpMethod to HttpMethod.

        Raises:
            ValueError: If the method is not supported
        """
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValueError(f"Unsupported HTTP method: {value}") from None
