"""
Errors raised by the request-signing pipeline.

None of these are transient: the same inputs always fail the same way, so
callers must abort the outbound request instead of retrying it.
"""


class SigningError(Exception):
    """Base class for request-signing failures."""


class HashingUnavailable(SigningError):
    """SHA-256 / HMAC-SHA256 cannot be obtained from the runtime."""


class InvalidKey(SigningError, ValueError):
    """A key or credentials value was rejected before signing."""
