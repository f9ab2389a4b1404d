"""
Authentication components.
"""
from .jwt_manager import JwtKeyManager
from .bearer import BearerTokenExtractor, require_jwt

__all__ = [
    'JwtKeyManager',
    'BearerTokenExtractor',
    'require_jwt',
]
