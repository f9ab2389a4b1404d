"""
Utility functions for the blob gateway.
"""

from .db_connection import get_db_connection, database_configured

__all__ = ['get_db_connection', 'database_configured']
