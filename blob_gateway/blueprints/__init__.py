"""
Flask blueprints for the blob gateway endpoints.
"""

from .auth import auth_bp
from .blobs import blobs_bp
from .health import health_bp
from .metrics import metrics_bp

__all__ = ['auth_bp', 'blobs_bp', 'health_bp', 'metrics_bp']
