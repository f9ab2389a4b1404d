"""
Monitoring and observability configuration.

Provides Prometheus metrics and structured logging for the blob gateway.
"""

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
import time
from functools import wraps
from typing import Callable
import logging
import os
from pythonjsonlogger import jsonlogger


# Prometheus Metrics
BLOB_REQUESTS_TOTAL = Counter(
    'blob_requests_total',
    'Total number of blob API requests',
    ['operation', 'result', 'backend']
)

BLOB_OPERATION_DURATION_SECONDS = Histogram(
    'blob_operation_duration_seconds',
    'Blob API request duration in seconds',
    ['operation', 'backend'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

BLOB_ERRORS_TOTAL = Counter(
    'blob_errors_total',
    'Total number of blob API errors',
    ['error_type']
)

S3_REQUESTS_TOTAL = Counter(
    's3_requests_total',
    'Total number of signed requests sent to object storage',
    ['method', 'status']
)

SIGNING_ERRORS_TOTAL = Counter(
    'signing_errors_total',
    'Total number of request-signing failures',
    ['error_type']
)

DB_CONNECTION_POOL = Gauge(
    'db_connection_pool_connections',
    'Database connection pool status',
    ['state']
)


def setup_json_logging(app):
    """
    Configure JSON structured logging for the application.

    Args:
        app: Flask application instance
    """
    log_handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        timestamp=True
    )
    log_handler.setFormatter(formatter)

    # Get log level from environment variable (default: INFO)
    log_level_name = os.environ.get('LOG_LEVEL', 'INFO').upper()
    log_level = getattr(logging, log_level_name, logging.INFO)

    app.logger.handlers = []
    app.logger.addHandler(log_handler)
    app.logger.setLevel(log_level)

    logging.root.handlers = []
    logging.root.addHandler(log_handler)
    logging.root.setLevel(log_level)

    return app.logger


def track_blob_operation(operation: str) -> Callable:
    """
    Decorator to track blob endpoint metrics and timing.

    Measures request duration and counts results by response status.
    The backend label is read from the Flask app config.

    Args:
        operation: Operation label (e.g., "save", "get")

    Returns:
        Decorator for a view function
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            from flask import current_app

            backend = current_app.config.get('STORAGE_BACKEND_NAME', 'unknown')
            start_time = time.time()

            try:
                response = func(*args, **kwargs)
            except Exception as e:
                BLOB_ERRORS_TOTAL.labels(error_type=type(e).__name__).inc()
                raise

            duration = time.time() - start_time
            status_code = response[1] if isinstance(response, tuple) else response.status_code
            result = 'success' if status_code < 400 else 'failure'

            BLOB_REQUESTS_TOTAL.labels(
                operation=operation,
                result=result,
                backend=backend
            ).inc()

            BLOB_OPERATION_DURATION_SECONDS.labels(
                operation=operation,
                backend=backend
            ).observe(duration)

            return response

        return wrapper
    return decorator


def get_metrics():
    """
    Generate Prometheus metrics in exposition format.

    Returns:
        Tuple of (metrics_data, content_type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
