"""
Prometheus metrics endpoint blueprint.

Exposes metrics for monitoring and alerting.
"""
from flask import Blueprint, Response
from ..monitoring import get_metrics

metrics_bp = Blueprint('metrics', __name__)


@metrics_bp.route('/metrics', methods=['GET'])
def prometheus_metrics():
    """
    Prometheus metrics endpoint.

    Returns Prometheus-formatted metrics:
    - blob_requests_total: Blob API requests by operation/result/backend
    - blob_operation_duration_seconds: Blob API latency histogram
    - blob_errors_total: Errors by type
    - s3_requests_total: Signed object-storage requests by method/status
    - signing_errors_total: Request-signing failures by type
    - db_connection_pool_connections: Database connection pool status

    Returns:
        200 OK: Metrics in Prometheus exposition format
    """
    metrics_data, content_type = get_metrics()
    return Response(metrics_data, mimetype=content_type)
