"""
Health check endpoint blueprint.

Provides service health status and diagnostics.
"""
import logging
from flask import Blueprint, jsonify, current_app

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Health check endpoint.

    Verifies:
    - Application is running
    - Database connection is healthy (if configured)

    Returns:
        200 OK: Service is healthy
            JSON: {
                "status": "healthy",
                "storage_backend": "local" | "database" | "ftp" | "s3",
                "database": "connected" | "not_configured",
                "blobs_stored": N (when the database is connected)
            }
        503 Service Unavailable: Service is unhealthy
            JSON: {"status": "unhealthy", "database": "error", "message": "..."}
    """
    storage = current_app.config['STORAGE_BACKEND']
    response_data = {
        'status': 'healthy',
        'storage_backend': storage.backend_type.value,
        'database': 'unknown'
    }

    db = current_app.config.get('DB')
    if db is None:
        response_data['database'] = 'not_configured'
        return jsonify(response_data), 200

    try:
        response_data['blobs_stored'] = db.count_blobs()
        response_data['database'] = 'connected'
    except Exception as e:
        logger.error("Health check failed - database error", extra={
            'error_type': type(e).__name__,
            'error_message': str(e)
        }, exc_info=True)

        response_data['status'] = 'unhealthy'
        response_data['database'] = 'error'
        response_data['message'] = 'Database connection failed'
        return jsonify(response_data), 503

    return jsonify(response_data), 200
