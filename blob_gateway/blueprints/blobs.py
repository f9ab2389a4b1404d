"""
Blob storage endpoint blueprint.

Saves and retrieves blobs through the configured storage backend.
"""
import logging
from flask import Blueprint, request, make_response, jsonify, current_app

from ..auth import require_jwt
from ..exceptions import (
    BlobNotFoundError,
    DuplicateBlobError,
    InvalidBlobError,
    S3RequestError,
    StorageError,
)
from ..models.blob import Blob, is_valid_blob_id
from ..monitoring import track_blob_operation, BLOB_ERRORS_TOTAL
from ..signing import SigningError

logger = logging.getLogger(__name__)

blobs_bp = Blueprint('blobs', __name__, url_prefix='/v1/blobs')


def _error_response(message: str, status: int, error: Exception):
    BLOB_ERRORS_TOTAL.labels(error_type=type(error).__name__).inc()
    return make_response(message, status)


@blobs_bp.route('', methods=['POST'])
@require_jwt
@track_blob_operation('save')
def save_blob():
    """
    Save a blob.

    Request body (JSON):
        {"id": "<blob id>", "data": "<base64 payload>"}

    Returns:
        201 Created: Location header points to /v1/blobs/<id>
        400 Bad Request: Invalid JSON, missing fields or invalid base64
        409 Conflict: A blob with this id exists
        502 Bad Gateway: Object storage rejected the request
        500 Internal Server Error: Backend or signing failure
    """
    payload = request.get_json(silent=True)
    if payload is None:
        logger.warning("Invalid request: body is not JSON")
        return make_response('Invalid request: body must be JSON', 400)

    try:
        blob = Blob.from_dict(payload)
    except InvalidBlobError as e:
        logger.warning("Invalid request", extra={'reason': str(e)})
        return _error_response(f'Invalid request: {e}', 400, e)

    storage = current_app.config['STORAGE_BACKEND']
    try:
        storage.save_blob(blob)
    except DuplicateBlobError as e:
        logger.warning("Duplicate blob", extra={'blob_id': blob.blob_id})
        return _error_response(str(e), 409, e)
    except S3RequestError as e:
        logger.error("Object storage rejected blob", extra={
            'blob_id': blob.blob_id,
            'status_code': e.status_code
        })
        return _error_response('Object storage request failed', 502, e)
    except (StorageError, SigningError) as e:
        logger.error("Failed to save blob", extra={
            'blob_id': blob.blob_id,
            'error_type': type(e).__name__,
            'error_message': str(e)
        }, exc_info=True)
        return _error_response('An error occurred while saving the blob', 500, e)

    logger.info("Blob stored", extra={'blob_id': blob.blob_id, 'size': blob.size})

    response = make_response('', 201)
    response.headers['Location'] = f"/v1/blobs/{blob.blob_id}"
    return response


@blobs_bp.route('/<blob_id>', methods=['GET'])
@require_jwt
@track_blob_operation('get')
def get_blob(blob_id: str):
    """
    Retrieve a blob by id.

    Returns:
        200 OK: JSON {"id", "data", "size", "created_at"}
        404 Not Found: No blob with this id
        502 Bad Gateway: Object storage rejected the request
        500 Internal Server Error: Backend or signing failure
    """
    if not is_valid_blob_id(blob_id):
        return make_response('Blob not found', 404)

    storage = current_app.config['STORAGE_BACKEND']
    try:
        blob = storage.get_blob(blob_id)
    except BlobNotFoundError as e:
        return _error_response('Blob not found', 404, e)
    except S3RequestError as e:
        logger.error("Object storage rejected request", extra={
            'blob_id': blob_id,
            'status_code': e.status_code
        })
        return _error_response('Object storage request failed', 502, e)
    except (StorageError, SigningError) as e:
        logger.error("Failed to retrieve blob", extra={
            'blob_id': blob_id,
            'error_type': type(e).__name__,
            'error_message': str(e)
        }, exc_info=True)
        return _error_response('An error occurred while retrieving the blob', 500, e)

    return jsonify(blob.to_dict()), 200
