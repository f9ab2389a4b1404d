"""
Flask application for the blob gateway.

Stores and retrieves base64 blobs through a configurable storage backend
(local files, PostgreSQL, FTP or S3-compatible object storage). Blob
endpoints require a Bearer JWT issued by /v1/auth/jwt.
"""
import os
import logging
from typing import Optional
from flask import Flask
from dotenv import load_dotenv

# Load environment variables from .env file FIRST
load_dotenv()

from .auth import JwtKeyManager
from .blueprints import auth_bp, blobs_bp, health_bp, metrics_bp
from .database import BlobStoreDB
from .monitoring import setup_json_logging
from .signing import Credentials, RequestSigner, hasher
from .storage import BackendType, S3Client, StorageBackend, create_storage_backend
from .utils import get_db_connection, database_configured

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080
DEFAULT_LOCAL_STORAGE_PATH = './blobs'


def _create_db(backend_type: BackendType) -> Optional[BlobStoreDB]:
    """
    Create the database connection if the backend needs one or it is configured.

    The database backend always needs PostgreSQL. Other backends use it
    as an optional metadata store when BLOB_GATEWAY_PG_PASSWORD is set.

    Returns:
        BlobStoreDB instance or None if not configured
    """
    if backend_type != BackendType.DATABASE and not database_configured():
        logger.info("Metadata store disabled (database not configured)")
        return None
    return get_db_connection(verbose=False)


def _create_s3_client() -> S3Client:
    """
    Create the signed S3 client from environment variables.

    Environment variables:
        S3_REGION, S3_ACCESS_KEY, S3_SECRET_KEY, S3_BUCKET (required)
        S3_ENDPOINT (optional, path-style addressing)

    Raises:
        ValueError: If a required variable is missing
    """
    missing = [
        name for name in ('S3_REGION', 'S3_ACCESS_KEY', 'S3_SECRET_KEY', 'S3_BUCKET')
        if not os.environ.get(name)
    ]
    if missing:
        raise ValueError(f"Missing S3 configuration: {', '.join(missing)}")

    credentials = Credentials(
        access_key=os.environ['S3_ACCESS_KEY'],
        secret_key=os.environ['S3_SECRET_KEY']
    )
    signer = RequestSigner(credentials, region=os.environ['S3_REGION'])
    return S3Client(
        signer,
        bucket=os.environ['S3_BUCKET'],
        endpoint=os.environ.get('S3_ENDPOINT') or None
    )


def _create_storage_backend(backend_type: BackendType, db: Optional[BlobStoreDB]) -> StorageBackend:
    """
    Create the storage backend selected by STORAGE_BACKEND.

    Args:
        backend_type: Parsed backend type
        db: Database driver instance or None

    Returns:
        StorageBackend instance
    """
    if backend_type == BackendType.FTP:
        ftp_config = {
            'host': os.environ.get('FTP_HOST'),
            'port': os.environ.get('FTP_PORT'),
            'user': os.environ.get('FTP_USER', ''),
            'password': os.environ.get('FTP_PASSWORD', '')
        }
        return create_storage_backend(backend_type, db=db, ftp_config=ftp_config)

    if backend_type == BackendType.S3:
        return create_storage_backend(backend_type, db=db, s3_client=_create_s3_client())

    return create_storage_backend(
        backend_type,
        db=db,
        local_path=os.environ.get('LOCAL_STORAGE_PATH', DEFAULT_LOCAL_STORAGE_PATH)
    )


def _create_jwt_manager() -> JwtKeyManager:
    """
    Load the RSA key pair used for JWTs.

    Environment variables:
        PRIVATE_KEY_PATH, PUBLIC_KEY_PATH: PEM files (required)
        JWT_EXPIRATION_SECONDS: Token lifetime (default: 3600)

    Raises:
        ValueError: If a key path is not configured
    """
    private_key_path = os.environ.get('PRIVATE_KEY_PATH')
    public_key_path = os.environ.get('PUBLIC_KEY_PATH')
    if not private_key_path or not public_key_path:
        raise ValueError("PRIVATE_KEY_PATH and PUBLIC_KEY_PATH are required")

    expiration = int(os.environ.get('JWT_EXPIRATION_SECONDS', '3600'))
    manager = JwtKeyManager.from_files(private_key_path, public_key_path, expiration_seconds=expiration)
    logger.info("JWT key manager initialized", extra={'expiration_seconds': expiration})
    return manager


def create_app(
    storage_backend: Optional[StorageBackend] = None,
    jwt_manager: Optional[JwtKeyManager] = None,
    db: Optional[BlobStoreDB] = None
) -> Flask:
    """
    Create and configure Flask application.

    Args:
        storage_backend: Optional storage backend (for testing). If None, creates based on env.
        jwt_manager: Optional JWT key manager (for testing). If None, loads keys from env.
        db: Optional database instance (for testing). If None and no backend is
            given, creates a connection when the environment configures one.

    Returns:
        Configured Flask application

    Raises:
        HashingUnavailable: If SHA-256 is not available
        ValueError: If the storage backend or keys are misconfigured
    """
    app = Flask(__name__)
    setup_json_logging(app)

    # Refuse to start without SHA-256
    hasher.ensure_available()

    if storage_backend is None:
        backend_type = BackendType.parse(os.environ.get('STORAGE_BACKEND', BackendType.LOCAL.value))
        if db is None:
            db = _create_db(backend_type)
        storage_backend = _create_storage_backend(backend_type, db)

    if jwt_manager is None:
        jwt_manager = _create_jwt_manager()

    # Store in app config for access in route handlers
    app.config['DB'] = db
    app.config['STORAGE_BACKEND'] = storage_backend
    app.config['STORAGE_BACKEND_NAME'] = storage_backend.backend_type.value
    app.config['JWT_MANAGER'] = jwt_manager

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(blobs_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(metrics_bp)

    logger.info("Blob gateway configured", extra={
        'storage_backend': storage_backend.backend_type.value,
        'database': db is not None
    })

    return app


def main():
    port = int(os.environ.get('PORT', DEFAULT_PORT))
    app = create_app()
    logger.info("Starting blob gateway", extra={
        'port': port,
        'endpoints': ['/v1/auth/jwt', '/v1/blobs', '/health', '/metrics']
    })
    app.run(host='0.0.0.0', port=port, debug=False)


if __name__ == '__main__':
    main()
