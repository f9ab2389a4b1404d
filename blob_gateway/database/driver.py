"""
Database driver for the blob gateway.
Provides connection pooling and database operations for blob payloads and metadata.
"""
from typing import Optional
from contextlib import contextmanager
import psycopg2
from psycopg2 import errors
from psycopg2.pool import ThreadedConnectionPool
from psycopg2.extras import RealDictCursor

from ..exceptions import DuplicateBlobError
from ..models.blob import Blob
from ..monitoring import DB_CONNECTION_POOL


class BlobStoreDB:
    """Database driver for blob payloads and blob metadata with connection pooling."""

    def __init__(
        self,
        db_host: str,
        db_name: str,
        db_user: str,
        db_password: str,
        db_port: int = 5432,
        min_conn: int = 2,
        max_conn: int = 10,
        pool=None
    ):
        """
        Initialize database connection pool.

        Args:
            db_host: PostgreSQL host
            db_name: Database name
            db_user: Database user
            db_password: Database password
            db_port: PostgreSQL port (default: 5432)
            min_conn: Minimum number of connections in pool
            max_conn: Maximum number of connections in pool
            pool: Optional pre-built pool (for testing)
        """
        if pool is None:
            pool = ThreadedConnectionPool(
                min_conn,
                max_conn,
                host=db_host,
                port=db_port,
                database=db_name,
                user=db_user,
                password=db_password
            )
        self.pool = pool
        self._active_connections = 0
        self._max_conn = max_conn

        DB_CONNECTION_POOL.labels(state='active').set(0)
        DB_CONNECTION_POOL.labels(state='idle').set(min_conn)
        DB_CONNECTION_POOL.labels(state='max').set(max_conn)

    @contextmanager
    def _get_connection(self):
        """Context manager for getting a connection from the pool."""
        conn = self.pool.getconn()
        self._active_connections += 1
        DB_CONNECTION_POOL.labels(state='active').set(self._active_connections)
        DB_CONNECTION_POOL.labels(state='idle').set(self._max_conn - self._active_connections)
        try:
            yield conn
        finally:
            self.pool.putconn(conn)
            self._active_connections -= 1
            DB_CONNECTION_POOL.labels(state='active').set(self._active_connections)
            DB_CONNECTION_POOL.labels(state='idle').set(self._max_conn - self._active_connections)

    @contextmanager
    def get_cursor(self, commit: bool = True, cursor_factory=None):
        """
        Context manager for database cursors with automatic commit/rollback.

        Args:
            commit: Whether to commit on success
            cursor_factory: Optional cursor factory (e.g., RealDictCursor)

        Yields:
            Database cursor
        """
        with self._get_connection() as conn:
            cursor = conn.cursor(cursor_factory=cursor_factory)
            try:
                yield cursor
                if commit:
                    conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()

    def save_blob(self, blob: Blob) -> None:
        """
        Insert blob bytes and blob metadata in one transaction.

        Both rows are committed together or not at all.

        Args:
            blob: Blob to store

        Raises:
            DuplicateBlobError: If a blob with the same id exists
        """
        try:
            with self.get_cursor() as cursor:
                cursor.execute(
                    """
                    INSERT INTO blobs (blob_id, data, created_at)
                    VALUES (%s, %s, %s)
                    """,
                    (blob.blob_id, psycopg2.Binary(blob.raw_data), blob.created_at)
                )
                cursor.execute(
                    """
                    INSERT INTO blob_metadata (blob_id, size, created_at)
                    VALUES (%s, %s, %s)
                    """,
                    (blob.blob_id, blob.size, blob.created_at)
                )
        except errors.UniqueViolation:
            raise DuplicateBlobError(blob.blob_id) from None

    def load_blob(self, blob_id: str) -> Optional[Blob]:
        """
        Load a blob stored in the blobs table.

        Args:
            blob_id: Blob identifier

        Returns:
            Blob if found, None otherwise
        """
        with self.get_cursor(commit=False, cursor_factory=RealDictCursor) as cursor:
            cursor.execute(
                "SELECT blob_id, data, created_at FROM blobs WHERE blob_id = %s",
                (blob_id,)
            )
            result = cursor.fetchone()
            if not result:
                return None
            return Blob.from_bytes(
                blob_id=result['blob_id'],
                raw=bytes(result['data']),
                created_at=result['created_at']
            )

    def save_metadata(self, blob: Blob) -> None:
        """
        Record size and creation time of a stored blob.

        Args:
            blob: Blob that was written to a backend

        Raises:
            DuplicateBlobError: If metadata for the id exists
        """
        try:
            with self.get_cursor() as cursor:
                cursor.execute(
                    """
                    INSERT INTO blob_metadata (blob_id, size, created_at)
                    VALUES (%s, %s, %s)
                    """,
                    (blob.blob_id, blob.size, blob.created_at)
                )
        except errors.UniqueViolation:
            raise DuplicateBlobError(blob.blob_id) from None

    def load_metadata(self, blob_id: str) -> Optional[dict]:
        """
        Load metadata for a blob.

        Args:
            blob_id: Blob identifier

        Returns:
            Dictionary with blob_id, size and created_at, or None
        """
        with self.get_cursor(commit=False, cursor_factory=RealDictCursor) as cursor:
            cursor.execute(
                "SELECT blob_id, size, created_at FROM blob_metadata WHERE blob_id = %s",
                (blob_id,)
            )
            result = cursor.fetchone()
            return dict(result) if result else None

    def count_blobs(self) -> int:
        """
        Count blobs with recorded metadata.

        Returns:
            Number of rows in blob_metadata
        """
        with self.get_cursor(commit=False) as cursor:
            cursor.execute("SELECT COUNT(*) FROM blob_metadata")
            return cursor.fetchone()[0]

    def close(self) -> None:
        """Close all connections in the pool."""
        if self.pool and not self.pool.closed:
            self.pool.closeall()

    def __del__(self):
        """Cleanup connection pool on deletion."""
        if hasattr(self, 'pool'):
            self.close()
