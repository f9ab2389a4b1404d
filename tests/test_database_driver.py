"""
Unit tests for the PostgreSQL driver.

The connection pool is replaced with a mock; SQL is checked by shape.
"""
from unittest.mock import MagicMock

import pytest
from psycopg2 import errors

from blob_gateway.database import BlobStoreDB
from blob_gateway.exceptions import DuplicateBlobError
from blob_gateway.models import Blob


@pytest.fixture
def cursor():
    return MagicMock()


@pytest.fixture
def connection(cursor):
    conn = MagicMock()
    conn.cursor.return_value = cursor
    return conn


@pytest.fixture
def db(connection):
    pool = MagicMock()
    pool.getconn.return_value = connection
    return BlobStoreDB('localhost', 'blob_gateway_test', 'blob_gateway', 'pw', pool=pool)


class TestGetCursor:
    """Test transaction handling."""

    def test_commits_and_returns_connection(self, db, connection):
        with db.get_cursor() as cur:
            cur.execute("SELECT 1")

        connection.commit.assert_called_once()
        db.pool.putconn.assert_called_once_with(connection)

    def test_rolls_back_on_error(self, db, connection):
        with pytest.raises(RuntimeError):
            with db.get_cursor():
                raise RuntimeError("boom")

        connection.rollback.assert_called_once()
        connection.commit.assert_not_called()
        db.pool.putconn.assert_called_once_with(connection)


class TestBlobs:
    """Test blob payload storage."""

    def test_save_blob(self, db, cursor, connection):
        """Test blob bytes and metadata are inserted and committed once."""
        blob = Blob.create_new('b1', 'aGVsbG8=')

        db.save_blob(blob)

        (blob_sql, blob_params), (meta_sql, meta_params) = [c[0] for c in cursor.execute.call_args_list]
        assert 'INSERT INTO blobs' in blob_sql
        assert blob_params[0] == 'b1'
        assert bytes(blob_params[1].adapted) == b'hello'
        assert blob_params[2] == blob.created_at
        assert 'INSERT INTO blob_metadata' in meta_sql
        assert meta_params == ('b1', 5, blob.created_at)
        connection.commit.assert_called_once()

    def test_save_blob_metadata_failure_rolls_back_both(self, db, cursor, connection):
        """Test a failed metadata insert also discards the blob row."""
        cursor.execute.side_effect = [None, RuntimeError('insert failed')]

        with pytest.raises(RuntimeError):
            db.save_blob(Blob.create_new('b1', 'aGVsbG8='))

        assert cursor.execute.call_count == 2
        connection.rollback.assert_called_once()
        connection.commit.assert_not_called()

    def test_save_blob_duplicate(self, db, cursor, connection):
        cursor.execute.side_effect = errors.UniqueViolation()

        with pytest.raises(DuplicateBlobError):
            db.save_blob(Blob.create_new('b1', 'aGVsbG8='))

        connection.rollback.assert_called_once()

    def test_load_blob(self, db, cursor):
        cursor.fetchone.return_value = {'blob_id': 'b1', 'data': memoryview(b'hello'), 'created_at': 42}

        blob = db.load_blob('b1')

        assert blob.raw_data == b'hello'
        assert blob.size == 5
        assert blob.created_at == 42

    def test_load_blob_missing(self, db, cursor):
        cursor.fetchone.return_value = None

        assert db.load_blob('missing') is None


class TestMetadata:
    """Test blob metadata storage."""

    def test_save_metadata(self, db, cursor):
        blob = Blob.create_new('b1', 'aGVsbG8=')

        db.save_metadata(blob)

        sql, params = cursor.execute.call_args[0]
        assert 'INSERT INTO blob_metadata' in sql
        assert params == ('b1', 5, blob.created_at)

    def test_save_metadata_duplicate(self, db, cursor):
        cursor.execute.side_effect = errors.UniqueViolation()

        with pytest.raises(DuplicateBlobError):
            db.save_metadata(Blob.create_new('b1', 'aGVsbG8='))

    def test_load_metadata(self, db, cursor):
        cursor.fetchone.return_value = {'blob_id': 'b1', 'size': 5, 'created_at': 42}

        assert db.load_metadata('b1') == {'blob_id': 'b1', 'size': 5, 'created_at': 42}

    def test_count_blobs(self, db, cursor):
        cursor.fetchone.return_value = (3,)

        assert db.count_blobs() == 3
