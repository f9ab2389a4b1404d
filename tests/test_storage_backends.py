"""
Unit tests for storage backends and backend selection.

FTP, PostgreSQL and S3 are replaced with mocks.
"""
import ftplib
import os
from unittest.mock import MagicMock, Mock

import pytest

from blob_gateway.exceptions import BlobNotFoundError, DuplicateBlobError, StorageError
from blob_gateway.models import Blob
from blob_gateway.storage import (
    BackendType,
    DatabaseStorageBackend,
    FtpStorageBackend,
    LocalFileStorageBackend,
    S3Client,
    S3Response,
    S3StorageBackend,
    create_storage_backend,
)


def _blob(blob_id='blob-1', data='aGVsbG8='):
    return Blob.create_new(blob_id, data)


class TestBackendType:
    """Test backend name parsing."""

    def test_parse(self):
        assert BackendType.parse('local') == BackendType.LOCAL
        assert BackendType.parse(' S3 ') == BackendType.S3

    def test_invalid(self):
        with pytest.raises(ValueError, match='Invalid storage backend'):
            BackendType.parse('tape')


class TestLocalFileStorageBackend:
    """Test filesystem storage."""

    def test_creates_directory(self, tmp_path):
        path = tmp_path / 'nested' / 'blobs'

        LocalFileStorageBackend(str(path))

        assert path.is_dir()

    def test_save_and_get(self, local_backend):
        local_backend.save_blob(_blob())

        blob = local_backend.get_blob('blob-1')

        assert blob.data == 'aGVsbG8='
        assert blob.raw_data == b'hello'
        assert blob.size == 5

    def test_file_holds_decoded_bytes(self, local_backend):
        local_backend.save_blob(_blob())

        with open(local_backend._path_for('blob-1'), 'rb') as f:
            assert f.read() == b'hello'

    def test_duplicate(self, local_backend):
        local_backend.save_blob(_blob())

        with pytest.raises(DuplicateBlobError):
            local_backend.save_blob(_blob(data='d29ybGQ='))

        assert local_backend.get_blob('blob-1').raw_data == b'hello'

    def test_not_found(self, local_backend):
        with pytest.raises(BlobNotFoundError):
            local_backend.get_blob('missing')

    def test_records_and_applies_metadata(self, tmp_path, metadata_store):
        backend = LocalFileStorageBackend(str(tmp_path), metadata_store=metadata_store)
        blob = _blob()

        backend.save_blob(blob)
        metadata_store.save_metadata.assert_called_once_with(blob)

        metadata_store.load_metadata.return_value = {'blob_id': 'blob-1', 'size': 5, 'created_at': 1700000000}
        stored = backend.get_blob('blob-1')

        assert stored.created_at == 1700000000

    def test_partial_write_leaves_no_blob(self, local_backend, monkeypatch):
        """Test a write that fails midway leaves nothing readable and allows a retry."""
        def write_then_fail(f, raw):
            f.write(raw[:2])
            raise OSError(28, 'No space left on device')

        monkeypatch.setattr(local_backend, '_write_file', write_then_fail)

        with pytest.raises(StorageError):
            local_backend.save_blob(_blob())

        with pytest.raises(BlobNotFoundError):
            local_backend.get_blob('blob-1')
        assert os.listdir(local_backend.base_path) == []

        monkeypatch.undo()
        local_backend.save_blob(_blob())
        assert local_backend.get_blob('blob-1').raw_data == b'hello'

    def test_metadata_failure_removes_file(self, tmp_path, metadata_store):
        """Test a failed metadata insert removes the blob file so a retry succeeds."""
        backend = LocalFileStorageBackend(str(tmp_path), metadata_store=metadata_store)
        metadata_store.save_metadata.side_effect = RuntimeError('database unavailable')

        with pytest.raises(RuntimeError):
            backend.save_blob(_blob())

        assert os.listdir(backend.base_path) == []

        metadata_store.save_metadata.side_effect = None
        backend.save_blob(_blob())
        assert backend.get_blob('blob-1').raw_data == b'hello'

    def test_no_staging_files_after_save(self, local_backend):
        local_backend.save_blob(_blob())

        assert os.listdir(local_backend.base_path) == ['blob-1']


class TestDatabaseStorageBackend:
    """Test PostgreSQL storage through a mocked driver."""

    def test_save(self):
        db = Mock()
        backend = DatabaseStorageBackend(db)
        blob = _blob()

        backend.save_blob(blob)

        db.save_blob.assert_called_once_with(blob)
        db.save_metadata.assert_not_called()

    def test_duplicate_propagates(self):
        db = Mock()
        db.save_blob.side_effect = DuplicateBlobError('blob-1')
        backend = DatabaseStorageBackend(db)

        with pytest.raises(DuplicateBlobError):
            backend.save_blob(_blob())

        db.save_metadata.assert_not_called()

    def test_get_applies_metadata(self):
        db = Mock()
        db.load_blob.return_value = Blob.from_bytes('blob-1', b'hello')
        db.load_metadata.return_value = {'blob_id': 'blob-1', 'size': 5, 'created_at': 1700000000}
        backend = DatabaseStorageBackend(db)

        blob = backend.get_blob('blob-1')

        assert blob.data == 'aGVsbG8='
        assert blob.created_at == 1700000000

    def test_get_missing(self):
        db = Mock()
        db.load_blob.return_value = None

        with pytest.raises(BlobNotFoundError):
            DatabaseStorageBackend(db).get_blob('missing')


class TestFtpStorageBackend:
    """Test FTP storage with a mocked ftplib.FTP."""

    @pytest.fixture
    def ftp(self):
        ftp = MagicMock()
        ftp.size.side_effect = ftplib.error_perm('550 No such file')
        return ftp

    @pytest.fixture
    def backend(self, ftp):
        return FtpStorageBackend('ftp.example.com', 'user', 'pw', ftp_factory=lambda: ftp)

    def test_connects_and_logs_in(self, backend, ftp):
        ftp.connect.assert_called_once_with('ftp.example.com', 21, timeout=30)
        ftp.login.assert_called_once_with('user', 'pw')
        ftp.voidcmd.assert_called_once_with('TYPE I')

    def test_connection_failure(self):
        ftp = MagicMock()
        ftp.connect.side_effect = OSError('connection refused')

        with pytest.raises(StorageError):
            FtpStorageBackend('ftp.example.com', 'user', 'pw', ftp_factory=lambda: ftp)

    def test_save_uploads_decoded_bytes(self, backend, ftp):
        backend.save_blob(_blob())

        command, stream = ftp.storbinary.call_args[0]
        assert command == 'STOR blob-1'
        assert stream.read() == b'hello'

    def test_save_duplicate(self, backend, ftp):
        ftp.size.side_effect = None
        ftp.size.return_value = 5

        with pytest.raises(DuplicateBlobError):
            backend.save_blob(_blob())

        ftp.storbinary.assert_not_called()

    def test_save_transfer_error(self, backend, ftp):
        ftp.storbinary.side_effect = ftplib.error_temp('425 Can not open data connection')

        with pytest.raises(StorageError):
            backend.save_blob(_blob())

        ftp.delete.assert_called_once_with('blob-1')

    def test_metadata_failure_removes_file(self, ftp, metadata_store):
        """Test a failed metadata insert deletes the uploaded file."""
        metadata_store.save_metadata.side_effect = RuntimeError('database unavailable')
        backend = FtpStorageBackend(
            'ftp.example.com', 'user', 'pw', metadata_store=metadata_store, ftp_factory=lambda: ftp
        )

        with pytest.raises(RuntimeError):
            backend.save_blob(_blob())

        ftp.storbinary.assert_called_once()
        ftp.delete.assert_called_once_with('blob-1')

    def test_get(self, backend, ftp):
        def retrbinary(command, callback):
            assert command == 'RETR blob-1'
            callback(b'hel')
            callback(b'lo')

        ftp.retrbinary.side_effect = retrbinary

        blob = backend.get_blob('blob-1')

        assert blob.raw_data == b'hello'
        assert blob.size == 5

    def test_get_missing(self, backend, ftp):
        ftp.retrbinary.side_effect = ftplib.error_perm('550 No such file')

        with pytest.raises(BlobNotFoundError):
            backend.get_blob('missing')

    def test_close(self, backend, ftp):
        backend.close()

        ftp.quit.assert_called_once()


class TestS3StorageBackend:
    """Test S3 storage with a mocked client."""

    def test_save(self, metadata_store):
        s3 = Mock(spec=S3Client)
        s3.bucket = 'examplebucket'
        backend = S3StorageBackend(s3, metadata_store=metadata_store)
        blob = _blob()

        backend.save_blob(blob)

        s3.put_object.assert_called_once_with('blob-1', b'hello')
        metadata_store.save_metadata.assert_called_once_with(blob)

    def test_duplicate_from_metadata(self, metadata_store):
        s3 = Mock(spec=S3Client)
        metadata_store.load_metadata.return_value = {'blob_id': 'blob-1', 'size': 5, 'created_at': 1}
        backend = S3StorageBackend(s3, metadata_store=metadata_store)

        with pytest.raises(DuplicateBlobError):
            backend.save_blob(_blob())

        s3.put_object.assert_not_called()

    def test_get(self):
        s3 = Mock(spec=S3Client)
        s3.get_object.return_value = S3Response(status_code=200, body=b'hello')

        blob = S3StorageBackend(s3).get_blob('blob-1')

        assert blob.data == 'aGVsbG8='
        s3.get_object.assert_called_once_with('blob-1')


class TestCreateStorageBackend:
    """Test backend selection."""

    def test_local(self, tmp_path):
        backend = create_storage_backend(BackendType.LOCAL, local_path=str(tmp_path))

        assert isinstance(backend, LocalFileStorageBackend)

    def test_database(self):
        assert isinstance(create_storage_backend(BackendType.DATABASE, db=Mock()), DatabaseStorageBackend)

    def test_database_requires_db(self):
        with pytest.raises(ValueError):
            create_storage_backend(BackendType.DATABASE)

    def test_ftp_requires_host(self):
        with pytest.raises(ValueError):
            create_storage_backend(BackendType.FTP, ftp_config={'host': ''})

    def test_s3(self):
        backend = create_storage_backend(BackendType.S3, s3_client=Mock(spec=S3Client))

        assert isinstance(backend, S3StorageBackend)

    def test_s3_requires_client(self):
        with pytest.raises(ValueError):
            create_storage_backend(BackendType.S3)
