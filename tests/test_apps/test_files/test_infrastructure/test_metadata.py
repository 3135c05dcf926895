"""Tests for upload metadata detection and validation."""

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from server.apps.files.exceptions import UploadRejectedError
from server.apps.files.infrastructure.metadata import (
    detect_mime_type,
    get_max_upload_files,
    get_max_upload_size,
    validate_batch,
    validate_upload,
)


class TestDetectMimeType:
    """Tests for detect_mime_type function."""

    def test_uses_declared_content_type(self, make_upload):
        """Test client-declared type wins over the extension."""
        upload = make_upload('data.bin', content_type='application/pdf')

        assert detect_mime_type(upload) == 'application/pdf'

    def test_guesses_from_extension(self):
        """Test fallback to the filename extension."""
        upload = SimpleUploadedFile('photo.png', b'x', content_type='')

        assert detect_mime_type(upload) == 'image/png'

    def test_unknown_type(self):
        """Test unknown files get application/octet-stream."""
        upload = SimpleUploadedFile('blob.zzz', b'x', content_type='')

        assert detect_mime_type(upload) == 'application/octet-stream'


class TestUploadLimits:
    """Tests for configurable upload limits."""

    def test_limits_from_settings(self, settings):
        """Test limits are read from settings."""
        settings.DOCUFLOW_MAX_UPLOAD_SIZE = 1024
        settings.DOCUFLOW_MAX_UPLOAD_FILES = 3

        assert get_max_upload_size() == 1024
        assert get_max_upload_files() == 3

    def test_default_limits(self, settings):
        """Test defaults when settings are absent."""
        del settings.DOCUFLOW_MAX_UPLOAD_SIZE
        del settings.DOCUFLOW_MAX_UPLOAD_FILES

        assert get_max_upload_size() == 10 * 1024 * 1024
        assert get_max_upload_files() == 10


class TestValidateUpload:
    """Tests for validate_upload function."""

    def test_allowed_file_passes(self, make_upload):
        """Test an allowed small file is accepted."""
        validate_upload(make_upload('notes.txt'))

    def test_oversized_file_rejected(self, settings, make_upload):
        """Test files above the size limit are rejected."""
        settings.DOCUFLOW_MAX_UPLOAD_SIZE = 4

        with pytest.raises(UploadRejectedError, match='File size exceeds'):
            validate_upload(make_upload(content=b'12345'))

    def test_disallowed_type_rejected(self, make_upload):
        """Test types outside the allow-list are rejected."""
        upload = make_upload('run.exe', content_type='application/x-msdownload')

        with pytest.raises(UploadRejectedError, match='Invalid file type'):
            validate_upload(upload)


class TestValidateBatch:
    """Tests for validate_batch function."""

    def test_empty_batch_rejected(self):
        """Test a request without files is rejected."""
        with pytest.raises(UploadRejectedError, match='No files uploaded'):
            validate_batch([])

    def test_too_many_files_rejected(self, settings, make_upload):
        """Test batches above the count limit are rejected."""
        settings.DOCUFLOW_MAX_UPLOAD_FILES = 2
        uploads = [make_upload(f'{index}.txt') for index in range(3)]

        with pytest.raises(UploadRejectedError, match='Too many files'):
            validate_batch(uploads)

    def test_one_invalid_file_rejects_batch(self, make_upload):
        """Test a single invalid file rejects the whole batch."""
        uploads = [
            make_upload('ok.txt'),
            make_upload('bad.exe', content_type='application/x-msdownload'),
        ]

        with pytest.raises(UploadRejectedError):
            validate_batch(uploads)
