"""Upload metadata detection and validation."""

import mimetypes
from collections.abc import Sequence
from typing import Final

from django.conf import settings
from django.core.files.uploadedfile import UploadedFile

from server.apps.files.exceptions import UploadRejectedError

_DEFAULT_MAX_UPLOAD_SIZE: Final = 10 * 1024 * 1024
_DEFAULT_MAX_UPLOAD_FILES: Final = 10
_FALLBACK_MIME_TYPE: Final = 'application/octet-stream'
_BYTES_PER_MB: Final = 1024 * 1024


def get_max_upload_size() -> int:
    """Get maximum size of a single uploaded file.

    Returns:
        Limit in bytes from settings or default of 10 MB.
    """
    return getattr(settings, 'DOCUFLOW_MAX_UPLOAD_SIZE', _DEFAULT_MAX_UPLOAD_SIZE)


def get_max_upload_files() -> int:
    """Get maximum number of files in one upload request.

    Returns:
        Limit from settings or default of 10.
    """
    return getattr(
        settings,
        'DOCUFLOW_MAX_UPLOAD_FILES',
        _DEFAULT_MAX_UPLOAD_FILES,
    )


def get_allowed_mime_types() -> frozenset[str]:
    """Get the MIME type allow-list for uploads.

    Returns:
        Allowed MIME types from settings (empty if unset).
    """
    return frozenset(getattr(settings, 'DOCUFLOW_ALLOWED_MIME_TYPES', ()))


def detect_mime_type(upload: UploadedFile) -> str:
    """Detect MIME type of an uploaded file.

    Trusts the type declared by the client, falling back to a guess
    from the filename extension.

    Args:
        upload: Uploaded file from the request.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    if upload.content_type:
        return upload.content_type
    mime_type, _ = mimetypes.guess_type(upload.name or '')
    return mime_type or _FALLBACK_MIME_TYPE


def validate_upload(upload: UploadedFile) -> None:
    """Validate a single uploaded file against type and size limits.

    Args:
        upload: Uploaded file from the request.

    Raises:
        UploadRejectedError: If the file is too large or of a
            disallowed type.
    """
    max_size = get_max_upload_size()
    if upload.size is not None and upload.size > max_size:
        raise UploadRejectedError(
            'File size exceeds limit. Maximum file size is '
            f'{max_size // _BYTES_PER_MB}MB per file.',
            code='file_too_large',
        )

    if detect_mime_type(upload) not in get_allowed_mime_types():
        raise UploadRejectedError(
            'Invalid file type. Allowed types: PDF, images, CSV, Excel, '
            'Word, text files, ZIP',
            code='invalid_type',
        )


def validate_batch(uploads: Sequence[UploadedFile]) -> None:
    """Validate an upload request as a whole.

    Any invalid file rejects the entire request before anything is
    stored.

    Args:
        uploads: Files from one request.

    Raises:
        UploadRejectedError: If the batch is empty, too large, or
            contains an invalid file.
    """
    if not uploads:
        raise UploadRejectedError('No files uploaded', code='empty')

    max_files = get_max_upload_files()
    if len(uploads) > max_files:
        raise UploadRejectedError(
            f'Too many files. Maximum {max_files} files can be '
            'uploaded at once.',
            code='too_many_files',
        )

    for upload in uploads:
        validate_upload(upload)
