"""Business logic for batch uploads.

Each file in a batch is handled on its own: duplicate check, blob
upload and registry insert. One file failing never aborts the others,
the outcome of every file is reported in the result.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from django.core.files.uploadedfile import UploadedFile

from server.apps.files.exceptions import DuplicateFileNameError
from server.apps.files.infrastructure.metadata import (
    detect_mime_type,
    validate_batch,
)
from server.apps.files.infrastructure.storage import BlobStore
from server.apps.files.logic.file_operations import find_by_name, register_file
from server.apps.files.models import File

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DuplicateUpload:
    """File skipped because the owner already has one with that name."""

    name: str
    uploaded_at: datetime | None


@dataclass(frozen=True)
class FailedUpload:
    """File that could not be stored."""

    name: str
    error: str


@dataclass
class UploadBatchResult:
    """Per-file outcome of one upload request."""

    uploaded: list[File] = field(default_factory=list)
    duplicates: list[DuplicateUpload] = field(default_factory=list)
    failed: list[FailedUpload] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of files in the batch."""
        return len(self.uploaded) + len(self.duplicates) + len(self.failed)

    @property
    def summary(self) -> dict[str, int]:
        """Counts per outcome."""
        return {
            'uploaded': len(self.uploaded),
            'duplicates': len(self.duplicates),
            'failed': len(self.failed),
            'total': self.total,
        }

    @property
    def message(self) -> str:
        """Human-readable description of the batch outcome."""
        parts: list[str] = []
        if self.uploaded:
            parts.append(
                f'{len(self.uploaded)} file(s) uploaded successfully',
            )
        if self.duplicates:
            names = ', '.join(dup.name for dup in self.duplicates)
            verb = 'skipped' if parts else 'already exist'
            parts.append(
                f'{len(self.duplicates)} duplicate file(s) {verb}: {names}',
            )
        if self.failed:
            names = ', '.join(fail.name for fail in self.failed)
            verb = 'failed' if parts else 'failed to upload'
            parts.append(f'{len(self.failed)} file(s) {verb}: {names}')
        return '. '.join(parts)


def upload_batch(
    owner: _User,
    uploads: Sequence[UploadedFile],
    blob_store: BlobStore,
) -> UploadBatchResult:
    """Store a batch of uploaded files for owner.

    The batch is validated as a whole first (count, size, type).
    After that each file is processed independently.

    Args:
        owner: Uploading user.
        uploads: Files from the request.
        blob_store: Store receiving the content.

    Returns:
        UploadBatchResult describing every file.

    Raises:
        UploadRejectedError: If the batch fails validation.
    """
    validate_batch(uploads)

    result = UploadBatchResult()
    for upload in uploads:
        _upload_one(owner, upload, blob_store, result)

    logger.info(
        'Upload batch for user %s: %d uploaded, %d duplicates, %d failed',
        owner.username,
        len(result.uploaded),
        len(result.duplicates),
        len(result.failed),
    )
    return result


def _upload_one(
    owner: _User,
    upload: UploadedFile,
    blob_store: BlobStore,
    result: UploadBatchResult,
) -> None:
    """Process a single file of a batch and record its outcome.

    Args:
        owner: Uploading user.
        upload: File to store.
        blob_store: Store receiving the content.
        result: Batch result to append the outcome to.
    """
    name = upload.name or ''
    existing = find_by_name(owner, name)
    if existing is not None:
        result.duplicates.append(DuplicateUpload(name, existing.uploaded_at))
        return

    mime_type = detect_mime_type(upload)
    try:
        storage_key = blob_store.put(upload, mime_type, name)
    except Exception as exc:
        logger.exception('Error uploading file %s', name)
        result.failed.append(FailedUpload(name, str(exc)))
        return

    try:
        file_instance = register_file(
            owner,
            name,
            mime_type,
            upload.size or 0,
            storage_key,
        )
    except DuplicateFileNameError as exc:
        blob_store.discard(storage_key)
        result.duplicates.append(DuplicateUpload(name, exc.uploaded_at))
        return
    except Exception as exc:
        logger.exception('Error registering file %s', name)
        blob_store.discard(storage_key)
        result.failed.append(FailedUpload(name, str(exc)))
        return

    result.uploaded.append(file_instance)
