"""Business logic for the file registry."""

import logging
from typing import Any

from django.core.exceptions import PermissionDenied
from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from server.apps.files.exceptions import DuplicateFileNameError
from server.apps.files.infrastructure.storage import BlobStore
from server.apps.files.models import File
from server.apps.sharing.logic.share_operations import delete_shares_for_file

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


def register_file(  # noqa: WPS211
    owner: _User,
    original_name: str,
    mime_type: str,
    size_bytes: int,
    storage_key: str,
) -> File:
    """Create the registry record for an uploaded blob.

    Args:
        owner: Uploading user.
        original_name: Display name, unique per owner.
        mime_type: MIME type of the content.
        size_bytes: Content size in bytes.
        storage_key: Blob name returned by the blob store.

    Returns:
        Created File instance.

    Raises:
        DuplicateFileNameError: If owner already has a file with
            exactly this name.
    """
    existing = find_by_name(owner, original_name)
    if existing is not None:
        raise DuplicateFileNameError(original_name, existing.uploaded_at)

    try:
        with transaction.atomic():
            file_instance = File.objects.create(
                owner=owner,
                original_name=original_name,
                mime_type=mime_type,
                size_bytes=size_bytes,
                storage_key=storage_key,
            )
    except IntegrityError as error:
        # Lost a race with a concurrent upload of the same name
        raise DuplicateFileNameError(original_name) from error

    logger.info(
        'File registered: %s (ID: %d, owner: %s)',
        original_name,
        file_instance.id,
        owner.username,
    )
    return file_instance


def find_by_name(owner: _User, original_name: str) -> File | None:
    """Find owner's file by exact (case-sensitive) display name.

    Args:
        owner: File owner.
        original_name: Display name.

    Returns:
        File instance or None.
    """
    return File.objects.filter(
        owner=owner,
        original_name=original_name,
    ).first()


def get_file(file_id: int) -> File:
    """Get file by ID.

    Args:
        file_id: ID of the file.

    Returns:
        File instance.

    Raises:
        File.DoesNotExist: If file not found.
    """
    return File.objects.select_related('owner').get(id=file_id)


def list_files(owner: _User) -> QuerySet[File]:
    """List owner's files, newest first.

    Args:
        owner: Owner of files.

    Returns:
        QuerySet of File objects.
    """
    return File.objects.filter(owner=owner).order_by('-uploaded_at', '-id')


def delete_file(file_id: int, user: _User, blob_store: BlobStore) -> None:
    """Delete file, its shares and its blob.

    Order: shares, then blob (best effort), then the record. A crash
    midway can leave a file record without shares, never shares
    without a file.

    Args:
        file_id: ID of file to delete.
        user: Requesting user, must be the owner.
        blob_store: Store holding the file content.

    Raises:
        File.DoesNotExist: If file not found.
        PermissionDenied: If user is not the owner.
    """
    file_instance = File.objects.get(id=file_id)
    if file_instance.owner_id != user.pk:
        logger.warning(
            'User %s attempted to delete file %d owned by %d',
            user.username,
            file_id,
            file_instance.owner_id,
        )
        raise PermissionDenied('Access denied')

    shares_deleted = delete_shares_for_file(file_instance)

    try:
        blob_store.delete(file_instance.storage_key)
    except Exception:
        # Record removal proceeds, orphaned blob is acceptable
        logger.exception(
            'Failed to delete blob for file %d (orphaned): %s',
            file_id,
            file_instance.storage_key,
        )

    file_instance.delete()
    logger.info(
        'File deleted: %s (ID: %d, shares removed: %d)',
        file_instance.original_name,
        file_id,
        shares_deleted,
    )
