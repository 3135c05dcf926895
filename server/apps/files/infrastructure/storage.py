"""Blob storage for uploaded documents."""

import logging
from typing import IO, Any, final, override

from django.core.files.base import ContentFile
from django.core.files.base import File as DjangoFile
from django.core.files.storage import Storage, storages
from django.utils import timezone
from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)


@final
class FileStorage(S3Storage):
    """S3 storage backend for user documents.

    Extends django-storages S3Storage with upload and delete logging.
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save blob to S3 with error handling and logging.

        Args:
            name: Requested blob name.
            content: File content (file-like object).
            max_length: Optional maximum length for the name.

        Returns:
            Actual blob name used (may differ from name if taken).

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading blob to storage: %s', name)
            saved_name = super().save(name, content, max_length)
        except Exception:
            logger.exception('Failed to upload blob to storage: %s', name)
            raise
        else:
            logger.info('Successfully uploaded blob: %s', saved_name)
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete blob from S3 with error handling and logging.

        Args:
            name: Blob name to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting blob from storage: %s', name)
            super().delete(name)
        except Exception:
            logger.exception('Failed to delete blob from storage: %s', name)
            raise
        logger.info('Successfully deleted blob: %s', name)


class BlobStore:
    """Opaque key to bytes store used by the file registry.

    Wraps a Django storage backend. The backend is passed in explicitly
    so callers (and tests) decide which bucket they talk to.
    """

    def __init__(self, storage: Storage) -> None:
        """Initialize BlobStore.

        Args:
            storage: Django storage backend holding the blobs.
        """
        self._storage = storage

    def put(
        self,
        content: bytes | IO[bytes] | DjangoFile,
        content_type: str,
        name: str,
    ) -> str:
        """Store content and return its storage key.

        The key is derived from the upload time and the display name,
        e.g. '1760871234567-report.pdf'.

        Args:
            content: Raw bytes or a file-like object.
            content_type: MIME type recorded with the blob.
            name: Display name of the document.

        Returns:
            Storage key of the saved blob.
        """
        if isinstance(content, bytes):
            content = ContentFile(content)
        elif not isinstance(content, DjangoFile):
            content = DjangoFile(content)
        # S3Storage reads the ContentType header from this attribute
        content.content_type = content_type  # type: ignore[union-attr]

        millis = int(timezone.now().timestamp() * 1000)
        return self._storage.save(f'{millis}-{name}', content)

    def get(self, storage_key: str) -> DjangoFile:
        """Open a blob for streaming.

        Args:
            storage_key: Key returned by put().

        Returns:
            Open file object positioned at the start.
        """
        return self._storage.open(storage_key, 'rb')

    def delete(self, storage_key: str) -> None:
        """Delete a blob.

        Args:
            storage_key: Key returned by put().
        """
        self._storage.delete(storage_key)

    def discard(self, storage_key: str) -> None:
        """Delete a blob that no record points to.

        Best-effort: failures are logged, never raised. An orphaned
        blob is harmless.

        Args:
            storage_key: Key returned by put().
        """
        try:
            logger.warning('Discarding unreferenced blob: %s', storage_key)
            self.delete(storage_key)
        except Exception:
            logger.exception(
                'Failed to discard blob, left orphaned: %s',
                storage_key,
            )

    def url_for(self, storage_key: str) -> str:
        """Get retrieval URL for a blob.

        Args:
            storage_key: Key returned by put().

        Returns:
            URL served by the storage backend.
        """
        return self._storage.url(storage_key)


def get_blob_store() -> BlobStore:
    """Build a blob store over the configured default storage.

    Returns:
        BlobStore backed by ``STORAGES['default']``.
    """
    return BlobStore(storages['default'])
