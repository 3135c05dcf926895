"""Database models for files app."""

from pathlib import Path
from typing import ClassVar, Final, final, override

from django.conf import settings
from django.db import models

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_MIME_TYPE_MAX_LENGTH: Final = 255
_STORAGE_KEY_MAX_LENGTH: Final = 1024


@final
class File(models.Model):
    """Document uploaded by a user and stored in blob storage.

    The record keeps only metadata. The bytes live in the blob store
    under ``storage_key``, an opaque name handed back by the store on
    upload. ``original_name`` is what the owner sees and is unique per
    owner.
    """

    # Blobs of a deleted owner are removed by signals.discard_blobs_of_deleted_user
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='files',
        db_index=True,
    )

    original_name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        help_text='Display name as uploaded by the owner',
    )

    mime_type = models.CharField(
        max_length=_MIME_TYPE_MAX_LENGTH,
    )

    size_bytes = models.BigIntegerField(
        help_text='File size in bytes',
    )

    storage_key = models.CharField(
        max_length=_STORAGE_KEY_MAX_LENGTH,
        help_text='Blob name in storage',
    )

    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Files'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-uploaded_at', '-id']

        indexes: ClassVar[list[models.Index]] = [
            models.Index(
                fields=['owner', '-uploaded_at'],
                name='files_owner_recent_idx',
            ),
        ]

        constraints: ClassVar[list[models.BaseConstraint]] = [
            # Display names are unique per owner, not globally
            models.UniqueConstraint(
                fields=['owner', 'original_name'],
                name='files_owner_name_unique',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.owner.username}:{self.original_name}'

    def get_extension(self) -> str:
        """Extract file extension from the display name.

        Example: 'report.PDF' -> 'pdf'

        Returns:
            Extension without dot (lowercase).
        """
        extension = Path(self.original_name).suffix
        return extension.lstrip('.').lower()
