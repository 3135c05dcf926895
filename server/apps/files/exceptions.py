"""Exceptions for files app."""

from datetime import datetime

from django.core.exceptions import ValidationError


class DuplicateFileNameError(Exception):
    """Raised when the owner already has a file with the same name."""

    def __init__(
        self,
        original_name: str,
        uploaded_at: datetime | None = None,
    ) -> None:
        """Initialize DuplicateFileNameError.

        Args:
            original_name: The colliding display name.
            uploaded_at: Upload time of the existing file, if known.
        """
        self.original_name = original_name
        self.uploaded_at = uploaded_at
        super().__init__(f'File already exists: {original_name}')


class UploadRejectedError(ValidationError):
    """Raised when an upload request breaks size, type or count limits."""
