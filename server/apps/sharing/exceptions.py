"""Exceptions for sharing app."""

from collections.abc import Iterable

from django.core.exceptions import PermissionDenied, ValidationError


class ShareExpiredError(PermissionDenied):
    """Raised when the only matching share is past its expiry."""


class ViewOnlyError(PermissionDenied):
    """Raised when a viewer attempts to download a file."""


class InvalidRecipientsError(ValidationError):
    """Raised when share recipients do not match registered users."""

    def __init__(self, missing_ids: Iterable[object]) -> None:
        """Initialize InvalidRecipientsError.

        Args:
            missing_ids: Recipient identifiers that matched no user.
        """
        self.missing_ids = sorted(str(missing) for missing in missing_ids)
        super().__init__(
            'Some users not found: {0}'.format(', '.join(self.missing_ids)),
            code='invalid_recipients',
        )


class NotAUserShareError(ValidationError):
    """Raised when a recipient operation targets a link share."""
