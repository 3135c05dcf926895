"""Business logic for access decisions.

Every read of a file by a user goes through evaluate_access(). Owners
always get full access. Everyone else needs a live share: a user share
naming them beats a link share, and among equals the newest wins.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Final

from django.core.exceptions import PermissionDenied
from django.core.files.base import File as DjangoFile
from django.utils import timezone

from server.apps.files.infrastructure.storage import BlobStore
from server.apps.files.models import File
from server.apps.sharing.exceptions import ShareExpiredError, ViewOnlyError
from server.apps.sharing.logic.expiry import is_expired
from server.apps.sharing.logic.share_operations import record_access
from server.apps.sharing.models import AccessAction, Share, ShareKind, ShareRole

# User type for Django's dynamic user model
_User = Any

# Role reported for the file owner, never stored on a share
OWNER_ROLE: Final = 'owner'

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessDecision:
    """Granted access of a user to a file."""

    file: File
    role: str
    share: Share | None = None

    @property
    def is_owner(self) -> bool:
        """Whether access comes from ownership rather than a share."""
        return self.role == OWNER_ROLE

    @property
    def can_download(self) -> bool:
        """Whether the role allows downloading."""
        return self.role != ShareRole.VIEWER


def evaluate_access(
    file_id: int,
    user: _User,
    now: datetime | None = None,
) -> AccessDecision:
    """Decide whether user may access a file, and with which role.

    Args:
        file_id: ID of the file.
        user: Requesting user.
        now: Reference time for expiry checks.

    Returns:
        AccessDecision for a granted request.

    Raises:
        File.DoesNotExist: If file not found.
        ShareExpiredError: If every matching share has expired.
        PermissionDenied: If no share grants access.
    """
    file_instance = File.objects.select_related('owner').get(id=file_id)
    if file_instance.owner_id == user.pk:
        return AccessDecision(file=file_instance, role=OWNER_ROLE)

    now = now or timezone.now()
    candidates = [
        *Share.objects.filter(
            file=file_instance,
            kind=ShareKind.USER,
            recipients=user,
        ).order_by('-created_at', '-id'),
        *Share.objects.filter(
            file=file_instance,
            kind=ShareKind.LINK,
        ).order_by('-created_at', '-id'),
    ]

    for share in candidates:
        if not is_expired(share, now):
            return AccessDecision(
                file=file_instance,
                role=share.role,
                share=share,
            )

    logger.warning(
        'Access denied to file %d for user %s (expired matches: %d)',
        file_id,
        user.username,
        len(candidates),
    )
    if candidates:
        raise ShareExpiredError('Access denied or share expired')
    raise PermissionDenied('Access denied')


def require_download(decision: AccessDecision) -> None:
    """Check that a granted access also allows downloading.

    Args:
        decision: Result of evaluate_access().

    Raises:
        ViewOnlyError: If the granting share has the viewer role.
    """
    if not decision.can_download:
        raise ViewOnlyError(
            'Viewers cannot download files. Only viewing is allowed.',
        )


def open_for_view(
    file_id: int,
    user: _User,
    blob_store: BlobStore,
) -> tuple[AccessDecision, DjangoFile]:
    """Open a file for inline viewing and log the view.

    Args:
        file_id: ID of the file.
        user: Requesting user.
        blob_store: Store holding the content.

    Returns:
        Tuple of (decision, open blob).
    """
    decision = evaluate_access(file_id, user)
    blob = blob_store.get(decision.file.storage_key)
    if decision.share is not None:
        record_access(decision.share, user, AccessAction.VIEW)
    return decision, blob


def open_for_download(
    file_id: int,
    user: _User,
    blob_store: BlobStore,
) -> tuple[AccessDecision, DjangoFile]:
    """Open a file for download and log the download.

    Args:
        file_id: ID of the file.
        user: Requesting user.
        blob_store: Store holding the content.

    Returns:
        Tuple of (decision, open blob).

    Raises:
        ViewOnlyError: If user only has viewer access.
    """
    decision = evaluate_access(file_id, user)
    require_download(decision)
    blob = blob_store.get(decision.file.storage_key)
    if decision.share is not None:
        record_access(decision.share, user, AccessAction.DOWNLOAD)
    return decision, blob
