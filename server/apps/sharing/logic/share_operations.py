"""Business logic for the share ledger.

All create-or-update decisions for shares happen here. A share is
re-issued by updating the existing record in place, never by adding a
second record for the same target.
"""

import logging
import uuid
from collections.abc import Iterable
from typing import Any

from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import DatabaseError, transaction
from django.db.models import Q, QuerySet
from django.utils import timezone

from server.apps.files.models import File
from server.apps.sharing.exceptions import (
    InvalidRecipientsError,
    NotAUserShareError,
    ShareExpiredError,
)
from server.apps.sharing.logic.expiry import compute_expiry, is_expired
from server.apps.sharing.models import (
    AccessAction,
    AccessLogEntry,
    Share,
    ShareKind,
    ShareRole,
)

# User type for Django's dynamic user model
_User = Any

_SHARE_UPDATE_FIELDS = ('role', 'expires_at')  # noqa: WPS226

logger = logging.getLogger(__name__)


def get_owned_file(
    file_id: int,
    owner: _User,
    *,
    for_update: bool = False,
) -> File:
    """Load a file and check that owner owns it.

    Args:
        file_id: ID of the file.
        owner: User claiming ownership.
        for_update: Lock the row until the surrounding transaction ends.

    Returns:
        File instance.

    Raises:
        File.DoesNotExist: If file not found.
        PermissionDenied: If owner does not own the file.
    """
    queryset = File.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    file_instance = queryset.get(id=file_id)
    if file_instance.owner_id != owner.pk:
        logger.warning(
            'User %s is not the owner of file %d',
            owner.username,
            file_id,
        )
        raise PermissionDenied('Only file owner can manage shares')
    return file_instance


def _validate_role(role: str | None) -> None:
    if role and role not in ShareRole.values:
        raise ValidationError(
            f'Invalid role: {role}. Allowed roles: viewer, editor',
            code='invalid_role',
        )


def _parse_user_id(raw_id: object) -> int | None:
    # JSON true and 1.9 are not user 1
    if isinstance(raw_id, bool):
        return None
    if isinstance(raw_id, int):
        return raw_id
    if isinstance(raw_id, float):
        return int(raw_id) if raw_id.is_integer() else None
    if isinstance(raw_id, str):
        try:
            return int(raw_id)
        except ValueError:
            return None
    return None


def _resolve_recipients(recipient_ids: Iterable[object]) -> list[_User]:
    """Map recipient identifiers to users.

    Args:
        recipient_ids: User primary keys (ints or numeric strings).

    Returns:
        Users ordered by primary key.

    Raises:
        InvalidRecipientsError: If any identifier matches no user.
        ValidationError: If no recipients were given.
    """
    wanted: set[int] = set()
    malformed: list[object] = []
    for raw_id in recipient_ids:
        user_id = _parse_user_id(raw_id)
        if user_id is None:
            malformed.append(raw_id)
        else:
            wanted.add(user_id)

    if not wanted and not malformed:
        raise ValidationError(
            'File ID and user IDs are required',
            code='no_recipients',
        )

    users = list(
        get_user_model().objects.filter(pk__in=wanted).order_by('pk'),
    )
    missing = [*malformed, *(wanted - {user.pk for user in users})]
    if missing:
        raise InvalidRecipientsError(missing)
    return users


def share_with_users(  # noqa: WPS211
    file_id: int,
    owner: _User,
    recipient_ids: Iterable[object],
    role: str | None = None,
    expires_in_hours: object = None,
) -> list[Share]:
    """Share a file with specific users, one share per recipient.

    For each recipient an existing user share is updated in place
    (role if given, expiry if given); otherwise a new share with that
    single recipient is created.

    Args:
        file_id: ID of the file to share.
        owner: File owner.
        recipient_ids: IDs of registered users to share with.
        role: 'viewer' or 'editor'; None keeps the current role
            (or 'viewer' for new shares).
        expires_in_hours: Lifetime in hours; None keeps the current
            expiry (or no expiry for new shares).

    Returns:
        Created or updated shares, one per recipient.

    Raises:
        File.DoesNotExist: If file not found.
        PermissionDenied: If owner does not own the file.
        InvalidRecipientsError: If a recipient is not a known user.
        ValidationError: If role is invalid or no recipients given.
    """
    _validate_role(role)
    expires_at = compute_expiry(expires_in_hours)

    with transaction.atomic():
        # Lock the file row so concurrent re-shares serialize
        file_instance = get_owned_file(file_id, owner, for_update=True)
        recipients = _resolve_recipients(recipient_ids)

        shares = []
        for recipient in recipients:
            share = Share.objects.filter(
                file=file_instance,
                owner=owner,
                kind=ShareKind.USER,
                recipients=recipient,
            ).order_by('-created_at', '-id').first()

            if share is not None:
                share.role = role or share.role
                if expires_at is not None:
                    share.expires_at = expires_at
                share.save(update_fields=_SHARE_UPDATE_FIELDS)
                logger.info(
                    'Updated share %d for user %s with role: %s',
                    share.id,
                    recipient.username,
                    share.role,
                )
            else:
                share = Share.objects.create(
                    file=file_instance,
                    owner=owner,
                    kind=ShareKind.USER,
                    role=role or ShareRole.VIEWER,
                    expires_at=expires_at,
                )
                share.recipients.add(recipient)
                logger.info(
                    'Created share %d for user %s with role: %s',
                    share.id,
                    recipient.username,
                    share.role,
                )
            shares.append(share)

    return shares


def create_or_update_link(
    file_id: int,
    owner: _User,
    role: str | None = None,
    expires_in_hours: object = None,
) -> tuple[Share, bool]:
    """Create the file's link share, or update the existing one.

    An update never clears an existing expiry: omitting
    expires_in_hours keeps it.

    Args:
        file_id: ID of the file to share.
        owner: File owner.
        role: 'viewer' or 'editor'; None keeps the current role.
        expires_in_hours: Lifetime in hours; None keeps the current
            expiry.

    Returns:
        Tuple of (share, created).

    Raises:
        File.DoesNotExist: If file not found.
        PermissionDenied: If owner does not own the file.
        ValidationError: If role is invalid.
    """
    _validate_role(role)
    expires_at = compute_expiry(expires_in_hours)

    with transaction.atomic():
        file_instance = get_owned_file(file_id, owner, for_update=True)
        share = Share.objects.filter(
            file=file_instance,
            owner=owner,
            kind=ShareKind.LINK,
        ).first()

        if share is not None:
            share.role = role or share.role
            if expires_at is not None:
                share.expires_at = expires_at
            share.save(update_fields=_SHARE_UPDATE_FIELDS)
            logger.info(
                'Updated link share %d for file %d with role: %s',
                share.id,
                file_id,
                share.role,
            )
            return share, False

        share = Share.objects.create(
            file=file_instance,
            owner=owner,
            kind=ShareKind.LINK,
            link_token=str(uuid.uuid4()),
            role=role or ShareRole.VIEWER,
            expires_at=expires_at,
        )

    logger.info(
        'Created link share %d for file %d with role: %s',
        share.id,
        file_id,
        share.role,
    )
    return share, True


def resolve_link(token: str, user: _User) -> tuple[File, Share]:
    """Open a link share and log the view.

    Args:
        token: Link token.
        user: User following the link.

    Returns:
        Tuple of (file, share).

    Raises:
        Share.DoesNotExist: If no link share has this token.
        ShareExpiredError: If the share has expired.
    """
    share = Share.objects.select_related('file', 'file__owner').get(
        kind=ShareKind.LINK,
        link_token=token,
    )

    if is_expired(share):
        logger.warning(
            'Expired link share %d accessed by %s',
            share.id,
            user.username,
        )
        raise ShareExpiredError('Share link has expired')

    record_access(share, user, AccessAction.VIEW)
    logger.info('Link share %d resolved by %s', share.id, user.username)
    return share.file, share


def list_shares(file_id: int, owner: _User) -> QuerySet[Share]:
    """List every share of a file, expired ones included, newest first.

    Args:
        file_id: ID of the file.
        owner: File owner.

    Returns:
        QuerySet of shares with recipients prefetched.

    Raises:
        File.DoesNotExist: If file not found.
        PermissionDenied: If owner does not own the file.
    """
    file_instance = get_owned_file(file_id, owner)
    return Share.objects.filter(
        file=file_instance,
    ).prefetch_related('recipients').order_by('-created_at', '-id')


def list_shared_with(user: _User) -> QuerySet[Share]:
    """List live user shares naming user as recipient, newest first.

    Args:
        user: Recipient.

    Returns:
        QuerySet of non-expired user shares.
    """
    now = timezone.now()
    return Share.objects.filter(
        kind=ShareKind.USER,
        recipients=user,
    ).filter(
        Q(expires_at__isnull=True) | Q(expires_at__gte=now),
    ).select_related(
        'file',
        'file__owner',
    ).order_by('-created_at', '-id')


def revoke_share(share_id: int, user: _User) -> None:
    """Delete a share entirely.

    Args:
        share_id: ID of the share.
        user: Requesting user, must own the share.

    Raises:
        Share.DoesNotExist: If share not found.
        PermissionDenied: If user does not own the share.
    """
    share = Share.objects.get(id=share_id)
    if share.owner_id != user.pk:
        raise PermissionDenied('Access denied')

    share.delete()
    logger.info('Share revoked: %d (file: %d)', share_id, share.file_id)


def remove_recipient(
    share_id: int,
    user: _User,
    recipient_id: int,
) -> Share | None:
    """Remove one recipient from a user share.

    The share is deleted once its last recipient is gone.

    Args:
        share_id: ID of the share.
        user: Requesting user, must own the share.
        recipient_id: ID of the recipient to remove.

    Returns:
        The reduced share, or None if it was deleted.

    Raises:
        Share.DoesNotExist: If share not found.
        PermissionDenied: If user does not own the share.
        NotAUserShareError: If the share is a link share.
    """
    with transaction.atomic():
        share = Share.objects.select_for_update().get(id=share_id)
        if share.owner_id != user.pk:
            raise PermissionDenied('Access denied')
        if share.kind != ShareKind.USER:
            raise NotAUserShareError(
                'This is not a user share',
                code='not_user_share',
            )

        # Single DELETE on the through table, safe against concurrent adds
        share.recipients.remove(recipient_id)

        if not share.recipients.exists():
            share.delete()
            logger.info(
                'Share %d deleted, no recipients remaining',
                share_id,
            )
            return None

    logger.info('User %d removed from share %d', recipient_id, share_id)
    return share


def record_access(
    share: Share,
    user: _User,
    action: str,
) -> AccessLogEntry | None:
    """Append an entry to a share's access log.

    Best-effort: a storage error is logged and swallowed so the
    surrounding view or download still succeeds.

    Args:
        share: Share the access went through.
        user: Acting user.
        action: 'view' or 'download'.

    Returns:
        Created entry, or None if it could not be stored.
    """
    try:
        with transaction.atomic():
            return AccessLogEntry.objects.create(
                share=share,
                user=user,
                action=action,
            )
    except DatabaseError:
        logger.exception(
            'Failed to record %s access on share %d by %s',
            action,
            share.id,
            user.username,
        )
        return None


def delete_shares_for_file(file_instance: File) -> int:
    """Delete all shares of a file.

    Args:
        file_instance: File whose shares are removed.

    Returns:
        Number of shares deleted.
    """
    _, per_model = Share.objects.filter(file=file_instance).delete()
    deleted = per_model.get(Share._meta.label, 0)
    logger.info(
        'Deleted %d shares of file %d',
        deleted,
        file_instance.id,
    )
    return deleted
