"""Business logic for reading the access audit log."""

from dataclasses import dataclass
from datetime import datetime
from operator import attrgetter
from typing import Any

from server.apps.sharing.logic.share_operations import get_owned_file
from server.apps.sharing.models import AccessLogEntry

# User type for Django's dynamic user model
_User = Any


@dataclass(frozen=True)
class AuditEntry:
    """One access event, flattened out of its share."""

    user_id: int | None
    username: str | None
    action: str
    timestamp: datetime
    share_kind: str


def get_audit_log(file_id: int, owner: _User) -> list[AuditEntry]:
    """Collect access events of every share of a file, newest first.

    Events with equal timestamps keep their insertion order.

    Args:
        file_id: ID of the file.
        owner: File owner.

    Returns:
        List of AuditEntry.

    Raises:
        File.DoesNotExist: If file not found.
        PermissionDenied: If owner does not own the file.
    """
    file_instance = get_owned_file(file_id, owner)
    events = AccessLogEntry.objects.filter(
        share__file=file_instance,
    ).select_related('user', 'share').order_by('id')

    entries = [
        AuditEntry(
            user_id=event.user_id,
            username=event.user.username if event.user else None,
            action=event.action,
            timestamp=event.timestamp,
            share_kind=event.share.kind,
        )
        for event in events
    ]
    # sorted() is stable, reverse=True keeps insertion order for ties
    return sorted(entries, key=attrgetter('timestamp'), reverse=True)
