"""JSON representations of shares and audit entries."""

from typing import Any

from django.conf import settings

from server.apps.files.serializers import serialize_file, serialize_owner
from server.apps.sharing.logic.audit_operations import AuditEntry
from server.apps.sharing.models import Share, ShareKind


def build_share_url(share: Share) -> str | None:
    """Build the web client URL that opens a link share.

    Args:
        share: Share record.

    Returns:
        URL for link shares, None for user shares.
    """
    if share.kind != ShareKind.LINK:
        return None
    frontend = getattr(settings, 'DOCUFLOW_FRONTEND_URL', '').rstrip('/')
    return f'{frontend}/shared/{share.link_token}'


def serialize_share(
    share: Share,
    *,
    include_file: bool = False,
) -> dict[str, Any]:
    """Represent a share.

    Args:
        share: Share record.
        include_file: Embed the file metadata.

    Returns:
        JSON-ready dict.
    """
    data: dict[str, Any] = {
        'id': share.id,
        'fileId': share.file_id,
        'shareType': share.kind,
        'role': share.role,
        'expiresAt': share.expires_at.isoformat() if share.expires_at else None,
        'createdAt': share.created_at.isoformat(),
    }
    if share.kind == ShareKind.LINK:
        data['shareLink'] = share.link_token
        data['shareUrl'] = build_share_url(share)
    else:
        data['sharedWith'] = [
            serialize_owner(recipient)
            for recipient in share.recipients.all()
        ]
    if include_file:
        data['file'] = serialize_file(share.file)
    return data


def serialize_audit_entry(entry: AuditEntry) -> dict[str, Any]:
    """Represent an audit log entry.

    Args:
        entry: Flattened access event.

    Returns:
        JSON-ready dict.
    """
    return {
        'user': {'id': entry.user_id, 'username': entry.username},
        'action': entry.action,
        'timestamp': entry.timestamp.isoformat(),
        'shareType': entry.share_kind,
    }
