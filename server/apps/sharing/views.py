"""HTTP endpoints for shares."""

from http import HTTPStatus
from typing import Any

from django.core.exceptions import ValidationError
from django.http import HttpRequest, JsonResponse

from server.apps.files.serializers import serialize_file
from server.apps.sharing.logic.audit_operations import get_audit_log
from server.apps.sharing.logic.share_operations import (
    create_or_update_link,
    list_shares,
    remove_recipient,
    resolve_link,
    revoke_share,
    share_with_users,
)
from server.apps.sharing.serializers import (
    build_share_url,
    serialize_audit_entry,
    serialize_share,
)
from server.common.http import api_endpoint, parse_json_body


def _require_file_id(payload: dict[str, Any]) -> int:
    file_id = payload.get('fileId')
    if file_id is None or isinstance(file_id, bool):
        raise ValidationError('File ID is required')
    try:
        return int(file_id)
    except (TypeError, ValueError) as error:
        raise ValidationError('File ID must be an integer') from error


@api_endpoint(methods=['POST'])
def share_with_users_view(request: HttpRequest, user: Any) -> JsonResponse:
    """Share a file with registered users."""
    payload = parse_json_body(request)
    user_ids = payload.get('userIds')
    if not isinstance(user_ids, list) or not user_ids:
        raise ValidationError('File ID and user IDs are required')

    shares = share_with_users(
        _require_file_id(payload),
        user,
        user_ids,
        role=payload.get('role') or None,
        expires_in_hours=payload.get('expiresIn'),
    )
    return JsonResponse(
        {
            'message': 'File shared successfully',
            'shares': [serialize_share(share) for share in shares],
        },
        status=HTTPStatus.CREATED,
    )


@api_endpoint(methods=['POST'])
def create_link_view(request: HttpRequest, user: Any) -> JsonResponse:
    """Create or update the link share of a file."""
    payload = parse_json_body(request)
    share, created = create_or_update_link(
        _require_file_id(payload),
        user,
        role=payload.get('role') or None,
        expires_in_hours=payload.get('expiresIn'),
    )
    message = (
        'Share link created successfully'
        if created
        else 'Share link updated successfully'
    )
    return JsonResponse(
        {
            'message': message,
            'share': serialize_share(share),
            'shareUrl': build_share_url(share),
        },
        status=HTTPStatus.CREATED,
    )


@api_endpoint(methods=['GET'])
def resolve_link_view(request: HttpRequest, token: str, user: Any) -> JsonResponse:
    """Open a file through its share link."""
    file_instance, share = resolve_link(token, user)
    return JsonResponse({
        'file': serialize_file(file_instance),
        'share': {
            'role': share.role,
            'expiresAt': share.expires_at.isoformat() if share.expires_at else None,
            'shareType': share.kind,
        },
    })


@api_endpoint(methods=['GET'])
def file_shares_view(request: HttpRequest, file_id: int, user: Any) -> JsonResponse:
    """List all shares of an owned file."""
    shares = list_shares(file_id, user)
    return JsonResponse({
        'shares': [serialize_share(share) for share in shares],
    })


@api_endpoint(methods=['DELETE'])
def revoke_view(request: HttpRequest, share_id: int, user: Any) -> JsonResponse:
    """Revoke a share."""
    revoke_share(share_id, user)
    return JsonResponse({'message': 'Share revoked successfully'})


@api_endpoint(methods=['DELETE'])
def remove_recipient_view(
    request: HttpRequest,
    share_id: int,
    user_id: int,
    user: Any,
) -> JsonResponse:
    """Remove one recipient from a user share."""
    share = remove_recipient(share_id, user, user_id)
    if share is None:
        return JsonResponse({'message': 'Share deleted (no users remaining)'})
    return JsonResponse({
        'message': 'User removed from share',
        'share': serialize_share(share),
    })


@api_endpoint(methods=['GET'])
def audit_log_view(request: HttpRequest, file_id: int, user: Any) -> JsonResponse:
    """Get the access log of an owned file, newest first."""
    entries = get_audit_log(file_id, user)
    return JsonResponse({
        'logs': [serialize_audit_entry(entry) for entry in entries],
    })
