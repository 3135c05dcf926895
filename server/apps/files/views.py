"""HTTP endpoints for files."""

from http import HTTPStatus
from typing import Any

from django.http import FileResponse, HttpRequest, JsonResponse

from server.apps.files.infrastructure.storage import get_blob_store
from server.apps.files.logic.file_operations import delete_file, list_files
from server.apps.files.logic.upload_operations import upload_batch
from server.apps.files.serializers import serialize_file
from server.apps.sharing.logic.access_operations import (
    evaluate_access,
    open_for_download,
    open_for_view,
)
from server.apps.sharing.logic.share_operations import list_shared_with
from server.apps.sharing.serializers import serialize_share
from server.common.http import api_endpoint


@api_endpoint(methods=['POST'])
def upload(request: HttpRequest, user: Any) -> JsonResponse:
    """Upload up to N files sent as multipart field ``files``."""
    result = upload_batch(
        user,
        request.FILES.getlist('files'),
        get_blob_store(),
    )

    if result.uploaded:
        status = HTTPStatus.CREATED
    elif result.duplicates:
        status = HTTPStatus.BAD_REQUEST
    else:
        status = HTTPStatus.INTERNAL_SERVER_ERROR

    return JsonResponse(
        {
            'message': result.message,
            'files': [serialize_file(item) for item in result.uploaded],
            'duplicates': [
                {
                    'name': dup.name,
                    'uploadDate': (
                        dup.uploaded_at.isoformat() if dup.uploaded_at else None
                    ),
                }
                for dup in result.duplicates
            ],
            'failed': [
                {'name': fail.name, 'error': fail.error}
                for fail in result.failed
            ],
            'summary': result.summary,
        },
        status=status,
    )


@api_endpoint(methods=['GET'])
def my_files(request: HttpRequest, user: Any) -> JsonResponse:
    """List the user's own files, newest first."""
    files = list_files(user).select_related('owner')
    return JsonResponse({'files': [serialize_file(item) for item in files]})


@api_endpoint(methods=['GET'])
def shared_with_me(request: HttpRequest, user: Any) -> JsonResponse:
    """List live user shares naming the user."""
    shares = list_shared_with(user).prefetch_related('recipients')
    return JsonResponse({
        'shares': [
            serialize_share(share, include_file=True) for share in shares
        ],
    })


@api_endpoint(methods=['GET', 'DELETE'])
def file_detail(request: HttpRequest, file_id: int, user: Any) -> JsonResponse:
    """Get metadata of an accessible file, or delete an owned file."""
    if request.method == 'DELETE':
        delete_file(file_id, user, get_blob_store())
        return JsonResponse({'message': 'File deleted successfully'})

    decision = evaluate_access(file_id, user)
    return JsonResponse({
        'file': serialize_file(decision.file),
        'role': decision.role,
    })


@api_endpoint(methods=['GET'])
def download(request: HttpRequest, file_id: int, user: Any) -> FileResponse:
    """Stream a file as attachment (owners and editors only)."""
    decision, blob = open_for_download(file_id, user, get_blob_store())
    return FileResponse(
        blob,
        as_attachment=True,
        filename=decision.file.original_name,
        content_type=decision.file.mime_type,
    )


@api_endpoint(methods=['GET'])
def view(request: HttpRequest, file_id: int, user: Any) -> FileResponse:
    """Stream a file inline for preview."""
    decision, blob = open_for_view(file_id, user, get_blob_store())
    return FileResponse(
        blob,
        as_attachment=False,
        filename=decision.file.original_name,
        content_type=decision.file.mime_type,
    )
