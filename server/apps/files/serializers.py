"""JSON representations of file records."""

from typing import Any

from server.apps.files.models import File


def serialize_owner(user: Any) -> dict[str, Any]:
    """Represent a user as shown to other users.

    Args:
        user: Django user.

    Returns:
        Dict with id, username and email.
    """
    return {
        'id': user.pk,
        'username': user.username,
        'email': user.email,
    }


def serialize_file(file_instance: File) -> dict[str, Any]:
    """Represent a file's metadata.

    Args:
        file_instance: File record.

    Returns:
        JSON-ready dict.
    """
    return {
        'id': file_instance.id,
        'originalName': file_instance.original_name,
        'mimetype': file_instance.mime_type,
        'size': file_instance.size_bytes,
        'owner': serialize_owner(file_instance.owner),
        'uploadDate': file_instance.uploaded_at.isoformat(),
    }
