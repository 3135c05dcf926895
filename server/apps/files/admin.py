"""Django admin configuration for files app."""

from typing import Final

from django.contrib import admin
from django.db.models import Count, QuerySet
from django.http import HttpRequest

from server.apps.files.models import File

_KB: Final = 1024
_MB: Final = _KB * 1024
_GB: Final = _MB * 1024


@admin.register(File)
class FileAdmin(admin.ModelAdmin):
    """Admin interface for File model.

    Read-only: deleting a file must also remove its shares and blob,
    which only the API delete path does.
    """

    list_display = [
        'original_name',
        'owner',
        'size_display',
        'mime_type',
        'share_count',
        'uploaded_at',
    ]

    list_filter = [
        'mime_type',
        'uploaded_at',
    ]

    search_fields = [
        'original_name',
        'owner__username',
        'storage_key',
    ]

    readonly_fields = [
        'owner',
        'original_name',
        'mime_type',
        'size_bytes',
        'storage_key',
        'uploaded_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('original_name', 'owner'),
        }),
        ('Metadata', {
            'fields': (
                'size_bytes',
                'mime_type',
                'storage_key',
            ),
        }),
        ('Timestamps', {
            'fields': ('uploaded_at',),
        }),
    )

    def size_display(self, obj: File) -> str:
        """Display file size in human-readable format.

        Args:
            obj: File instance.

        Returns:
            Formatted size string (e.g., '1.5 MB', '234 KB').
        """
        return format_bytes(obj.size_bytes)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def share_count(self, obj: File) -> int:
        """Number of shares of the file."""
        return obj.share_total  # type: ignore[attr-defined]
    share_count.short_description = 'Shares'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[File]:
        """Optimize queryset with select_related and share counts.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related(
            'owner',
        ).annotate(share_total=Count('shares'))

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Files are created by uploads only."""
        return False

    def has_delete_permission(
        self,
        request: HttpRequest,
        obj: File | None = None,
    ) -> bool:
        """Files are deleted through the API only."""
        return False


def format_bytes(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < _KB:
        return f'{size_bytes} B'
    if size_bytes < _MB:
        return f'{size_bytes / _KB:.1f} KB'
    if size_bytes < _GB:
        return f'{size_bytes / _MB:.1f} MB'
    return f'{size_bytes / _GB:.1f} GB'
