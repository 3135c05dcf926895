"""Django admin configuration for sharing app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils import timezone

from server.apps.sharing.logic.expiry import is_expired
from server.apps.sharing.models import AccessLogEntry, Share


class AccessLogEntryInline(admin.TabularInline):
    """Read-only access log shown on the share page."""

    model = AccessLogEntry
    extra = 0
    can_delete = False
    readonly_fields = ['user', 'action', 'timestamp']

    def has_add_permission(
        self,
        request: HttpRequest,
        obj: Share | None = None,
    ) -> bool:
        """The access log is append-only through the API."""
        return False


@admin.register(Share)
class ShareAdmin(admin.ModelAdmin):
    """Admin interface for Share model."""

    list_display = [
        'id',
        'file',
        'owner',
        'kind',
        'role',
        'expires_at',
        'status_display',
        'created_at',
    ]

    list_filter = [
        'kind',
        'role',
        'created_at',
    ]

    search_fields = [
        'file__original_name',
        'owner__username',
        'link_token',
    ]

    readonly_fields = [
        'file',
        'owner',
        'kind',
        'link_token',
        'created_at',
    ]

    filter_horizontal = ['recipients']

    inlines = [AccessLogEntryInline]

    def status_display(self, obj: Share) -> str:
        """Display whether the share is still usable.

        Args:
            obj: Share instance.

        Returns:
            'Expired' or 'Active'.
        """
        return 'Expired' if is_expired(obj, timezone.now()) else 'Active'
    status_display.short_description = 'Status'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[Share]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('file', 'owner')

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Shares are created through the API only."""
        return False
