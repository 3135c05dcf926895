"""Database models for sharing app."""

from typing import ClassVar, Final, final, override

from django.conf import settings
from django.db import models
from django.utils import timezone

from server.apps.files.models import File

_CHOICE_MAX_LENGTH: Final = 16
_LINK_TOKEN_MAX_LENGTH: Final = 64


class ShareKind(models.TextChoices):
    """How a share identifies who may use it."""

    USER = 'user', 'User share'
    LINK = 'link', 'Link share'


class ShareRole(models.TextChoices):
    """Access level granted by a share."""

    VIEWER = 'viewer', 'Viewer'
    EDITOR = 'editor', 'Editor'


class AccessAction(models.TextChoices):
    """Action recorded in a share's access log."""

    VIEW = 'view', 'View'
    DOWNLOAD = 'download', 'Download'


@final
class Share(models.Model):
    """Grant of access to one file, created by the file's owner.

    User shares name their recipients explicitly. The ledger keeps one
    share per (file, owner, recipient). Link shares carry a random
    token instead, at most one per (file, owner).

    Expired shares stay in the table for auditing. Expiry is checked
    on every access, nothing sweeps them.
    """

    file = models.ForeignKey(
        File,
        on_delete=models.CASCADE,
        related_name='shares',
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='owned_shares',
    )

    kind = models.CharField(
        max_length=_CHOICE_MAX_LENGTH,
        choices=ShareKind.choices,
    )

    role = models.CharField(
        max_length=_CHOICE_MAX_LENGTH,
        choices=ShareRole.choices,
        default=ShareRole.VIEWER,
    )

    recipients = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name='received_shares',
        blank=True,
    )

    link_token = models.CharField(
        max_length=_LINK_TOKEN_MAX_LENGTH,
        unique=True,
        null=True,
        blank=True,
        help_text='Unguessable token for link shares',
    )

    expires_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text='Share is inaccessible after this moment',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Share'  # type: ignore[mutable-override]
        verbose_name_plural = 'Shares'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-created_at', '-id']

        indexes: ClassVar[list[models.Index]] = [
            models.Index(
                fields=['file', 'owner'],
                name='shares_file_owner_idx',
            ),
        ]

        constraints: ClassVar[list[models.BaseConstraint]] = [
            models.UniqueConstraint(
                fields=['file', 'owner'],
                condition=models.Q(kind='link'),
                name='shares_one_link_per_file_owner',
            ),
            models.CheckConstraint(
                condition=models.Q(role__in=['viewer', 'editor']),
                name='shares_role_valid',
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(kind='link', link_token__isnull=False)
                    | models.Q(kind='user', link_token__isnull=True)
                ),
                name='shares_token_matches_kind',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.kind}:{self.role}:{self.file_id}'


@final
class AccessLogEntry(models.Model):
    """Append-only record of a view or download through a share."""

    share = models.ForeignKey(
        Share,
        on_delete=models.CASCADE,
        related_name='access_log',
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name='access_events',
    )

    action = models.CharField(
        max_length=_CHOICE_MAX_LENGTH,
        choices=AccessAction.choices,
    )

    timestamp = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Access log entry'  # type: ignore[mutable-override]
        verbose_name_plural = 'Access log'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['timestamp', 'id']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user_id}:{self.action}@{self.timestamp:%Y-%m-%dT%H:%M:%S}'
