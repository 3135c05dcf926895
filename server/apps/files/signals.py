"""Signal handlers for files app."""

import logging

from django.conf import settings
from django.db import transaction
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from server.apps.files.infrastructure.storage import get_blob_store
from server.apps.files.models import File

logger = logging.getLogger(__name__)


@receiver(pre_delete, sender=settings.AUTH_USER_MODEL)
def discard_blobs_of_deleted_user(
    sender: type,
    instance: object,
    **kwargs: object,
) -> None:
    """Remove stored blobs of a user whose records are being deleted.

    Deleting a user cascades to their File rows in the database, which
    bypasses delete_file(). Blob keys are collected before the cascade
    and discarded once the deletion commits.

    Args:
        sender: The user model class.
        instance: The user being deleted.
        **kwargs: Additional signal arguments.
    """
    storage_keys = list(
        File.objects.filter(owner=instance).values_list(
            'storage_key',
            flat=True,
        ),
    )
    if not storage_keys:
        return

    logger.info(
        'Scheduling removal of %d blobs of deleted user %s',
        len(storage_keys),
        instance,
    )

    def discard_all() -> None:
        blob_store = get_blob_store()
        for storage_key in storage_keys:
            blob_store.discard(storage_key)

    transaction.on_commit(discard_all)
