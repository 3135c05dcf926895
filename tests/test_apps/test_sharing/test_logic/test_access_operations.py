"""Tests for access decisions."""

from datetime import timedelta

import pytest
from django.core.exceptions import PermissionDenied
from django.utils import timezone

from server.apps.files.models import File
from server.apps.sharing.exceptions import ShareExpiredError, ViewOnlyError
from server.apps.sharing.logic.access_operations import (
    OWNER_ROLE,
    evaluate_access,
    open_for_download,
    open_for_view,
    require_download,
)
from server.apps.sharing.logic.share_operations import (
    create_or_update_link,
    share_with_users,
)
from server.apps.sharing.models import AccessLogEntry, Share


@pytest.mark.django_db
class TestEvaluateAccess:
    """Tests for evaluate_access function."""

    def test_owner_always_granted(self, user, other_user, document):
        """Test owners get full access even with expired shares around."""
        share = share_with_users(document.id, user, [other_user.id])[0]
        Share.objects.filter(id=share.id).update(
            expires_at=timezone.now() - timedelta(days=1),
        )

        decision = evaluate_access(document.id, user)

        assert decision.role == OWNER_ROLE
        assert decision.is_owner
        assert decision.can_download
        assert decision.share is None

    def test_recipient_gets_share_role(self, user, other_user, document):
        """Test recipients get the role of their share."""
        share = share_with_users(
            document.id,
            user,
            [other_user.id],
            role='editor',
        )[0]

        decision = evaluate_access(document.id, other_user)

        assert decision.role == 'editor'
        assert decision.share == share
        assert not decision.is_owner

    def test_no_share_denied(self, other_user, document):
        """Test users without any share are denied."""
        with pytest.raises(PermissionDenied) as exc_info:
            evaluate_access(document.id, other_user)

        assert not isinstance(exc_info.value, ShareExpiredError)

    def test_expired_share_denied_as_expired(self, user, other_user, document):
        """Test an expired share denies with the expired reason."""
        share_with_users(
            document.id,
            user,
            [other_user.id],
            expires_in_hours=1,
        )
        later = timezone.now() + timedelta(hours=2)

        with pytest.raises(ShareExpiredError):
            evaluate_access(document.id, other_user, now=later)

    def test_user_share_beats_link_share(self, user, other_user, document):
        """Test a user share wins over a newer link share."""
        share_with_users(document.id, user, [other_user.id], role='viewer')
        create_or_update_link(document.id, user, role='editor')

        decision = evaluate_access(document.id, other_user)

        assert decision.role == 'viewer'
        assert decision.share.kind == 'user'

    def test_expired_user_share_falls_back_to_link(
        self,
        user,
        other_user,
        document,
    ):
        """Test a live link share grants access when the user share expired."""
        user_share = share_with_users(document.id, user, [other_user.id])[0]
        Share.objects.filter(id=user_share.id).update(
            expires_at=timezone.now() - timedelta(minutes=1),
        )
        link_share, _ = create_or_update_link(document.id, user, role='editor')

        decision = evaluate_access(document.id, other_user)

        assert decision.share == link_share

    def test_unknown_file(self, user):
        """Test unknown files raise DoesNotExist."""
        with pytest.raises(File.DoesNotExist):
            evaluate_access(99999, user)


@pytest.mark.django_db
class TestContentAccess:
    """Tests for require_download, open_for_view and open_for_download."""

    @pytest.fixture
    def stored(self, user, blob_store):
        """Document with content in the mocked bucket.

        Returns:
            File instance.
        """
        key = blob_store.put(b'quarterly numbers', 'text/plain', 'q.txt')
        return File.objects.create(
            owner=user,
            original_name='q.txt',
            mime_type='text/plain',
            size_bytes=17,
            storage_key=key,
        )

    def test_require_download_viewer(self, user, other_user, document):
        """Test viewers are refused downloads."""
        share_with_users(document.id, user, [other_user.id])
        decision = evaluate_access(document.id, other_user)

        with pytest.raises(ViewOnlyError, match='Viewers cannot download'):
            require_download(decision)

    def test_viewer_opens_for_view(self, user, other_user, stored, blob_store):
        """Test viewers can open content and the view is logged."""
        share_with_users(stored.id, user, [other_user.id])

        decision, blob = open_for_view(stored.id, other_user, blob_store)

        with blob:
            assert blob.read() == b'quarterly numbers'
        assert decision.role == 'viewer'
        assert AccessLogEntry.objects.get().action == 'view'

    def test_viewer_download_not_logged(self, user, other_user, stored, blob_store):
        """Test a refused download leaves no log entry."""
        share_with_users(stored.id, user, [other_user.id])

        with pytest.raises(ViewOnlyError):
            open_for_download(stored.id, other_user, blob_store)

        assert AccessLogEntry.objects.count() == 0

    def test_missing_blob_not_logged(
        self,
        user,
        other_user,
        document,
        failing_blob_store,
    ):
        """Test content that cannot be opened leaves no log entry."""
        share_with_users(document.id, user, [other_user.id], role='editor')

        with pytest.raises(FileNotFoundError):
            open_for_view(document.id, other_user, failing_blob_store)
        with pytest.raises(FileNotFoundError):
            open_for_download(document.id, other_user, failing_blob_store)

        assert AccessLogEntry.objects.count() == 0

    def test_owner_download_not_logged(self, user, stored, blob_store):
        """Test owner access is not written to any share log."""
        decision, blob = open_for_download(stored.id, user, blob_store)
        blob.close()

        assert decision.is_owner
        assert AccessLogEntry.objects.count() == 0
