"""Tests for file registry business logic."""

import pytest
from django.core.exceptions import PermissionDenied

from server.apps.files.exceptions import DuplicateFileNameError
from server.apps.files.logic.file_operations import (
    delete_file,
    find_by_name,
    get_file,
    list_files,
    register_file,
)
from server.apps.files.models import File
from server.apps.sharing.logic.share_operations import (
    create_or_update_link,
    list_shares,
    resolve_link,
    share_with_users,
)
from server.apps.sharing.models import Share


@pytest.mark.django_db
class TestRegisterFile:
    """Tests for register_file function."""

    def test_register_file_success(self, user):
        """Test registering a new file."""
        file_instance = register_file(
            user,
            'report.pdf',
            'application/pdf',
            2048,
            '1700000000000-report.pdf',
        )

        assert file_instance.id is not None
        assert file_instance.owner == user
        assert file_instance.size_bytes == 2048
        assert file_instance.uploaded_at is not None

    def test_register_duplicate_name_fails(self, user, document):
        """Test same owner cannot register the same name twice."""
        with pytest.raises(DuplicateFileNameError) as exc_info:
            register_file(user, 'report.pdf', 'application/pdf', 1, 'k')

        assert exc_info.value.original_name == 'report.pdf'
        assert exc_info.value.uploaded_at == document.uploaded_at
        assert File.objects.count() == 1

    def test_register_same_name_other_owner(self, other_user, document):
        """Test another owner may use the same name."""
        file_instance = register_file(
            other_user,
            'report.pdf',
            'application/pdf',
            1,
            'k',
        )

        assert file_instance.owner == other_user
        assert File.objects.count() == 2

    def test_register_name_is_case_sensitive(self, user, document):
        """Test names differing only in case are distinct."""
        file_instance = register_file(
            user,
            'REPORT.pdf',
            'application/pdf',
            1,
            'k',
        )

        assert file_instance.original_name == 'REPORT.pdf'


@pytest.mark.django_db
class TestLookup:
    """Tests for get_file, find_by_name and list_files."""

    def test_get_file(self, document):
        """Test get_file returns the record."""
        assert get_file(document.id) == document

    def test_get_file_not_found(self):
        """Test get_file raises for unknown IDs."""
        with pytest.raises(File.DoesNotExist):
            get_file(99999)

    def test_find_by_name(self, user, document):
        """Test lookup by exact display name."""
        assert find_by_name(user, 'report.pdf') == document
        assert find_by_name(user, 'Report.pdf') is None

    def test_list_files_newest_first(self, user, create_file):
        """Test list_files orders by upload time descending."""
        first = create_file(user, 'one.pdf')
        second = create_file(user, 'two.pdf')
        third = create_file(user, 'three.pdf')

        assert list(list_files(user)) == [third, second, first]

    def test_list_files_user_isolation(self, user, other_user, create_file):
        """Test list_files only returns the owner's files."""
        mine = create_file(user, 'mine.pdf')
        create_file(other_user, 'theirs.pdf')

        assert list(list_files(user)) == [mine]


@pytest.mark.django_db
class TestDeleteFile:
    """Tests for delete_file function."""

    def test_delete_file_success(self, user, blob_store, mock_s3):
        """Test deletion removes record and blob."""
        key = blob_store.put(b'content', 'text/plain', 'notes.txt')
        file_instance = register_file(user, 'notes.txt', 'text/plain', 7, key)

        delete_file(file_instance.id, user, blob_store)

        assert not File.objects.filter(id=file_instance.id).exists()
        objs = list(mock_s3.Bucket('docuflow-files').objects.filter(
            Prefix=key,
        ))
        assert objs == []

    def test_delete_file_not_owner(self, other_user, document, blob_store):
        """Test non-owners cannot delete."""
        with pytest.raises(PermissionDenied):
            delete_file(document.id, other_user, blob_store)

        assert File.objects.filter(id=document.id).exists()

    def test_delete_file_not_found(self, user, blob_store):
        """Test deleting non-existent file."""
        with pytest.raises(File.DoesNotExist):
            delete_file(99999, user, blob_store)

    def test_delete_file_cascades_shares(
        self,
        user,
        other_user,
        document,
        undeletable_blob_store,
    ):
        """Test deleting a file removes its shares and invalidates links."""
        share_with_users(document.id, user, [other_user.id], role='editor')
        link, _ = create_or_update_link(document.id, user)

        delete_file(document.id, user, undeletable_blob_store)

        assert Share.objects.count() == 0
        with pytest.raises(File.DoesNotExist):
            list_shares(document.id, user)
        with pytest.raises(Share.DoesNotExist):
            resolve_link(link.link_token, other_user)

    def test_delete_file_storage_failure_not_fatal(
        self,
        user,
        document,
        undeletable_blob_store,
    ):
        """Test blob deletion failure still removes the record."""
        delete_file(document.id, user, undeletable_blob_store)

        assert not File.objects.filter(id=document.id).exists()
