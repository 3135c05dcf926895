"""Tests for File model."""

import pytest
from django.db import IntegrityError

from server.apps.files.models import File


@pytest.mark.django_db
def test_file_model_str(user, create_file):
    """Test File __str__ method."""
    file_instance = create_file(user, 'budget.xlsx')

    assert str(file_instance) == f'{user.username}:budget.xlsx'


@pytest.mark.django_db
def test_file_get_extension(user, create_file):
    """Test get_extension returns lowercase extension without dot."""
    file_instance = create_file(user, 'Scan.PDF')

    assert file_instance.get_extension() == 'pdf'


@pytest.mark.django_db
def test_file_get_extension_missing(user, create_file):
    """Test get_extension for a name without extension."""
    file_instance = create_file(user, 'README')

    assert file_instance.get_extension() == ''


@pytest.mark.django_db
def test_file_name_unique_per_owner(user, create_file):
    """Test database rejects a second file with the same owner and name."""
    create_file(user, 'report.pdf')

    with pytest.raises(IntegrityError):
        create_file(user, 'report.pdf', storage_key='other-key')


@pytest.mark.django_db
def test_file_name_not_unique_across_owners(user, other_user, create_file):
    """Test different owners may use the same name."""
    create_file(user, 'report.pdf')
    create_file(other_user, 'report.pdf')

    assert File.objects.filter(original_name='report.pdf').count() == 2


@pytest.mark.django_db
def test_file_default_ordering_newest_first(user, create_file):
    """Test files are ordered newest first."""
    older = create_file(user, 'a.pdf')
    newer = create_file(user, 'b.pdf')

    assert list(File.objects.all()) == [newer, older]


@pytest.mark.django_db
def test_file_cascade_delete_with_user(user, create_file):
    """Test files are deleted when user is deleted."""
    create_file(user, 'report.pdf')

    user.delete()

    assert File.objects.count() == 0
