"""Shared fixtures for all tests."""

import boto3
import pytest
from django.contrib.auth import get_user_model
from django.core.files.storage import InMemoryStorage
from moto import mock_aws

from server.apps.accounts.logic.token_operations import issue_token
from server.apps.files.infrastructure.storage import BlobStore, FileStorage
from server.apps.files.models import File

User = get_user_model()

_TEST_BUCKET = 'docuflow-files'


class FailingStorage(InMemoryStorage):
    """In-memory storage that refuses blobs with 'broken' in the name."""

    def _save(self, name, content):
        if 'broken' in name:
            raise OSError(f'Storage unavailable for {name}')
        return super()._save(name, content)


class UndeletableStorage(InMemoryStorage):
    """In-memory storage whose deletes always fail."""

    def delete(self, name):
        raise OSError(f'Cannot delete {name}')


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def third_user(db):
    """Create a third test user.

    Returns:
        Third user instance.
    """
    return User.objects.create_user(
        username='thirduser',
        password='testpass123',
        email='third@example.com',
    )


@pytest.fixture
def mock_s3():
    """Mock S3 service with the documents bucket.

    Yields:
        boto3 S3 resource with the bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket=_TEST_BUCKET)
        yield conn


@pytest.fixture
def blob_store(mock_s3):
    """Blob store backed by the mocked S3 bucket.

    Returns:
        BlobStore over a FileStorage instance.
    """
    return BlobStore(FileStorage(
        bucket_name=_TEST_BUCKET,
        access_key='testing',
        secret_key='testing',
        region_name='us-east-1',
        file_overwrite=False,
    ))


@pytest.fixture
def failing_blob_store():
    """Blob store that fails to save names containing 'broken'.

    Returns:
        BlobStore over FailingStorage.
    """
    return BlobStore(FailingStorage())


@pytest.fixture
def undeletable_blob_store():
    """Blob store whose deletes fail.

    Returns:
        BlobStore over UndeletableStorage.
    """
    return BlobStore(UndeletableStorage())


@pytest.fixture
def create_file(db):
    """Factory creating File records without touching storage.

    Returns:
        Callable (owner, name, **fields) -> File.
    """
    def factory(owner, original_name='report.pdf', **fields):
        defaults = {
            'mime_type': 'application/pdf',
            'size_bytes': 100,
            'storage_key': f'1700000000000-{original_name}',
        }
        defaults.update(fields)
        return File.objects.create(
            owner=owner,
            original_name=original_name,
            **defaults,
        )

    return factory


@pytest.fixture
def document(user, create_file):
    """PDF owned by the test user.

    Returns:
        File instance.
    """
    return create_file(user, 'report.pdf')


@pytest.fixture
def auth_header():
    """Build an Authorization header for the Django test client.

    Returns:
        Callable (user) -> dict of client kwargs.
    """
    def build(user):
        return {'HTTP_AUTHORIZATION': f'Bearer {issue_token(user)}'}

    return build


@pytest.fixture
def api_storage(settings, mock_s3):
    """Point the default storage used by views at the mocked bucket.

    Returns:
        boto3 S3 resource of the mocked service.
    """
    settings.STORAGES = {
        **settings.STORAGES,
        'default': {
            'BACKEND': 'server.apps.files.infrastructure.storage.FileStorage',
            'OPTIONS': {
                'bucket_name': _TEST_BUCKET,
                'access_key': 'testing',
                'secret_key': 'testing',
                'region_name': 'us-east-1',
                'file_overwrite': False,
            },
        },
    }
    return mock_s3
