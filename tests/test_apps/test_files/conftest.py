"""Shared fixtures for files app tests."""

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile


@pytest.fixture
def make_upload():
    """Factory for uploaded files as Django builds them from multipart.

    Returns:
        Callable (name, content, content_type) -> SimpleUploadedFile.
    """
    def factory(
        name='notes.txt',
        content=b'test file content',
        content_type='text/plain',
    ):
        return SimpleUploadedFile(name, content, content_type=content_type)

    return factory
