"""Infrastructure layer for files app.

This package contains integrations with external systems:
- S3-compatible storage backend and the blob store wrapper around it
- Upload validation (MIME allow-list, size and count limits)

Keep infrastructure concerns separate from business logic.
"""
