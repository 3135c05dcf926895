"""Business logic layer for files app.

This package contains the file registry and batch upload processing.
Access decisions for non-owners live in the sharing app.

All business logic should be implemented here, separate from
models (data layer) and infrastructure (external systems).
"""
