"""Upload limits, share links and API token settings."""

from server.settings.components import config

# Upload limits
DOCUFLOW_MAX_UPLOAD_SIZE = config(
    'DOCUFLOW_MAX_UPLOAD_SIZE',
    cast=int,
    default=10 * 1024 * 1024,
)
DOCUFLOW_MAX_UPLOAD_FILES = config(
    'DOCUFLOW_MAX_UPLOAD_FILES',
    cast=int,
    default=10,
)
DOCUFLOW_ALLOWED_MIME_TYPES = (
    'application/pdf',
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
    'image/svg+xml',
    'text/csv',
    'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'text/plain',
    'application/zip',
    'application/x-zip-compressed',
)

# Base URL of the web client, used to build share links
DOCUFLOW_FRONTEND_URL = config(
    'DOCUFLOW_FRONTEND_URL',
    default='http://localhost:3000',
)

# Bearer tokens
DOCUFLOW_TOKEN_LIFETIME = config(
    'DOCUFLOW_TOKEN_LIFETIME',
    cast=int,
    default=7 * 24 * 60 * 60,
)
DOCUFLOW_TOKEN_ALGORITHM = config(
    'DOCUFLOW_TOKEN_ALGORITHM',
    default='HS256',
)
