"""Global constants used throughout the application.

This module centralizes the string literals, error codes and configuration
keys that are shared by the CLI, the services and the storage backends.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation / Configuration Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_CONFIGURATION = "CONFIGURATION_ERROR"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
ERROR_CODE_OBJECT_NOT_FOUND = "OBJECT_NOT_FOUND"

# Storage Errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_IMAGE_HEAD_FAILED = "IMAGE_HEAD_FAILED"
ERROR_CODE_IMAGE_DOWNLOAD_FAILED = "IMAGE_DOWNLOAD_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"
ERROR_CODE_IMAGE_DUPLICATE_IMAGE = "DUPLICATE_IMAGE_ERROR"

# Metadata Errors
ERROR_CODE_METADATA_OPERATION_FAILED = "METADATA_OPERATION_FAILED"
ERROR_CODE_METADATA_CREATE_FAILED = "METADATA_CREATE_FAILED"
ERROR_CODE_METADATA_FETCH_FAILED = "METADATA_FETCH_FAILED"
ERROR_CODE_METADATA_DELETE_FAILED = "METADATA_DELETE_FAILED"
ERROR_CODE_METADATA_LIST_FAILED = "METADATA_LIST_FAILED"
ERROR_CODE_METADATA_INVALID_FORMAT = "METADATA_INVALID_FORMAT"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# Object Storage
# ============================================================================

IMAGE_KEY_PREFIX: Final[str] = "images"
OBJECT_ACL: Final[str] = "private"
DEFAULT_CONTENT_TYPE: Final[str] = "application/octet-stream"

# S3 error codes that mean the object is gone. download_fileobj goes through
# HeadObject, which reports a bare "404".
S3_NOT_FOUND_CODES: Final[frozenset[str]] = frozenset({"NoSuchKey", "NotFound", "404"})

# Bytes read from the head of an upload to sniff its content type
MIME_SNIFF_LENGTH = 16


# ============================================================================
# Metadata Storage
# ============================================================================

METADATA_BACKEND_DYNAMODB = "dynamodb"
METADATA_BACKEND_COUCHBASE = "couchbase"
METADATA_BACKENDS: Final[frozenset[str]] = frozenset(
    {METADATA_BACKEND_DYNAMODB, METADATA_BACKEND_COUCHBASE}
)

RECORD_PARTITION_KEY = "id"
DB_TIMEOUT_SECONDS = 3
COUCHBASE_DEFAULT_SCOPE = "_default"
COUCHBASE_DEFAULT_COLLECTION = "_default"


# ============================================================================
# LocalStack
# ============================================================================

LOCALSTACK_ACCESS_KEY_ID = "images"
LOCALSTACK_SECRET_ACCESS_KEY = "secret"


# ============================================================================
# Logging
# ============================================================================

SERVICE_NAME = "sim"
DEFAULT_LOG_LEVEL = "WARNING"


# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_DEBUG = "DEBUG"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOCALSTACK_URL = "LOCALSTACK_URL"
ENV_REGION = "REGION"
ENV_STORAGE = "STORAGE"
ENV_METADATA_BACKEND = "METADATA_BACKEND"
ENV_TABLE_NAME = "TABLE_NAME"
ENV_COUCHBASE_ENDPOINT = "COUCHBASE_ENDPOINT"
ENV_COUCHBASE_USERNAME = "COUCHBASE_USERNAME"
ENV_COUCHBASE_PASSWORD = "COUCHBASE_PASSWORD"
ENV_COUCHBASE_BUCKET = "COUCHBASE_BUCKET"
ENV_COUCHBASE_SCOPE = "COUCHBASE_SCOPE"
ENV_COUCHBASE_COLLECTION = "COUCHBASE_COLLECTION"


# ============================================================================
# Helper Functions
# ============================================================================


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
