"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_BAD_URL = "BAD_IMAGE_URL"
ERROR_CODE_IMAGE_FORMAT_UNSUPPORTED = "IMAGE_FORMAT_UNSUPPORTED"
ERROR_CODE_IMAGE_FIT_UNSUPPORTED = "IMAGE_FIT_UNSUPPORTED"
ERROR_CODE_INVALID_SIGNATURE = "INVALID_SIGNATURE"
ERROR_CODE_IMAGE_DECODE_FAILED = "IMAGE_DECODE_FAILED"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
ERROR_CODE_TOO_MANY_IMAGES = "TOO_MANY_IMAGES"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"

# Store Errors
ERROR_CODE_STORE_NOT_REGISTERED = "STORE_NOT_REGISTERED"
ERROR_CODE_STORE_ALREADY_REGISTERED = "STORE_ALREADY_REGISTERED"
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_IMAGE_SAVE_FAILED = "IMAGE_SAVE_FAILED"
ERROR_CODE_IMAGE_READ_FAILED = "IMAGE_READ_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"

# Cache Errors
ERROR_CODE_CACHE = "CACHE_ERROR"

# Metadata Errors
ERROR_CODE_METADATA_OPERATION_FAILED = "METADATA_OPERATION_FAILED"
ERROR_CODE_METADATA_CREATE_FAILED = "METADATA_CREATE_FAILED"
ERROR_CODE_METADATA_FETCH_FAILED = "METADATA_FETCH_FAILED"
ERROR_CODE_METADATA_DELETE_FAILED = "METADATA_DELETE_FAILED"
ERROR_CODE_METADATA_INVALID_STATE = "METADATA_INVALID_STATE"


# ============================================================================
# Image Formats
# ============================================================================

FORMAT_MIME_TYPE_MAP: Final[dict[str, str]] = {
    "jpeg": "image/jpeg",
    "webp": "image/webp",
    "png": "image/png",
}

# Pillow format names for each supported format.
FORMAT_PIL_NAME_MAP: Final[dict[str, str]] = {
    "jpeg": "JPEG",
    "webp": "WEBP",
    "png": "PNG",
}

# Pillow format names that are decoded as one of the supported formats.
# Pillow reports camera JPEGs that carry an MPF segment as "MPO".
PIL_FORMAT_ALIASES: Final[dict[str, str]] = {
    "MPO": "jpeg",
}

JPEG_QUALITY = 85
WEBP_QUALITY = 80

# ============================================================================
# Storage Layout
# ============================================================================

DISK_STORE_NAME = "disk"
S3_STORE_NAME = "s3"

# Separates the filename stem from the size/fit suffixes of a cached variant.
# Original files never contain it.
VARIANT_SEPARATOR = "_"

SHARD_PREFIX_LENGTH = 2

# ============================================================================
# Average Color Sampling
# ============================================================================

COLOR_SAMPLES_PER_AXIS = 100

# ============================================================================
# Defaults
# ============================================================================

DEFAULT_MAX_IMAGE_SIZE = 25 * 1024 * 1024  # 25MB in bytes
DEFAULT_MAX_IMAGES_PER_POST = 10
DEFAULT_IMAGES_FOLDER_PATH = "./images"
DEFAULT_IMAGE_URL_PREFIX = "/images/"
DEFAULT_DATABASE_URL = "sqlite:///images.db"

METADATA_TABLE_NAME = "images"

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"
IMAGE_CACHE_CONTROL = "public, max-age=31536000, immutable"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_IMAGES_ENABLED = "IMAGES_ENABLED"
ENV_IMAGES_FOLDER_PATH = "IMAGES_FOLDER_PATH"
ENV_HMAC_SECRET = "IMAGES_HMAC_SECRET"
ENV_MAX_IMAGE_SIZE = "MAX_IMAGE_SIZE"
ENV_MAX_IMAGES_PER_POST = "MAX_IMAGES_PER_POST"
ENV_CACHE_ENABLED = "IMAGE_CACHE_ENABLED"
ENV_SKIP_PROCESSING = "IMAGE_SKIP_PROCESSING"
ENV_IMAGE_URL_PREFIX = "IMAGE_URL_PREFIX"
ENV_DATABASE_URL = "IMAGE_DATABASE_URL"

ENV_S3_ENABLED = "S3_ENABLED"
ENV_S3_REGION = "S3_REGION"
ENV_S3_BUCKET = "S3_BUCKET"
ENV_S3_ACCESS_KEY = "S3_ACCESS_KEY"
ENV_S3_SECRET_KEY = "S3_SECRET_KEY"
ENV_S3_ENDPOINT = "S3_ENDPOINT"
ENV_S3_PATH_PREFIX = "S3_PATH_PREFIX"

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb(max_size: int = DEFAULT_MAX_IMAGE_SIZE) -> int:
    """Get maximum file size in megabytes."""
    return max_size // (1024 * 1024)
