"""Custom exception classes for the image service."""

from typing import Any

from imaging.utils.constants import (
    ERROR_CODE_BAD_URL,
    ERROR_CODE_CACHE,
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_IMAGE_DECODE_FAILED,
    ERROR_CODE_IMAGE_FIT_UNSUPPORTED,
    ERROR_CODE_IMAGE_FORMAT_UNSUPPORTED,
    ERROR_CODE_INVALID_SIGNATURE,
    ERROR_CODE_METADATA_OPERATION_FAILED,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_STORAGE,
    ERROR_CODE_STORE_ALREADY_REGISTERED,
    ERROR_CODE_STORE_NOT_REGISTERED,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageServiceError(Exception):
    """
    Base exception for all image service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(ImageServiceError):
    """Raised when request validation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class BadURLError(ValidationError):
    """Raised when an image request URL cannot be parsed."""

    def __init__(
        self,
        *,
        message: str = "Bad image request URL",
        error_code: str = ERROR_CODE_BAD_URL,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ImageFormatUnsupportedError(ValidationError):
    """Raised when an image format is not one of jpeg, webp or png."""

    def __init__(
        self,
        *,
        message: str = "Image format not supported",
        error_code: str = ERROR_CODE_IMAGE_FORMAT_UNSUPPORTED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ImageFitUnsupportedError(ValidationError):
    """Raised when an image fit is not one of cover or contain."""

    def __init__(
        self,
        *,
        message: str = "Invalid image fit",
        error_code: str = ERROR_CODE_IMAGE_FIT_UNSUPPORTED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class InvalidSignatureError(ValidationError):
    """Raised when an image request signature does not match its parameters."""

    def __init__(
        self,
        *,
        message: str = "Invalid image request signature",
        error_code: str = ERROR_CODE_INVALID_SIGNATURE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ImageDecodeError(ValidationError):
    """Raised when uploaded bytes are not a readable image."""

    def __init__(
        self,
        *,
        message: str = "Invalid image data",
        error_code: str = ERROR_CODE_IMAGE_DECODE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class FileSizeError(ValidationError):
    """Raised when file size exceeds the allowed limit."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_FILE_SIZE_EXCEEDED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NotFoundError(ImageServiceError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class StoreNotRegisteredError(ImageServiceError):
    """Raised when a record names a store that is not running in this process."""

    def __init__(
        self,
        *,
        message: str = "Store not registered",
        error_code: str = ERROR_CODE_STORE_NOT_REGISTERED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class DuplicateStoreError(ImageServiceError):
    """Raised when a store name is registered twice."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORE_ALREADY_REGISTERED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class StorageError(ImageServiceError):
    """Raised when an image store operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class CacheError(ImageServiceError):
    """Raised when a derived-variant cache operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_CACHE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MetadataOperationFailedError(ImageServiceError):
    """Raised when an image metadata operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_METADATA_OPERATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
