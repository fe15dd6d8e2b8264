"""S3-backed implementation of ImageStore."""

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from imaging.infrastructure.adapters.s3_adapter import S3AdapterProtocol
from imaging.infrastructure.storage.paths import original_path
from imaging.models.errors import NotFoundError, StorageError
from imaging.models.image import ImageRecord
from imaging.repositories.storage_repository import ImageStore
from imaging.utils.constants import (
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_READ_FAILED,
    ERROR_CODE_IMAGE_SAVE_FAILED,
    S3_STORE_NAME,
)

logger = Logger(UTC=True)

_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class S3Store(ImageStore):
    """Image store backed by an S3-compatible object storage service."""

    def __init__(self, adapter: S3AdapterProtocol, *, path_prefix: str = "") -> None:
        """Create storage using the provided S3 adapter."""
        self._s3 = adapter
        self._prefix = path_prefix.strip("/")

    @property
    def name(self) -> str:
        return S3_STORE_NAME

    def object_key(self, record: ImageRecord) -> str:
        key = original_path(record.id, record.format)
        if self._prefix:
            return f"{self._prefix}/{key}"
        return key

    def get(self, record: ImageRecord) -> bytes:
        key = self.object_key(record)
        logger.debug("Downloading image", extra={"key": key})

        try:
            response = self._s3.get_object(key=key)
            return response["Body"].read()

        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in _MISSING_KEY_CODES:
                raise NotFoundError(
                    message="Image not found",
                    details={"image_id": str(record.id)},
                ) from exc

            logger.error("S3 download failed", extra={"key": key})
            raise StorageError(
                message="Unable to read image at this time",
                error_code=ERROR_CODE_IMAGE_READ_FAILED,
                details={"image_id": str(record.id)},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error downloading image")
            raise StorageError(
                message="Unable to read image at this time",
                error_code=ERROR_CODE_IMAGE_READ_FAILED,
                details={"image_id": str(record.id)},
            ) from exc

    def save(self, record: ImageRecord, data: bytes) -> None:
        key = self.object_key(record)
        logger.debug("Uploading image", extra={"key": key, "size": len(data)})

        try:
            self._s3.put_object(key=key, body=data, content_type=record.format.mime_type)
            logger.info("Image uploaded successfully", extra={"key": key})

        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise StorageError(
                message="Unable to save image at this time",
                error_code=ERROR_CODE_IMAGE_SAVE_FAILED,
                details={"image_id": str(record.id)},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error uploading image")
            raise StorageError(
                message="Unable to save image at this time",
                error_code=ERROR_CODE_IMAGE_SAVE_FAILED,
                details={"image_id": str(record.id)},
            ) from exc

    def delete(self, record: ImageRecord) -> None:
        # S3 DeleteObject succeeds for absent keys.
        key = self.object_key(record)
        logger.debug("Deleting image", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
            logger.info("Image deleted successfully", extra={"key": key})

        except ClientError as exc:
            logger.error("S3 deletion failed", extra={"key": key})
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"image_id": str(record.id)},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting image")
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"image_id": str(record.id)},
            ) from exc
