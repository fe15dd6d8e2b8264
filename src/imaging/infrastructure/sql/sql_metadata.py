"""SQL-backed implementation of ImageMetadataRepository."""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from aws_lambda_powertools import Logger
from sqlalchemy import Connection, Row
from sqlalchemy.exc import SQLAlchemyError

from imaging.infrastructure.adapters.sql_adapter import SQLAdapter
from imaging.models.errors import MetadataOperationFailedError
from imaging.models.identifiers import ImageID
from imaging.models.image import ImageRecord
from imaging.models.values import ImageFormat
from imaging.repositories.metadata_repository import ImageMetadataRepository
from imaging.utils.constants import (
    ERROR_CODE_METADATA_CREATE_FAILED,
    ERROR_CODE_METADATA_DELETE_FAILED,
    ERROR_CODE_METADATA_FETCH_FAILED,
)
from imaging.utils.time import utc_now

logger = Logger(UTC=True)


class SQLImageMetadata(ImageMetadataRepository):
    """SQL-backed metadata storage with error handling.

    All SQLAlchemy errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: SQLAdapter) -> None:
        """Initialize with SQL adapter."""
        self._db = adapter

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Open a transaction; commit on success, roll back on any error."""
        try:
            with self._db.begin() as conn:
                yield conn
        except SQLAlchemyError as exc:
            logger.error("Metadata transaction failed")
            raise MetadataOperationFailedError(
                message="Unable to complete image metadata transaction",
            ) from exc

    def create_record(self, *, record: ImageRecord, tx: Connection) -> None:
        """Insert a record inside an open transaction.

        Raises:
            MetadataOperationFailedError: If the insert fails
        """
        image_id = str(record.id)
        logger.debug("Creating image record", extra={"image_id": image_id})

        try:
            self._db.insert_row(
                tx,
                {
                    "id": record.id,
                    "store_name": record.store_name,
                    "format": record.format.value,
                    "width": record.width,
                    "height": record.height,
                    "size": record.size,
                    "upload_size": record.upload_size,
                    "average_color": record.average_color,
                    "created_at": record.created_at or utc_now(),
                },
            )
        except SQLAlchemyError as exc:
            logger.error("Image record insert failed", extra={"image_id": image_id})
            raise MetadataOperationFailedError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": image_id},
            ) from exc

    def fetch_record(self, *, image_id: ImageID) -> ImageRecord | None:
        """Fetch one record.

        Raises:
            MetadataOperationFailedError: If fetch fails
        """
        records = self.fetch_records(image_ids=[image_id])
        return records[0] if records else None

    def fetch_records(self, *, image_ids: Sequence[ImageID]) -> list[ImageRecord]:
        """Fetch the records that exist among image_ids.

        Raises:
            MetadataOperationFailedError: If fetch fails
        """
        logger.debug("Fetching image records", extra={"count": len(image_ids)})

        try:
            rows = self._db.select_rows(image_ids)
        except SQLAlchemyError as exc:
            logger.error(
                "Image record select failed",
                extra={"image_ids": [str(i) for i in image_ids]},
            )
            raise MetadataOperationFailedError(
                message="Unable to retrieve image metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"count": len(image_ids)},
            ) from exc

        return [self._to_record(row) for row in rows]

    def remove_records(self, *, image_ids: Sequence[ImageID], tx: Connection) -> int:
        """Delete records in one statement.

        Raises:
            MetadataOperationFailedError: If deletion fails
        """
        logger.debug("Removing image records", extra={"count": len(image_ids)})

        try:
            removed = self._db.delete_rows(tx, image_ids)
        except SQLAlchemyError as exc:
            logger.error(
                "Image record delete failed",
                extra={"image_ids": [str(i) for i in image_ids]},
            )
            raise MetadataOperationFailedError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"count": len(image_ids)},
            ) from exc

        logger.info("Image records removed", extra={"count": removed})
        return removed

    @staticmethod
    def _to_record(row: Row[Any]) -> ImageRecord:
        return ImageRecord(
            id=row.id,
            store_name=row.store_name,
            format=ImageFormat(row.format),
            width=row.width,
            height=row.height,
            size=row.size,
            upload_size=row.upload_size,
            average_color=row.average_color,
            created_at=row.created_at,
        )
