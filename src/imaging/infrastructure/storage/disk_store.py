"""Local filesystem implementation of ImageStore."""

import os
import tempfile
from pathlib import Path

from aws_lambda_powertools import Logger

from imaging.infrastructure.storage.paths import original_path
from imaging.models.errors import NotFoundError, StorageError
from imaging.models.image import ImageRecord
from imaging.repositories.storage_repository import ImageStore
from imaging.utils.constants import (
    DISK_STORE_NAME,
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_READ_FAILED,
    ERROR_CODE_IMAGE_SAVE_FAILED,
)

logger = Logger(UTC=True)


def write_file_atomic(path: Path, data: bytes) -> None:
    """Write data to path through a temporary sibling file and a rename.

    Readers never observe a partially written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class DiskStore(ImageStore):
    """Stores images under a root directory, sharded by id-derived folders."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def name(self) -> str:
        return DISK_STORE_NAME

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, record: ImageRecord) -> Path:
        return self._root / original_path(record.id, record.format)

    def get(self, record: ImageRecord) -> bytes:
        path = self.path_for(record)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFoundError(
                message="Image not found",
                details={"image_id": str(record.id)},
            ) from exc
        except OSError as exc:
            logger.error("Disk read failed", extra={"image_id": str(record.id)})
            raise StorageError(
                message="Unable to read image at this time",
                error_code=ERROR_CODE_IMAGE_READ_FAILED,
                details={"image_id": str(record.id)},
            ) from exc

    def save(self, record: ImageRecord, data: bytes) -> None:
        path = self.path_for(record)
        logger.debug(
            "Saving image to disk",
            extra={"image_id": str(record.id), "size": len(data)},
        )
        try:
            write_file_atomic(path, data)
        except OSError as exc:
            logger.error("Disk write failed", extra={"image_id": str(record.id)})
            raise StorageError(
                message="Unable to save image at this time",
                error_code=ERROR_CODE_IMAGE_SAVE_FAILED,
                details={"image_id": str(record.id)},
            ) from exc

    def delete(self, record: ImageRecord) -> None:
        path = self.path_for(record)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.error("Disk delete failed", extra={"image_id": str(record.id)})
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"image_id": str(record.id)},
            ) from exc
        logger.info("Image deleted from disk", extra={"image_id": str(record.id)})
