"""Business logic for image deletion.

This module deletes a batch of images. Store objects are removed first,
then cached variants, then the metadata rows in a single statement.
"""

from collections.abc import Sequence

from aws_lambda_powertools import Logger

from imaging.models.errors import CacheError
from imaging.models.identifiers import ImageID
from imaging.models.image import ImageRecord
from imaging.runtime import ImageRuntime, get_runtime

logger = Logger(UTC=True)


class DeleteService:
    """Application service responsible for deleting images.

    This service orchestrates:
    - Resolving the store of every image in the batch
    - Deletion of the stored bytes
    - Best-effort purge of cached variants
    - Removal of the metadata rows

    It does not perform low-level infrastructure operations directly.
    """

    def __init__(self, runtime: ImageRuntime | None = None) -> None:
        self.runtime = runtime or get_runtime()

    def delete_images(self, image_ids: Sequence[ImageID]) -> list[ImageRecord]:
        """Delete a batch of images.

        Ids without a record are already gone and are skipped. A store error
        aborts the whole batch before any metadata row is removed; objects
        deleted earlier in the batch stay deleted and the caller must retry
        the full batch.

        Returns:
            Records of the deleted images

        Raises:
            StoreNotRegisteredError: If a record names an unknown store
            StorageError: If a stored object cannot be deleted
            MetadataOperationFailedError: If records cannot be read or removed
        """
        metadata = self.runtime.metadata
        records = metadata.fetch_records(image_ids=image_ids)

        logger.debug(
            "Starting image deletion",
            extra={"requested": len(image_ids), "found": len(records)},
        )

        for record in records:
            store = self.runtime.stores.match(record.store_name)
            store.delete(record)

        for record in records:
            self._purge_cache(record)

        if records:
            with metadata.transaction() as tx:
                removed = metadata.remove_records(
                    image_ids=[record.id for record in records],
                    tx=tx,
                )
            logger.info("Images deleted", extra={"count": removed})

        return records

    def _purge_cache(self, record: ImageRecord) -> None:
        try:
            removed = self.runtime.cache.purge(record.id)
        except CacheError as exc:
            logger.error(
                "Failed to purge cached variants",
                extra={"image_id": str(record.id), "details": exc.details},
            )
            return

        logger.debug(
            "Purged cached variants",
            extra={"image_id": str(record.id), "removed": removed},
        )
