"""Abstract contract for image metadata persistence."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import AbstractContextManager
from typing import Any

from imaging.models.identifiers import ImageID
from imaging.models.image import ImageRecord

# Opaque transaction handle passed back into repository calls.
Transaction = Any


class ImageMetadataRepository(ABC):
    """Contract for storing and retrieving image records.

    Implementations could be SQLite, PostgreSQL, MySQL, etc.
    Handlers depend on this interface, not the implementation.
    """

    @abstractmethod
    def transaction(self) -> AbstractContextManager[Transaction]:
        """Open a transaction.

        The transaction commits when the block exits normally and rolls
        back when it raises.
        """

    @abstractmethod
    def create_record(self, *, record: ImageRecord, tx: Transaction) -> None:
        """Insert a record inside an open transaction.

        Raises:
            MetadataOperationFailedError: If the insert fails
        """

    @abstractmethod
    def fetch_record(self, *, image_id: ImageID) -> ImageRecord | None:
        """Fetch one record.

        Returns:
            The record or None if not found

        Raises:
            MetadataOperationFailedError: If the fetch fails
        """

    @abstractmethod
    def fetch_records(self, *, image_ids: Sequence[ImageID]) -> list[ImageRecord]:
        """Fetch the records that exist among image_ids.

        Raises:
            MetadataOperationFailedError: If the fetch fails
        """

    @abstractmethod
    def remove_records(self, *, image_ids: Sequence[ImageID], tx: Transaction) -> int:
        """Delete records in a single statement inside an open transaction.

        Returns:
            Number of rows removed

        Raises:
            MetadataOperationFailedError: If deletion fails
        """

