"""Abstract contract for original image byte storage."""

from abc import ABC, abstractmethod

from imaging.models.image import ImageRecord


class ImageStore(ABC):
    """Contract for a named backend that durably stores original images.

    Implementations could be local disk, S3, GCS, etc. Each store is
    identified by a name that must be unique within the running process;
    the name is recorded on every ImageRecord saved through it.
    Stores derive object locations from the record's id and format only.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Process-unique identifier of the store."""

    @abstractmethod
    def get(self, record: ImageRecord) -> bytes:
        """Read the original bytes of an image.

        Args:
            record: Image record whose bytes are requested

        Returns:
            The stored image bytes

        Raises:
            NotFoundError: If no object exists for the record
            StorageError: If the read fails for any other reason
        """

    @abstractmethod
    def save(self, record: ImageRecord, data: bytes) -> None:
        """Write the original bytes of an image.

        Args:
            record: Image record the bytes belong to
            data: Encoded image bytes

        Raises:
            StorageError: If the write fails
        """

    @abstractmethod
    def delete(self, record: ImageRecord) -> None:
        """Remove the original bytes of an image.

        Deleting an absent object succeeds.

        Raises:
            StorageError: If deletion fails
        """
