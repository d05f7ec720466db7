"""Abstract contracts for image record persistence."""

from abc import ABC, abstractmethod

from sim.core.models.image import ImageRecord


class ImageRecordReader(ABC):
    """Contract for reading image records from the metadata store.

    Implementations could be DynamoDB, Couchbase, MongoDB, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def get_record(self, *, image_id: str) -> ImageRecord:
        """Fetch a single image record by id.

        Args:
            image_id: Unique image identifier

        Returns:
            The stored image record

        Raises:
            RecordNotFoundError: If no record exists for the id
            MetadataOperationFailedError: If the fetch fails
        """

    @abstractmethod
    def list_records(self) -> list[ImageRecord]:
        """List every image record in the store.

        This is a full scan which can be slow with many records.

        Returns:
            List of image records

        Raises:
            RecordNotFoundError: If the store holds no records
            MetadataOperationFailedError: If the listing fails
        """


class ImageRecordWriter(ABC):
    """Contract for writing image records to the metadata store."""

    @abstractmethod
    def create_record(self, *, record: ImageRecord) -> None:
        """Persist a new image record.

        Args:
            record: Record to insert

        Raises:
            DuplicateImageError: If a record with the same id exists
            MetadataOperationFailedError: If creation fails for other reasons
        """

    @abstractmethod
    def delete_record(self, *, image_id: str) -> None:
        """Remove an image record.

        Args:
            image_id: Unique image identifier

        Raises:
            RecordNotFoundError: If no record exists for the id
            MetadataOperationFailedError: If deletion fails
        """


class ImageMetadataRepository(ImageRecordReader, ImageRecordWriter, ABC):
    """Read/write contract implemented by every metadata backend."""
