"""Abstract contract for image object storage."""

from abc import ABC, abstractmethod
from typing import BinaryIO

from sim.core.models.image import StoredObject


class ImageStorageRepository(ABC):
    """Contract for storing and retrieving image objects.

    Implementations could be S3, GCS, local disk, etc.
    Services depend on this interface, not the implementation.
    """

    @property
    @abstractmethod
    def storage_name(self) -> str:
        """Name of the storage container, i.e. the S3 bucket."""

    @abstractmethod
    def upload_image(self, *, key: str, body: BinaryIO, content_type: str) -> None:
        """Upload an image stream under the given key.

        Args:
            key: Object key
            body: Readable binary stream with the image content
            content_type: MIME type recorded on the object

        Raises:
            StorageError: If upload fails
        """

    @abstractmethod
    def head_image(self, *, key: str) -> StoredObject:
        """Return the ETag and size of a stored object.

        Raises:
            ObjectNotFoundError: If the object doesn't exist
            StorageError: If the lookup fails or the response is incomplete
        """

    @abstractmethod
    def download_image(self, *, key: str, stream: BinaryIO) -> int:
        """Stream an object into a writable binary stream.

        Args:
            key: Object key
            stream: Writable binary stream receiving the content

        Returns:
            Number of bytes written

        Raises:
            ObjectNotFoundError: If the object doesn't exist
            StorageError: If download fails
        """

    @abstractmethod
    def remove_image(self, *, key: str) -> None:
        """Delete an object by key. A missing object is not an error.

        Raises:
            StorageError: If deletion fails
        """
