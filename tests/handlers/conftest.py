import io
from typing import BinaryIO

import pytest

from sim.core.models.errors import DuplicateImageError, ObjectNotFoundError, RecordNotFoundError
from sim.core.models.image import ImageRecord, StoredObject
from sim.core.repositories.metadata_repository import ImageMetadataRepository
from sim.core.repositories.storage_repository import ImageStorageRepository


class InMemoryStorage(ImageStorageRepository):
    """Object storage kept in a dict, keyed like S3."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}

    @property
    def storage_name(self) -> str:
        return "memory"

    def upload_image(self, *, key: str, body: BinaryIO, content_type: str) -> None:
        self.objects[key] = body.read()
        self.content_types[key] = content_type

    def head_image(self, *, key: str) -> StoredObject:
        if key not in self.objects:
            raise ObjectNotFoundError(details={"key": key})
        return StoredObject(etag=f'"{len(self.objects[key])}"', content_length=len(self.objects[key]))

    def download_image(self, *, key: str, stream: BinaryIO) -> int:
        if key not in self.objects:
            raise ObjectNotFoundError(details={"key": key})
        return stream.write(self.objects[key])

    def remove_image(self, *, key: str) -> None:
        self.objects.pop(key, None)


class InMemoryMetadata(ImageMetadataRepository):
    """Metadata store kept in a dict, keyed by image id."""

    def __init__(self) -> None:
        self.records: dict[str, ImageRecord] = {}

    def create_record(self, *, record: ImageRecord) -> None:
        if record.id in self.records:
            raise DuplicateImageError(message="exists", details={"image_id": record.id})
        self.records[record.id] = record

    def get_record(self, *, image_id: str) -> ImageRecord:
        try:
            return self.records[image_id]
        except KeyError:
            raise RecordNotFoundError(details={"image_id": image_id}) from None

    def list_records(self) -> list[ImageRecord]:
        if not self.records:
            raise RecordNotFoundError()
        return list(self.records.values())

    def delete_record(self, *, image_id: str) -> None:
        if self.records.pop(image_id, None) is None:
            raise RecordNotFoundError(details={"image_id": image_id})


@pytest.fixture
def memory_storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def memory_metadata() -> InMemoryMetadata:
    return InMemoryMetadata()


@pytest.fixture
def stored_image(memory_storage, memory_metadata) -> ImageRecord:
    """An image present in both the in-memory storage and metadata store."""
    record = ImageRecord(
        id="img_1",
        created_at="2024-01-01T10:00:00+00:00",
        etag='"3"',
        key="images/img_1/cat.png",
        name="cat.png",
        size_in_bytes=3,
        storage="memory",
        content_type="image/png",
    )
    memory_storage.upload_image(key=record.key, body=io.BytesIO(b"abc"), content_type="image/png")
    memory_metadata.create_record(record=record)
    return record
