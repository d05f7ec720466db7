"""Unit tests for DynamoDBMetadata repository."""

from collections.abc import Callable
from typing import Any

import pytest
from botocore.exceptions import ClientError

from sim.core.infrastructure.aws.dynamodb_metadata import DynamoDBMetadata
from sim.core.models.errors import (
    DuplicateImageError,
    MetadataOperationFailedError,
    RecordNotFoundError,
)
from sim.core.models.image import ImageRecord


def make_record(image_id: str = "img_1") -> ImageRecord:
    return ImageRecord(
        id=image_id,
        created_at="2024-01-01T10:00:00+00:00",
        etag='"abc"',
        key=f"images/{image_id}/cat.png",
        name="cat.png",
        size_in_bytes=3,
        storage="sim",
        content_type="image/png",
    )


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code}}, operation)


class DummyAdapter:
    """Minimal DynamoDBAdapter stub."""

    put_item: Callable[..., Any]
    get_item: Callable[..., dict[str, Any]]
    delete_item: Callable[..., Any]
    scan: Callable[..., dict[str, Any]]

    def __init__(self) -> None:
        self.put_item = lambda **_: {}
        self.get_item = lambda **_: {}
        self.delete_item = lambda **_: {}
        self.scan = lambda **_: {"Items": []}


class TestDynamoDBMetadata:
    def test_create_record_uses_condition(self) -> None:
        calls: list[dict[str, Any]] = []
        adapter = DummyAdapter()
        adapter.put_item = lambda **kwargs: calls.append(kwargs)

        DynamoDBMetadata(adapter).create_record(record=make_record())

        assert calls[0]["item"]["id"] == "img_1"
        assert calls[0]["condition_expression"] == "attribute_not_exists(id)"

    def test_create_record_duplicate_raises_domain_error(self) -> None:
        def raise_duplicate(**_: Any) -> None:
            raise client_error("ConditionalCheckFailedException", "PutItem")

        adapter = DummyAdapter()
        adapter.put_item = raise_duplicate

        with pytest.raises(DuplicateImageError):
            DynamoDBMetadata(adapter).create_record(record=make_record())

    def test_create_record_other_client_error(self) -> None:
        def raise_client_error(**_: Any) -> None:
            raise client_error("ProvisionedThroughputExceededException", "PutItem")

        adapter = DummyAdapter()
        adapter.put_item = raise_client_error

        with pytest.raises(MetadataOperationFailedError) as exc_info:
            DynamoDBMetadata(adapter).create_record(record=make_record())

        assert exc_info.value.error_code == "METADATA_CREATE_FAILED"

    def test_create_record_unexpected_error(self) -> None:
        def raise_error(**_: Any) -> None:
            raise RuntimeError("connection reset")

        adapter = DummyAdapter()
        adapter.put_item = raise_error

        with pytest.raises(MetadataOperationFailedError):
            DynamoDBMetadata(adapter).create_record(record=make_record())

    def test_get_record_success(self) -> None:
        adapter = DummyAdapter()
        adapter.get_item = lambda **_: {"Item": make_record().model_dump()}

        record = DynamoDBMetadata(adapter).get_record(image_id="img_1")

        assert record == make_record()

    def test_get_record_missing(self) -> None:
        with pytest.raises(RecordNotFoundError) as exc_info:
            DynamoDBMetadata(DummyAdapter()).get_record(image_id="missing")

        assert exc_info.value.details == {"image_id": "missing"}

    def test_get_record_client_error(self) -> None:
        def raise_client_error(**_: Any) -> None:
            raise client_error("InternalServerError", "GetItem")

        adapter = DummyAdapter()
        adapter.get_item = raise_client_error

        with pytest.raises(MetadataOperationFailedError) as exc_info:
            DynamoDBMetadata(adapter).get_record(image_id="img_1")

        assert exc_info.value.error_code == "METADATA_FETCH_FAILED"

    def test_get_record_invalid_format(self) -> None:
        adapter = DummyAdapter()
        adapter.get_item = lambda **_: {"Item": {"id": "img_1"}}

        with pytest.raises(MetadataOperationFailedError) as exc_info:
            DynamoDBMetadata(adapter).get_record(image_id="img_1")

        assert exc_info.value.error_code == "METADATA_INVALID_FORMAT"

    def test_list_records_follows_pages(self) -> None:
        pages = {
            None: {"Items": [make_record("a").model_dump()], "LastEvaluatedKey": {"id": "a"}},
            "a": {"Items": [make_record("b").model_dump()]},
        }
        seen: list[Any] = []

        def scan(**kwargs: Any) -> dict[str, Any]:
            start = kwargs.get("ExclusiveStartKey", {}).get("id")
            seen.append(start)
            return pages[start]

        adapter = DummyAdapter()
        adapter.scan = scan

        records = DynamoDBMetadata(adapter).list_records()

        assert [record.id for record in records] == ["a", "b"]
        assert seen == [None, "a"]

    def test_list_records_empty_raises_not_found(self) -> None:
        with pytest.raises(RecordNotFoundError):
            DynamoDBMetadata(DummyAdapter()).list_records()

    def test_list_records_invalid_page(self) -> None:
        adapter = DummyAdapter()
        adapter.scan = lambda **_: {"Items": "not-a-list"}

        with pytest.raises(MetadataOperationFailedError) as exc_info:
            DynamoDBMetadata(adapter).list_records()

        assert exc_info.value.error_code == "METADATA_LIST_FAILED"

    def test_list_records_client_error(self) -> None:
        def raise_client_error(**_: Any) -> None:
            raise client_error("ResourceNotFoundException", "Scan")

        adapter = DummyAdapter()
        adapter.scan = raise_client_error

        with pytest.raises(MetadataOperationFailedError):
            DynamoDBMetadata(adapter).list_records()

    def test_delete_record_uses_condition(self) -> None:
        calls: list[dict[str, Any]] = []
        adapter = DummyAdapter()
        adapter.delete_item = lambda **kwargs: calls.append(kwargs)

        DynamoDBMetadata(adapter).delete_record(image_id="img_1")

        assert calls == [{"key": {"id": "img_1"}, "condition_expression": "attribute_exists(id)"}]

    def test_delete_record_missing(self) -> None:
        def raise_conditional(**_: Any) -> None:
            raise client_error("ConditionalCheckFailedException", "DeleteItem")

        adapter = DummyAdapter()
        adapter.delete_item = raise_conditional

        with pytest.raises(RecordNotFoundError):
            DynamoDBMetadata(adapter).delete_record(image_id="img_1")

    def test_delete_record_client_error(self) -> None:
        def raise_client_error(**_: Any) -> None:
            raise client_error("InternalServerError", "DeleteItem")

        adapter = DummyAdapter()
        adapter.delete_item = raise_client_error

        with pytest.raises(MetadataOperationFailedError) as exc_info:
            DynamoDBMetadata(adapter).delete_record(image_id="img_1")

        assert exc_info.value.error_code == "METADATA_DELETE_FAILED"


class TestDynamoDBMetadataWithMoto:
    def test_record_lifecycle(self, dynamodb_metadata, dynamodb_get_item) -> None:
        dynamodb_metadata.create_record(record=make_record())

        assert dynamodb_get_item("img_1")["name"] == "cat.png"
        assert dynamodb_metadata.get_record(image_id="img_1") == make_record()
        assert [r.id for r in dynamodb_metadata.list_records()] == ["img_1"]

        with pytest.raises(DuplicateImageError):
            dynamodb_metadata.create_record(record=make_record())

        dynamodb_metadata.delete_record(image_id="img_1")

        assert dynamodb_get_item("img_1") is None

        with pytest.raises(RecordNotFoundError):
            dynamodb_metadata.delete_record(image_id="img_1")

    def test_list_records_empty_table(self, dynamodb_metadata) -> None:
        with pytest.raises(RecordNotFoundError):
            dynamodb_metadata.list_records()
