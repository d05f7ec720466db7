"""
Pytest configuration and fixtures for sim tests.
Provides AWS mocking, DynamoDB and S3 fixtures with proper cleanup.
"""

from collections.abc import Callable
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from sim.core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from sim.core.infrastructure.adapters.s3_adapter import S3Adapter
from sim.core.infrastructure.aws.dynamodb_metadata import DynamoDBMetadata
from sim.core.infrastructure.aws.s3_image_storage import S3ImageStorage
from sim.core.models.config import AppConfig
from sim.core.models.context import CommandContext
from sim.core.utils.response import ResponseBuilder

TEST_REGION = "us-east-1"
TEST_BUCKET = "sim"
TEST_TABLE = "sim-images"


@pytest.fixture(autouse=True)
def aws_env(monkeypatch) -> dict[str, str]:
    """Environment every test runs with: fake credentials and DynamoDB backend."""
    env = {
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_SECURITY_TOKEN": "testing",
        "AWS_SESSION_TOKEN": "testing",
        "AWS_DEFAULT_REGION": TEST_REGION,
        "REGION": TEST_REGION,
        "STORAGE": TEST_BUCKET,
        "TABLE_NAME": TEST_TABLE,
        "METADATA_BACKEND": "dynamodb",
    }
    for name, value in env.items():
        monkeypatch.setenv(name, value)

    for name in ("LOCALSTACK_URL", "DEBUG", "LOG_LEVEL", "AWS_ENDPOINT_URL"):
        monkeypatch.delenv(name, raising=False)

    return env


@pytest.fixture
def app_config(aws_env) -> AppConfig:
    return AppConfig.from_env()


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=TEST_REGION)


def _create_dynamodb_table(dynamodb_resource):
    """Helper to create the records table keyed by id."""
    return dynamodb_resource.create_table(
        TableName=TEST_TABLE,
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
    )


@pytest.fixture(scope="function")
def dynamodb_table(dynamodb_resource):
    """
    Create the DynamoDB table for testing.

    moto discards the table when the mock context exits.
    """
    try:
        table = dynamodb_resource.Table(TEST_TABLE)
        table.load()
    except ClientError:
        table = _create_dynamodb_table(dynamodb_resource)
        table.wait_until_exists()

    return table


@pytest.fixture
def dynamodb_put_item(dynamodb_table) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """
    Helper to insert a single item into DynamoDB.

    Usage:
        item = dynamodb_put_item({"id": "img_1", "name": "cat.png"})
    """

    def _put(item: dict[str, Any]) -> dict[str, Any]:
        dynamodb_table.put_item(Item=item)
        return item

    return _put


@pytest.fixture
def dynamodb_get_item(dynamodb_table) -> Callable[[str], dict[str, Any] | None]:
    """Helper to get a single item from DynamoDB by id."""

    def _get(image_id: str) -> dict[str, Any] | None:
        response: dict[str, Any] = dynamodb_table.get_item(Key={"id": image_id})
        item: dict[str, Any] | None = response.get("Item")
        return item

    return _get


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=TEST_REGION)


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """Create the S3 bucket for testing."""
    try:
        s3_client.head_bucket(Bucket=TEST_BUCKET)
    except ClientError:
        s3_client.create_bucket(Bucket=TEST_BUCKET)

    return s3_client


@pytest.fixture
def s3_put_object(s3_bucket) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        response = s3_put_object("images/img_1/cat.png", image_bytes, "image/png")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        return s3_bucket.put_object(
            Bucket=TEST_BUCKET, Key=key, Body=body, ContentType=content_type
        )

    return _put


@pytest.fixture
def s3_get_object(s3_bucket) -> Callable[[str], bytes]:
    """
    Helper to get an object body from S3.

    Usage:
        content = s3_get_object("images/img_1/cat.png")
    """

    def _get(key: str) -> bytes:
        response: dict[str, Any] = s3_bucket.get_object(Bucket=TEST_BUCKET, Key=key)
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def s3_storage(app_config, s3_bucket) -> S3ImageStorage:
    return S3ImageStorage(S3Adapter(app_config))


@pytest.fixture
def dynamodb_metadata(app_config, dynamodb_table) -> DynamoDBMetadata:
    return DynamoDBMetadata(DynamoDBAdapter(app_config))


@pytest.fixture
def command_context(app_config, s3_storage, dynamodb_metadata) -> CommandContext:
    """Context wired to moto-backed S3 and DynamoDB."""
    return CommandContext(
        config=app_config,
        storage=s3_storage,
        metadata=dynamodb_metadata,
        output=ResponseBuilder(),
    )


@pytest.fixture
def sample_record_item() -> dict[str, Any]:
    """Single stored image record for testing."""
    return {
        "id": "0b7c8c43-4a0e-4bb1-a5a7-1a2f3f4c5d6e",
        "created_at": "2024-01-01T10:00:00+00:00",
        "etag": '"9a0364b9e99bb480dd25e1f0284c8555"',
        "key": "images/0b7c8c43-4a0e-4bb1-a5a7-1a2f3f4c5d6e/cat.png",
        "name": "cat.png",
        "size_in_bytes": 7,
        "storage": TEST_BUCKET,
        "content_type": "image/png",
    }


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    import base64

    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)


@pytest.fixture
def sample_image_file(tmp_path, sample_image_binary):
    """PNG written to a temporary file."""
    path = tmp_path / "cat.png"
    path.write_bytes(sample_image_binary)
    return path
