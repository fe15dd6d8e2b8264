"""
Pytest configuration and fixtures for image service tests.
Provides AWS mocking, S3 and SQLite fixtures, sample images and a
ready-wired runtime with proper cleanup.
"""

import io
import os
from collections.abc import Callable
from typing import Any

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageService")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-service")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

from imaging.infrastructure.adapters.s3_adapter import S3Adapter
from imaging.infrastructure.adapters.sql_adapter import SQLAdapter
from imaging.infrastructure.sql.sql_metadata import SQLImageMetadata
from imaging.models.identifiers import ImageID
from imaging.models.image import ImageRecord
from imaging.models.values import RGB, ImageFormat
from imaging.runtime import ImageRuntime, build_runtime
from imaging.utils.settings import ImageSettings

TEST_BUCKET = "test-images-bucket"
TEST_HMAC_SECRET = "test-hmac-secret"


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(Bucket=bucket_name, Delete={"Objects": delete_keys})
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (moto cleans up on context exit)
    """
    try:
        s3_client.head_bucket(Bucket=TEST_BUCKET)
    except ClientError:
        s3_client.create_bucket(Bucket=TEST_BUCKET)

    yield s3_client

    _cleanup_s3_objects(s3_client, TEST_BUCKET)


@pytest.fixture
def s3_put_object(s3_client) -> Callable[[str, bytes, str], dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        response = s3_put_object("ab/ab12.jpeg", image_bytes, "image/jpeg")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        return s3_client.put_object(
            Bucket=TEST_BUCKET, Key=key, Body=body, ContentType=content_type
        )

    return _put


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], bytes]:
    """
    Helper to get an object from S3.

    Usage:
        content = s3_get_object("ab/ab12.jpeg")
    """

    def _get(key: str) -> bytes:
        response: dict[str, Any] = s3_client.get_object(Bucket=TEST_BUCKET, Key=key)
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def images_folder(tmp_path):
    folder = tmp_path / "images"
    folder.mkdir()
    return folder


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'images.db'}"


@pytest.fixture
def settings(images_folder, database_url) -> ImageSettings:
    """Disk-only settings with signing enabled."""
    return ImageSettings(
        images_folder_path=str(images_folder),
        database_url=database_url,
        hmac_secret=TEST_HMAC_SECRET,
    )


@pytest.fixture
def s3_settings(images_folder, database_url) -> ImageSettings:
    return ImageSettings(
        images_folder_path=str(images_folder),
        database_url=database_url,
        hmac_secret=TEST_HMAC_SECRET,
        s3_enabled=True,
        s3_region="us-east-1",
        s3_bucket=TEST_BUCKET,
        s3_access_key="testing",
        s3_secret_key="testing",
    )


@pytest.fixture
def sql_metadata(database_url) -> SQLImageMetadata:
    return SQLImageMetadata(SQLAdapter(database_url))


@pytest.fixture
def runtime(settings, sql_metadata) -> ImageRuntime:
    return build_runtime(settings, metadata=sql_metadata)


@pytest.fixture
def s3_runtime(s3_settings, sql_metadata, s3_bucket) -> ImageRuntime:
    return build_runtime(
        s3_settings,
        metadata=sql_metadata,
        s3_adapter=S3Adapter(s3_settings),
    )


def make_image_bytes(
    size: tuple[int, int] = (64, 48),
    color: tuple[int, int, int] = (100, 150, 200),
    image_format: str = "PNG",
) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=image_format)
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes(size=(200, 50), image_format="JPEG")


@pytest.fixture
def make_record() -> Callable[..., ImageRecord]:
    """
    Helper to build an ImageRecord with sensible defaults.

    Usage:
        record = make_record(store_name="s3", format=ImageFormat.PNG)
    """

    def _make(**overrides: Any) -> ImageRecord:
        values: dict[str, Any] = {
            "id": ImageID.new(),
            "store_name": "disk",
            "format": ImageFormat.PNG,
            "width": 64,
            "height": 48,
            "size": 100,
            "upload_size": 120,
            "average_color": RGB(red=56, green=85, blue=113),
        }
        values.update(overrides)
        return ImageRecord(**values)

    return _make


@pytest.fixture
def image_factory() -> Callable[..., bytes]:
    """
    Helper to encode a solid-color test image.

    Usage:
        data = image_factory(size=(10, 10), color=(0, 0, 0), image_format="JPEG")
    """
    return make_image_bytes
