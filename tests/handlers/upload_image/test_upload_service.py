import base64
from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from handlers.upload_image.service import UploadService
from imaging.infrastructure.adapters.sql_adapter import images_table
from imaging.infrastructure.storage.disk_store import DiskStore
from imaging.infrastructure.storage.paths import original_path
from imaging.models.errors import (
    FileSizeError,
    ImageDecodeError,
    StorageError,
    ValidationError,
)
from imaging.models.image import ImageCopySpec, ImageOptions
from imaging.models.request import ImageRequest
from imaging.models.values import ImageFit, ImageFormat
from imaging.runtime import build_runtime
from imaging.utils.constants import ERROR_CODE_TOO_MANY_IMAGES


def _row_count(runtime) -> int:
    with runtime.metadata._db.engine.connect() as conn:
        return conn.execute(select(func.count()).select_from(images_table)).scalar_one()


def _with_settings(settings, sql_metadata, **changes):
    return build_runtime(settings.model_copy(update=changes), metadata=sql_metadata)


class TestUploadImage:
    def test_upload_to_disk(self, runtime, png_bytes) -> None:
        service = UploadService(runtime)

        record = service.upload_image(
            png_bytes,
            ImageOptions(format=ImageFormat.PNG, width=32, height=32),
        )

        assert record.store_name == "disk"
        assert record.format is ImageFormat.PNG
        assert (record.width, record.height) == (32, 24)
        assert record.upload_size == len(png_bytes)
        assert record.created_at is not None
        assert abs(record.average_color.red - 56) <= 1
        assert abs(record.average_color.green - 85) <= 1
        assert abs(record.average_color.blue - 113) <= 1

        stored = DiskStore(runtime.settings.images_folder_path).get(record)
        assert len(stored) == record.size
        assert runtime.metadata.fetch_record(image_id=record.id) == record

    def test_default_options_reencode_as_jpeg(self, runtime, png_bytes) -> None:
        record = UploadService(runtime).upload_image(png_bytes, ImageOptions())

        assert record.format is ImageFormat.JPEG
        assert (record.width, record.height) == (64, 48)

    def test_camera_jpeg_with_mpf_segment(self, runtime, image_factory) -> None:
        data = image_factory(size=(120, 90), image_format="MPO")

        record = UploadService(runtime).upload_image(data, ImageOptions(format=ImageFormat.JPEG))

        assert record.format is ImageFormat.JPEG
        assert (record.width, record.height) == (120, 90)
        assert runtime.metadata.fetch_record(image_id=record.id) == record

    def test_upload_to_s3(self, s3_runtime, s3_get_object, png_bytes) -> None:
        record = UploadService(s3_runtime).upload_image(
            png_bytes,
            ImageOptions(format=ImageFormat.WEBP),
        )

        assert record.store_name == "s3"
        assert len(s3_get_object(original_path(record.id, ImageFormat.WEBP))) == record.size

    def test_store_failure_leaves_no_record(self, runtime, png_bytes) -> None:
        with patch.object(
            DiskStore,
            "save",
            side_effect=StorageError(message="Unable to save image at this time"),
        ):
            with pytest.raises(StorageError):
                UploadService(runtime).upload_image(png_bytes, ImageOptions())

        assert _row_count(runtime) == 0

    def test_undecodable_bytes(self, runtime) -> None:
        with pytest.raises(ImageDecodeError):
            UploadService(runtime).upload_image(b"definitely not an image", ImageOptions())

        assert _row_count(runtime) == 0

    def test_size_limit(self, settings, sql_metadata, png_bytes) -> None:
        runtime = _with_settings(settings, sql_metadata, max_image_size=len(png_bytes) - 1)

        with pytest.raises(FileSizeError) as exc:
            UploadService(runtime).upload_image(png_bytes, ImageOptions())

        assert exc.value.details == {"size": len(png_bytes)}
        assert _row_count(runtime) == 0

    def test_skip_processing_keeps_bytes(self, settings, sql_metadata, jpeg_bytes) -> None:
        runtime = _with_settings(settings, sql_metadata, skip_processing=True)

        record = UploadService(runtime).upload_image(
            jpeg_bytes,
            ImageOptions(format=ImageFormat.PNG, width=10, height=10),
        )

        assert record.format is ImageFormat.JPEG
        assert (record.width, record.height) == (200, 50)
        assert DiskStore(settings.images_folder_path).get(record) == jpeg_bytes


class TestCheckBatch:
    def test_within_limit(self, runtime) -> None:
        UploadService(runtime).check_batch(runtime.settings.max_images_per_post)

    def test_too_many_images(self, runtime) -> None:
        with pytest.raises(ValidationError) as exc:
            UploadService(runtime).check_batch(runtime.settings.max_images_per_post + 1)

        assert exc.value.error_code == ERROR_CODE_TOO_MANY_IMAGES

    def test_images_disabled(self, settings, sql_metadata) -> None:
        runtime = _with_settings(settings, sql_metadata, images_enabled=False)

        with pytest.raises(PermissionError):
            UploadService(runtime).check_batch(1)


class TestDecodeFile:
    def test_valid(self) -> None:
        assert UploadService.decode_file(base64.b64encode(b"abc").decode()) == b"abc"

    def test_invalid(self) -> None:
        with pytest.raises(ValidationError):
            UploadService.decode_file("!!!")


class TestDescribe:
    def test_urls_are_signed(self, runtime, png_bytes) -> None:
        service = UploadService(runtime)
        record = service.upload_image(png_bytes, ImageOptions(format=ImageFormat.PNG))

        descriptor = service.describe(
            record,
            [
                ImageCopySpec(name="thumb", width=16, height=16, format=ImageFormat.WEBP),
                ImageCopySpec(name="square", width=16, height=16, fit=ImageFit.COVER),
            ],
        )

        assert descriptor.id == record.id
        assert descriptor.mime_type == "image/png"
        assert descriptor.average_color == str(record.average_color)
        assert descriptor.url.startswith(runtime.settings.image_url_prefix)
        runtime.signer.verify(ImageRequest.from_url(descriptor.url))

        thumb, square = descriptor.copies
        assert (thumb.width, thumb.height) == (16, 12)
        assert (square.width, square.height) == (16, 16)
        for copy in descriptor.copies:
            request = ImageRequest.from_url(copy.url)
            runtime.signer.verify(request)
            assert request.format is copy.format

    def test_unsigned_without_secret(self, settings, sql_metadata, make_record) -> None:
        runtime = _with_settings(settings, sql_metadata, hmac_secret=None)

        descriptor = UploadService(runtime).describe(make_record())

        assert "sig=" not in descriptor.url
        assert descriptor.copies == []
