"""Business logic for image upload operations.

This module decodes and processes uploaded images, persists the image
record and stores the encoded bytes, translating failures into
domain-specific errors.
"""

import base64
import binascii
from collections.abc import Sequence

from aws_lambda_powertools import Logger

from imaging.models.errors import (
    FileSizeError,
    MetadataOperationFailedError,
    ValidationError,
)
from imaging.models.identifiers import ImageID
from imaging.models.image import (
    ImageCopy,
    ImageCopySpec,
    ImageDescriptor,
    ImageOptions,
    ImageRecord,
)
from imaging.models.request import ImageRequest
from imaging.models.values import ImageFit, ImageSize
from imaging.processing.color import average_color
from imaging.processing.transform import decode, encode, output_size, resize
from imaging.runtime import ImageRuntime, get_runtime
from imaging.utils.constants import (
    ERROR_CODE_METADATA_INVALID_STATE,
    ERROR_CODE_TOO_MANY_IMAGES,
    get_max_file_size_mb,
)
from imaging.utils.time import utc_now

logger = Logger(UTC=True)


class UploadService:
    """Application service responsible for image uploads.

    This service orchestrates:
    - File decoding and validation
    - Resizing and re-encoding to the requested format
    - Persisting the image record and the encoded bytes together
    - Building signed descriptors for the stored image
    """

    def __init__(self, runtime: ImageRuntime | None = None) -> None:
        self.runtime = runtime or get_runtime()

    @staticmethod
    def decode_file(encoded: str) -> bytes:
        """Decode base64-encoded image data.

        Raises:
            ValidationError: If decoding fails
        """
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            logger.warning("Failed to decode base64 image data")
            raise ValidationError(
                message="Invalid image data",
                details={"encoding": "base64"},
            ) from exc

    def check_batch(self, count: int) -> None:
        """Refuse batches the configuration does not allow.

        Raises:
            PermissionError: If image uploads are disabled
            ValidationError: If the batch has too many images
        """
        settings = self.runtime.settings
        if not settings.images_enabled:
            raise PermissionError("Image uploads are disabled")

        if count > settings.max_images_per_post:
            raise ValidationError(
                message=f"At most {settings.max_images_per_post} images per request",
                error_code=ERROR_CODE_TOO_MANY_IMAGES,
                details={"count": count},
            )

    def upload_image(self, data: bytes, options: ImageOptions) -> ImageRecord:
        """Process an uploaded image and persist it.

        The upload flow is:
        1. Enforce the size limit and decode the bytes
        2. Resize and re-encode unless processing is skipped
        3. Insert the record and save the bytes in one metadata transaction
        4. Re-read the committed record

        The metadata row commits only if the store save succeeds. The store
        save is not transactional: a failure at commit time can leave bytes
        without a row.

        Raises:
            FileSizeError: If the upload exceeds the configured limit
            ImageDecodeError: If the bytes are not a readable image
            ImageFormatUnsupportedError: If the image format is not supported
            StoreNotRegisteredError: If the default store is not registered
            StorageError: If the bytes cannot be saved
            MetadataOperationFailedError: If the record cannot be persisted
        """
        settings = self.runtime.settings

        if len(data) > settings.max_image_size:
            logger.warning(
                "Upload exceeds size limit",
                extra={"size": len(data), "limit": settings.max_image_size},
            )
            raise FileSizeError(
                message=(
                    f"File size exceeds {get_max_file_size_mb(settings.max_image_size)}MB limit"
                ),
                details={"size": len(data)},
            )

        img, source_format = decode(data)

        if settings.skip_processing:
            stored, image_format = data, source_format
        else:
            img = resize(img, options.size, options.fit or ImageFit.default())
            stored, image_format = encode(img, options.format), options.format

        record = ImageRecord(
            id=ImageID.new(),
            store_name=self.runtime.default_store_name,
            format=image_format,
            width=img.width,
            height=img.height,
            size=len(stored),
            upload_size=len(data),
            average_color=average_color(img),
            created_at=utc_now(),
        )
        image_id = str(record.id)
        logger.debug("Storing image", extra={"image_id": image_id, "store": record.store_name})

        store = self.runtime.stores.match(record.store_name)
        metadata = self.runtime.metadata

        with metadata.transaction() as tx:
            metadata.create_record(record=record, tx=tx)
            store.save(record, stored)

        saved = metadata.fetch_record(image_id=record.id)
        if saved is None:
            logger.error("Image record missing after commit", extra={"image_id": image_id})
            raise MetadataOperationFailedError(
                message="Image record missing after upload",
                error_code=ERROR_CODE_METADATA_INVALID_STATE,
                details={"image_id": image_id},
            )

        logger.info(
            "Image uploaded successfully",
            extra={
                "image_id": image_id,
                "format": saved.format.value,
                "size": saved.size,
                "upload_size": saved.upload_size,
            },
        )
        return saved

    def describe(
        self,
        record: ImageRecord,
        copies: Sequence[ImageCopySpec] = (),
    ) -> ImageDescriptor:
        """Build the public descriptor of a stored image, with signed URLs."""
        signer = self.runtime.signer
        original = ImageRequest(id=record.id, format=record.format)

        return ImageDescriptor(
            id=record.id,
            format=record.format,
            mime_type=record.format.mime_type,
            width=record.width,
            height=record.height,
            size=record.size,
            average_color=str(record.average_color),
            url=signer.full_url(original),
            copies=[self._copy_of(record, spec) for spec in copies],
        )

    def _copy_of(self, record: ImageRecord, spec: ImageCopySpec) -> ImageCopy:
        size = ImageSize(width=spec.width, height=spec.height)
        request = ImageRequest(id=record.id, size=size, fit=spec.fit, format=spec.format)
        width, height = output_size(record.width, record.height, size, spec.fit)

        return ImageCopy(
            name=spec.name,
            box_width=spec.width,
            box_height=spec.height,
            fit=spec.fit,
            format=spec.format,
            width=width,
            height=height,
            url=self.runtime.signer.full_url(request),
        )
