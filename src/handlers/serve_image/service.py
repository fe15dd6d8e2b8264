"""Business logic for serving stored images and their variants.

Requests are verified before any I/O. A cache hit is returned as-is;
on a miss the original bytes are fetched from the store named on the
image record, transformed, and written back to the cache.
"""

from collections.abc import Mapping

from aws_lambda_powertools import Logger

from imaging.models.errors import CacheError, NotFoundError
from imaging.models.request import ImageRequest
from imaging.processing.transform import transform
from imaging.runtime import ImageRuntime, get_runtime

from .models import ServedImage

logger = Logger(UTC=True)


class ServeService:
    """Application service responsible for serving images.

    This service orchestrates:
    - Parsing and signature verification of image requests
    - Variant cache lookups and writes
    - Fetching originals from the registered store
    - Resizing and re-encoding on a cache miss
    """

    def __init__(self, runtime: ImageRuntime | None = None) -> None:
        self.runtime = runtime or get_runtime()

    def parse_request(self, path: str, query: Mapping[str, str]) -> ImageRequest:
        """Parse and verify an image request.

        Raises:
            ValidationError: If the URL is malformed or the signature is invalid
        """
        request = ImageRequest.from_parts(path, query)
        self.runtime.signer.verify(request)
        return request

    def serve(self, request: ImageRequest) -> ServedImage:
        """Return the bytes for a verified request.

        Raises:
            NotFoundError: If the image or its original bytes do not exist
            StoreNotRegisteredError: If the record names an unknown store
            StorageError: If the store cannot be read
        """
        image_id = str(request.id)

        cached = self.runtime.cache.lookup(request)
        if cached is not None:
            logger.debug("Image cache hit", extra={"image_id": image_id})
            return ServedImage(content=cached, format=request.format, cache_hit=True)

        record = self.runtime.metadata.fetch_record(image_id=request.id)
        if record is None:
            logger.info("Image record not found", extra={"image_id": image_id})
            raise NotFoundError(message="Image not found", details={"image_id": image_id})

        store = self.runtime.stores.match(record.store_name)
        original = store.get(record)

        content = transform(
            original,
            size=request.size,
            fit=request.effective_fit,
            image_format=request.format,
        )

        try:
            self.runtime.cache.store(request, content)
        except CacheError as exc:
            logger.error(
                "Failed to cache image variant",
                extra={"image_id": image_id, "error_code": exc.error_code},
            )

        logger.info(
            "Image variant computed",
            extra={
                "image_id": image_id,
                "size": str(request.size),
                "format": request.format.value,
                "bytes": len(content),
            },
        )
        return ServedImage(content=content, format=request.format)
