"""Process-wide wiring of the image subsystem.

build_runtime() assembles stores, signer, metadata repository and cache
from settings exactly once; the result is immutable and shared by every
handler invocation in the process.
"""

from dataclasses import dataclass
from functools import lru_cache

from aws_lambda_powertools import Logger

from imaging.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from imaging.infrastructure.adapters.sql_adapter import SQLAdapter
from imaging.infrastructure.cache.variant_cache import VariantCache
from imaging.infrastructure.sql.sql_metadata import SQLImageMetadata
from imaging.infrastructure.storage.disk_store import DiskStore
from imaging.infrastructure.storage.registry import StoreRegistry
from imaging.infrastructure.storage.s3_store import S3Store
from imaging.repositories.metadata_repository import ImageMetadataRepository
from imaging.security.signer import RequestSigner
from imaging.utils.settings import ImageSettings

logger = Logger(UTC=True)


@dataclass(frozen=True)
class ImageRuntime:
    """Shared, read-only collaborators of the image services."""

    settings: ImageSettings
    stores: StoreRegistry
    signer: RequestSigner
    metadata: ImageMetadataRepository
    cache: VariantCache

    @property
    def default_store_name(self) -> str:
        return self.settings.default_store_name


def build_runtime(
    settings: ImageSettings,
    *,
    metadata: ImageMetadataRepository | None = None,
    s3_adapter: S3AdapterProtocol | None = None,
) -> ImageRuntime:
    """Construct an ImageRuntime from settings.

    The disk store is always registered; the S3 store only when S3 is
    fully configured.
    """
    stores = StoreRegistry()
    stores.register(DiskStore(settings.images_folder_path))

    if settings.s3_configured:
        stores.register(
            S3Store(
                s3_adapter or S3Adapter(settings),
                path_prefix=settings.s3_path_prefix,
            )
        )
    elif settings.s3_enabled:
        logger.warning("S3 is enabled but not fully configured; using disk storage")

    if settings.hmac_key is None:
        logger.warning("No image HMAC secret configured; unsigned image URLs will be rejected")

    runtime = ImageRuntime(
        settings=settings,
        stores=stores.freeze(),
        signer=RequestSigner(settings.hmac_key, url_prefix=settings.image_url_prefix),
        metadata=metadata or SQLImageMetadata(SQLAdapter(settings.database_url)),
        cache=VariantCache(settings.images_folder_path, enabled=settings.cache_enabled),
    )

    logger.info(
        "Image runtime ready",
        extra={"stores": stores.names(), "default_store": runtime.default_store_name},
    )
    return runtime


@lru_cache(maxsize=1)
def get_runtime() -> ImageRuntime:
    """Return the runtime for this process, built from the environment."""
    return build_runtime(ImageSettings.from_env())
