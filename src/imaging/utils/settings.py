"""Runtime configuration read from the environment."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, SecretStr

from imaging.utils.constants import (
    DEFAULT_DATABASE_URL,
    DEFAULT_IMAGE_URL_PREFIX,
    DEFAULT_IMAGES_FOLDER_PATH,
    DEFAULT_MAX_IMAGE_SIZE,
    DEFAULT_MAX_IMAGES_PER_POST,
    DISK_STORE_NAME,
    ENV_CACHE_ENABLED,
    ENV_DATABASE_URL,
    ENV_HMAC_SECRET,
    ENV_IMAGE_URL_PREFIX,
    ENV_IMAGES_ENABLED,
    ENV_IMAGES_FOLDER_PATH,
    ENV_MAX_IMAGE_SIZE,
    ENV_MAX_IMAGES_PER_POST,
    ENV_S3_ACCESS_KEY,
    ENV_S3_BUCKET,
    ENV_S3_ENABLED,
    ENV_S3_ENDPOINT,
    ENV_S3_PATH_PREFIX,
    ENV_S3_REGION,
    ENV_S3_SECRET_KEY,
    ENV_SKIP_PROCESSING,
    S3_STORE_NAME,
)

_ENV_FIELDS: Mapping[str, str] = {
    ENV_IMAGES_ENABLED: "images_enabled",
    ENV_IMAGES_FOLDER_PATH: "images_folder_path",
    ENV_HMAC_SECRET: "hmac_secret",
    ENV_MAX_IMAGE_SIZE: "max_image_size",
    ENV_MAX_IMAGES_PER_POST: "max_images_per_post",
    ENV_CACHE_ENABLED: "cache_enabled",
    ENV_SKIP_PROCESSING: "skip_processing",
    ENV_IMAGE_URL_PREFIX: "image_url_prefix",
    ENV_DATABASE_URL: "database_url",
    ENV_S3_ENABLED: "s3_enabled",
    ENV_S3_REGION: "s3_region",
    ENV_S3_BUCKET: "s3_bucket",
    ENV_S3_ACCESS_KEY: "s3_access_key",
    ENV_S3_SECRET_KEY: "s3_secret_key",
    ENV_S3_ENDPOINT: "s3_endpoint",
    ENV_S3_PATH_PREFIX: "s3_path_prefix",
}


class ImageSettings(BaseModel):
    """Configuration of the image subsystem.

    Values are read once at startup; nothing here changes at runtime.
    """

    model_config = ConfigDict(frozen=True)

    images_enabled: bool = True
    images_folder_path: str = DEFAULT_IMAGES_FOLDER_PATH
    hmac_secret: SecretStr | None = None
    max_image_size: PositiveInt = DEFAULT_MAX_IMAGE_SIZE
    max_images_per_post: PositiveInt = DEFAULT_MAX_IMAGES_PER_POST
    cache_enabled: bool = True
    skip_processing: bool = False
    image_url_prefix: str = DEFAULT_IMAGE_URL_PREFIX
    database_url: str = DEFAULT_DATABASE_URL

    s3_enabled: bool = False
    s3_region: str | None = None
    s3_bucket: str | None = None
    s3_access_key: SecretStr | None = None
    s3_secret_key: SecretStr | None = None
    s3_endpoint: str | None = Field(None, description="Custom endpoint for S3-compatible services")
    s3_path_prefix: str = Field("", description="Prefix prepended to every object key")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ImageSettings":
        """Build settings from environment variables.

        Unset or empty variables fall back to defaults.
        """
        env = os.environ if environ is None else environ
        values = {
            field: env[name]
            for name, field in _ENV_FIELDS.items()
            if env.get(name, "").strip()
        }
        return cls.model_validate(values)

    @property
    def hmac_key(self) -> bytes | None:
        if self.hmac_secret is None or not self.hmac_secret.get_secret_value():
            return None
        return self.hmac_secret.get_secret_value().encode()

    @property
    def s3_configured(self) -> bool:
        """True when S3 is enabled and every required value is present."""
        return bool(
            self.s3_enabled
            and self.s3_region
            and self.s3_bucket
            and self.s3_access_key
            and self.s3_secret_key
        )

    @property
    def default_store_name(self) -> str:
        return S3_STORE_NAME if self.s3_configured else DISK_STORE_NAME
