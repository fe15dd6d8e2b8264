"""Pydantic models for image upload request/response."""

import base64
import binascii

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

from imaging.models.image import ImageCopySpec, ImageDescriptor, ImageOptions
from imaging.models.values import ImageFit, ImageFormat

logger = Logger(UTC=True)


class ImageUploadRequest(BaseModel):
    """Validation model for image upload request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    files: list[str] = Field(..., min_length=1, description="Base64 encoded image files")
    format: ImageFormat = Field(ImageFormat.JPEG, description="Format the images are stored in")
    width: NonNegativeInt = Field(0, description="Bounding box width, 0 keeps the original")
    height: NonNegativeInt = Field(0, description="Bounding box height, 0 keeps the original")
    fit: ImageFit | None = Field(None, description="How images are fitted into the box")
    copies: list[ImageCopySpec] = Field(
        default_factory=list,
        max_length=10,
        description="Named variants to return signed URLs for",
    )

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower()
            return "jpeg" if value == "jpg" else value
        return value

    @field_validator("files")
    @classmethod
    def validate_files(cls, value: list[str]) -> list[str]:
        """
        Validate base64 files:
        - must not be empty
        - must decode correctly
        """
        for index, encoded in enumerate(value):
            if not encoded or not encoded.strip():
                raise ValueError(f"File {index} must not be empty")

            try:
                base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError) as e:
                logger.error(f"File validation error: Invalid base64 - {e}")
                raise ValueError(f"Invalid base64 encoded file at index {index}") from e

        return value

    @property
    def options(self) -> ImageOptions:
        return ImageOptions(
            format=self.format,
            width=self.width,
            height=self.height,
            fit=self.fit,
        )


class ImageUploadResponse(BaseModel):
    """Response model for successful image upload."""

    images: list[ImageDescriptor] = Field(..., description="Stored images")
    message: str = Field(..., description="Success message")
