"""Shared image record and descriptor models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, StrictStr

from imaging.models.identifiers import ImageID
from imaging.models.values import RGB, ImageFit, ImageFormat, ImageSize


class ImageRecord(BaseModel):
    """Persistent metadata for one uploaded image.

    Created once at upload and never updated; the bytes live in the store
    named by ``store_name``.
    """

    model_config = ConfigDict(frozen=True)

    id: ImageID = Field(..., description="Unique image identifier")
    store_name: StrictStr = Field(..., description="Name of the store holding the original bytes")
    format: ImageFormat = Field(..., description="Encoding of the stored bytes")
    width: NonNegativeInt = Field(..., description="Width in pixels")
    height: NonNegativeInt = Field(..., description="Height in pixels")
    size: NonNegativeInt = Field(..., description="Stored size in bytes")
    upload_size: NonNegativeInt = Field(..., description="Size of the upload in bytes")
    average_color: RGB = Field(default_factory=RGB, description="Approximate average color")
    created_at: datetime | None = Field(None, description="Creation timestamp (UTC)")


class ImageOptions(BaseModel):
    """Options applied to an image before it is stored."""

    format: ImageFormat = ImageFormat.JPEG
    width: NonNegativeInt = 0
    height: NonNegativeInt = 0
    fit: ImageFit | None = None

    @property
    def size(self) -> ImageSize:
        return ImageSize(width=self.width, height=self.height)


class ImageCopySpec(BaseModel):
    """A named variant to advertise alongside an uploaded image."""

    name: StrictStr = Field(..., min_length=1, max_length=50)
    width: PositiveInt
    height: PositiveInt
    fit: ImageFit = ImageFit.CONTAIN
    format: ImageFormat = ImageFormat.JPEG


class ImageCopy(BaseModel):
    """A signed, served variant of an image."""

    name: StrictStr
    box_width: NonNegativeInt
    box_height: NonNegativeInt
    fit: ImageFit
    format: ImageFormat
    width: NonNegativeInt = Field(..., description="Output width in pixels")
    height: NonNegativeInt = Field(..., description="Output height in pixels")
    url: StrictStr


class ImageDescriptor(BaseModel):
    """Public description of a stored image returned to API callers."""

    id: ImageID
    format: ImageFormat
    mime_type: StrictStr
    width: NonNegativeInt
    height: NonNegativeInt
    size: NonNegativeInt
    average_color: StrictStr = Field(..., description="Color as rgb(r,g,b)")
    url: StrictStr
    copies: list[ImageCopy] = Field(default_factory=list)
