"""Pydantic models for image serve request/response."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from imaging.models.values import ImageFormat


class ServeImageRequest(BaseModel):
    """Validation model for an image serve request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: StrictStr = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Requested file name, {id}.{ext}",
    )
    size: StrictStr | None = Field(None, max_length=32, description="WxH or N")
    fit: StrictStr | None = Field(None, max_length=16, description="cover or contain")
    sig: StrictStr | None = Field(None, max_length=128, description="URL-safe base64 HMAC")

    def query(self) -> dict[str, str]:
        return {
            key: value
            for key, value in (("size", self.size), ("fit", self.fit), ("sig", self.sig))
            if value
        }


class ServedImage(BaseModel):
    """Encoded bytes ready to be written to the client."""

    model_config = ConfigDict(frozen=True)

    content: bytes
    format: ImageFormat
    cache_hit: bool = False

    @property
    def mime_type(self) -> str:
        return self.format.mime_type
