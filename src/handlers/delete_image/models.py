"""Pydantic models for delete image request/response."""

from pydantic import BaseModel, ConfigDict, Field

from imaging.models.identifiers import ImageID


class DeleteImageRequest(BaseModel):
    """Validation model for delete image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    image_ids: list[ImageID] = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Image IDs to delete",
    )


class DeleteImageResponse(BaseModel):
    """Response model for successful image deletion."""

    image_ids: list[ImageID] = Field(..., description="Deleted image IDs")
    message: str = Field(..., description="Success message")
    deleted_at: str = Field(..., description="Deletion timestamp")
