import pytest
from pydantic import ValidationError

from handlers.delete_image.models import DeleteImageRequest, DeleteImageResponse
from imaging.models.identifiers import ImageID


class TestDeleteImageRequest:
    def test_parses_ids(self) -> None:
        image_id = ImageID.new()

        request = DeleteImageRequest(image_ids=[str(image_id), image_id])

        assert request.image_ids == [image_id, image_id]

    def test_rejects_malformed_id(self) -> None:
        with pytest.raises(ValidationError):
            DeleteImageRequest(image_ids=["img_abc123"])

    def test_requires_at_least_one_id(self) -> None:
        with pytest.raises(ValidationError):
            DeleteImageRequest(image_ids=[])

    def test_limits_batch_size(self) -> None:
        with pytest.raises(ValidationError):
            DeleteImageRequest(image_ids=[str(ImageID.new()) for _ in range(101)])


class TestDeleteImageResponse:
    def test_serializes_ids_as_text(self) -> None:
        image_id = ImageID.new()
        response = DeleteImageResponse(
            image_ids=[image_id],
            message="Images deleted successfully",
            deleted_at="2024-01-01T00:00:00+00:00",
        )

        assert response.model_dump(mode="json")["image_ids"] == [str(image_id)]
