import json
from unittest.mock import patch

from handlers.delete_image.handler import handler
from imaging.models.errors import MetadataOperationFailedError
from imaging.models.identifiers import ImageID


def _store(runtime, record) -> None:
    with runtime.metadata.transaction() as tx:
        runtime.metadata.create_record(record=record, tx=tx)
        runtime.stores.match(record.store_name).save(record, b"original")


class TestDeleteHandler:
    def test_delete_single_image(
        self, use_runtime, lambda_context, delete_image_event, make_record
    ) -> None:
        record = make_record()
        _store(use_runtime, record)

        response = handler(delete_image_event(image_id=str(record.id)), lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["image_ids"] == [str(record.id)]
        assert body["message"] == "Images deleted successfully"
        assert "deleted_at" in body
        assert use_runtime.metadata.fetch_record(image_id=record.id) is None

    def test_delete_single_missing_image(self, use_runtime, lambda_context, delete_image_event) -> None:
        response = handler(delete_image_event(image_id=str(ImageID.new())), lambda_context)

        assert response["statusCode"] == 404

    def test_delete_batch(self, use_runtime, lambda_context, delete_image_event, make_record) -> None:
        records = [make_record() for _ in range(3)]
        for record in records:
            _store(use_runtime, record)

        ids = [str(record.id) for record in records[:2]] + [str(ImageID.new())]
        response = handler(delete_image_event(image_ids=ids), lambda_context)

        assert response["statusCode"] == 200
        assert sorted(json.loads(response["body"])["image_ids"]) == sorted(ids[:2])
        assert use_runtime.metadata.fetch_record(image_id=records[2].id) is not None

    def test_invalid_image_id(self, use_runtime, lambda_context, delete_image_event) -> None:
        response = handler(delete_image_event(image_id="img_123"), lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["message"] == "Invalid request payload"

    def test_empty_batch(self, use_runtime, lambda_context, delete_image_event) -> None:
        response = handler(delete_image_event(image_ids=[]), lambda_context)

        assert response["statusCode"] == 400

    def test_invalid_json(self, use_runtime, lambda_context) -> None:
        response = handler({"httpMethod": "DELETE", "body": "[oops"}, lambda_context)

        assert response["statusCode"] == 400

    def test_metadata_failure(self, use_runtime, lambda_context, delete_image_event) -> None:
        with patch.object(
            use_runtime.metadata,
            "fetch_records",
            side_effect=MetadataOperationFailedError(message="Unable to fetch image records"),
        ):
            response = handler(delete_image_event(image_ids=[str(ImageID.new())]), lambda_context)

        assert response["statusCode"] == 500
        assert json.loads(response["body"])["message"] == "Unable to delete images"
