"""
Lambda handler responsible for deleting image resources.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from imaging.models.errors import (
    MetadataOperationFailedError,
    StorageError,
    StoreNotRegisteredError,
)
from imaging.utils.decorators import api_gateway_handler
from imaging.utils.response import ResponseBuilder
from imaging.utils.time import utc_now_iso
from imaging.utils.validators import sanitize_validation_errors, validate_request

from .models import DeleteImageRequest, DeleteImageResponse
from .service import DeleteService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image deletion requests.

    This function:
    - Takes a single image id from the path, or a batch from the JSON body
    - Validates the incoming request payload
    - Delegates deletion to the service layer
    - Translates domain and runtime errors into HTTP responses

    A single id that does not exist yields 404. In a batch, ids that do not
    exist are ignored.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received image delete request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    path_params = event.get("pathParameters") or {}
    single = bool(path_params.get("image_id"))

    if single:
        payload: Any = {"image_ids": [path_params["image_id"]]}
    else:
        try:
            payload = json.loads(event.get("body") or "{}")
        except json.JSONDecodeError as exc:
            logger.exception("Invalid JSON body received", exc_info=exc)
            return ResponseBuilder.bad_request(message="Invalid JSON body")

    try:
        request = validate_request(DeleteImageRequest, payload)
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = DeleteService()

    try:
        deleted = service.delete_images(request.image_ids)

    except (StoreNotRegisteredError, StorageError, MetadataOperationFailedError) as exc:
        logger.exception(
            "Deletion failed",
            extra={
                "image_ids": [str(image_id) for image_id in request.image_ids],
                "error_code": exc.error_code,
            },
        )
        return ResponseBuilder.internal_error("Unable to delete images")

    if single and not deleted:
        return ResponseBuilder.not_found(f"Image not found: {request.image_ids[0]}")

    metrics.add_metric(name="ImagesDeleted", unit=MetricUnit.Count, value=len(deleted))

    response = DeleteImageResponse(
        image_ids=[record.id for record in deleted],
        message="Images deleted successfully",
        deleted_at=utc_now_iso(),
    )

    return ResponseBuilder.ok(response.model_dump(mode="json"))
