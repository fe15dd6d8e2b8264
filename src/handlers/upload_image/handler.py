"""
Lambda handler responsible for image upload and record creation.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from imaging.models.errors import (
    FileSizeError,
    MetadataOperationFailedError,
    StorageError,
    StoreNotRegisteredError,
    ValidationError,
)
from imaging.utils.decorators import api_gateway_handler
from imaging.utils.response import ResponseBuilder
from imaging.utils.validators import sanitize_validation_errors, validate_request

from .models import ImageUploadRequest, ImageUploadResponse
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    The handler decodes base64-encoded image data, validates the incoming
    payload, processes and stores each image, and returns descriptors with
    signed URLs for the newly created images.

    Expected API Gateway event structure:
    {
        "body": "{...}",           # JSON string containing upload data
        "isBase64Encoded": false
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response containing image descriptors
    """
    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
            "remaining_time_ms": context.get_remaining_time_in_millis()
            if hasattr(context, "get_remaining_time_in_millis")
            else None,
        },
    )

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.bad_request(message="Invalid JSON body")

    try:
        request = validate_request(ImageUploadRequest, body)
    except PydanticValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = UploadService()
    service.check_batch(len(request.files))

    descriptors = []
    try:
        for encoded in request.files:
            record = service.upload_image(
                UploadService.decode_file(encoded),
                request.options,
            )
            descriptors.append(service.describe(record, request.copies))

    except FileSizeError as exc:
        logger.warning("Upload rejected: file too large", extra={"details": exc.details})
        return ResponseBuilder.payload_too_large(exc.message)

    except ValidationError as exc:
        logger.warning(
            "Validation error during image upload",
            extra={"error_code": exc.error_code},
        )
        return ResponseBuilder.validation_error(message=exc.message)

    except (StoreNotRegisteredError, StorageError, MetadataOperationFailedError) as exc:
        logger.exception(
            "Infrastructure error during image upload",
            extra={"error_code": exc.error_code, "stored": len(descriptors)},
        )
        return ResponseBuilder.internal_error("Unable to store image")

    metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=len(descriptors))

    response = ImageUploadResponse(
        images=descriptors,
        message="Images uploaded successfully",
    )

    return ResponseBuilder.created(response.model_dump(mode="json"))
