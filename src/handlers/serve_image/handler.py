"""
Lambda handler responsible for serving images and resized variants.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from imaging.models.errors import (
    ImageServiceError,
    InvalidSignatureError,
    NotFoundError,
)
from imaging.models.errors import ValidationError as ImageValidationError
from imaging.utils.constants import IMAGE_CACHE_CONTROL
from imaging.utils.decorators import api_gateway_handler
from imaging.utils.response import ResponseBuilder, error_response_for
from imaging.utils.validators import sanitize_validation_errors, validate_request

from .models import ServeImageRequest
from .service import ServeService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image serve requests.

    Expected API Gateway event structure:
    {
        "pathParameters": {"file": "{id}.{ext}"},
        "queryStringParameters": {"size": "300x200", "fit": "cover", "sig": "..."}
    }

    The signature is checked before any storage or cache access. The image
    bytes are returned base64-encoded with their Content-Type.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible binary response
    """
    logger.info(
        "Received image serve request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}

    try:
        params = validate_request(
            ServeImageRequest,
            {
                "file": path_params.get("file"),
                "size": query_params.get("size"),
                "fit": query_params.get("fit"),
                "sig": query_params.get("sig"),
            },
        )
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = ServeService()

    try:
        request = service.parse_request(params.file, params.query())
    except InvalidSignatureError as exc:
        return ResponseBuilder.forbidden(exc.message, error=exc.error_code)
    except ImageValidationError as exc:
        logger.warning(
            "Rejected image request",
            extra={"file": params.file, "error_code": exc.error_code},
        )
        return ResponseBuilder.bad_request(exc.message, error=exc.error_code)

    try:
        served = service.serve(request)
    except NotFoundError:
        return ResponseBuilder.not_found("Image not found")
    except ImageServiceError as exc:
        logger.exception(
            "Serving image failed",
            extra={"image_id": str(request.id), "error_code": exc.error_code},
        )
        return error_response_for(exc)

    metrics.add_metric(name="ImagesServed", unit=MetricUnit.Count, value=1)
    if served.cache_hit:
        metrics.add_metric(name="ImageCacheHits", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.binary_response(
        served.content,
        content_type=served.mime_type,
        headers={"Cache-Control": IMAGE_CACHE_CONTROL},
    )
