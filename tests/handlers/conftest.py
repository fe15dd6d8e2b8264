import base64
import json
from types import SimpleNamespace
from typing import Any

import pytest


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )


@pytest.fixture
def use_runtime(monkeypatch, runtime):
    """Make every service built without a runtime use the test runtime."""
    for module in (
        "handlers.serve_image.service",
        "handlers.upload_image.service",
        "handlers.delete_image.service",
    ):
        monkeypatch.setattr(f"{module}.get_runtime", lambda: runtime)

    return runtime


@pytest.fixture
def serve_image_event():
    def _event(file: str, **query: str) -> dict[str, Any]:
        return {
            "httpMethod": "GET",
            "path": f"/images/{file}",
            "pathParameters": {"file": file},
            "queryStringParameters": query or None,
        }

    return _event


@pytest.fixture
def upload_image_event(png_bytes):
    def _event(**overrides: Any) -> dict[str, Any]:
        body: dict[str, Any] = {
            "files": [base64.b64encode(png_bytes).decode("utf-8")],
            "format": "png",
        }
        body.update(overrides)
        return {
            "httpMethod": "POST",
            "path": "/images",
            "body": json.dumps(body),
            "headers": {"Content-Type": "application/json"},
        }

    return _event


@pytest.fixture
def delete_image_event():
    def _event(image_id: str | None = None, image_ids: list[str] | None = None) -> dict[str, Any]:
        if image_id is not None:
            return {
                "httpMethod": "DELETE",
                "path": f"/images/{image_id}",
                "pathParameters": {"image_id": image_id},
            }
        return {
            "httpMethod": "DELETE",
            "path": "/images",
            "body": json.dumps({"image_ids": image_ids or []}),
        }

    return _event
