import json
from http import HTTPStatus
from types import SimpleNamespace
from typing import Any

import pytest

from imaging.models.errors import (
    InvalidSignatureError,
    NotFoundError,
    StorageError,
)
from imaging.utils.decorators import _get_user_friendly_message, api_gateway_handler
from imaging.utils.response import ResponseBuilder

CONTEXT = SimpleNamespace(aws_request_id="req-1")


def _raising(exc: Exception):
    @api_gateway_handler
    def handler(event: Any, context: Any) -> dict[str, Any]:
        raise exc

    return handler


class TestApiGatewayHandler:
    def test_passes_through_response(self) -> None:
        @api_gateway_handler
        def handler(event: Any, context: Any) -> dict[str, Any]:
            return ResponseBuilder.ok({"msg": "ok"}, request_id=context.aws_request_id)

        resp = handler({"httpMethod": "GET"}, CONTEXT)

        assert resp["statusCode"] == HTTPStatus.OK
        assert json.loads(resp["body"])["request_id"] == "req-1"

    def test_options_preflight_skips_handler(self) -> None:
        handler = _raising(RuntimeError("never called"))

        resp = handler({"httpMethod": "OPTIONS"}, CONTEXT, cors_origin="https://example.com")

        assert resp["statusCode"] == HTTPStatus.NO_CONTENT
        assert resp["headers"]["Access-Control-Allow-Origin"] == "https://example.com"

    @pytest.mark.parametrize(
        "exc,status",
        [
            (InvalidSignatureError(), HTTPStatus.FORBIDDEN),
            (NotFoundError(message="Image not found"), HTTPStatus.NOT_FOUND),
            (StorageError(message="bucket unreachable"), HTTPStatus.INTERNAL_SERVER_ERROR),
            (ValueError("Invalid size"), HTTPStatus.BAD_REQUEST),
            (KeyError("body"), HTTPStatus.BAD_REQUEST),
            (PermissionError("Image uploads are disabled"), HTTPStatus.FORBIDDEN),
            (RuntimeError("boom"), HTTPStatus.INTERNAL_SERVER_ERROR),
        ],
    )
    def test_translates_exceptions(self, exc, status) -> None:
        resp = _raising(exc)({}, CONTEXT)

        assert resp["statusCode"] == status
        assert json.loads(resp["body"])["request_id"] == "req-1"

    def test_unexpected_error_message_is_generic(self) -> None:
        resp = _raising(RuntimeError("connection string leaked"))({}, CONTEXT)

        assert "leaked" not in resp["body"]


class TestUserFriendlyMessage:
    def test_keeps_specific_messages(self) -> None:
        assert _get_user_friendly_message(ValueError("Invalid size")) == "Invalid size"

    def test_rewrites_generic_messages(self) -> None:
        assert _get_user_friendly_message(ValueError("x < 0")).startswith("The provided data")
        assert _get_user_friendly_message(KeyError("body")).startswith("A required field")
        assert _get_user_friendly_message(TypeError("NoneType")).startswith("The data format")
