"""
Unit tests for imaging.models.errors
"""

import pytest

from imaging.models.errors import (
    BadURLError,
    CacheError,
    DuplicateStoreError,
    FileSizeError,
    ImageDecodeError,
    ImageFitUnsupportedError,
    ImageFormatUnsupportedError,
    ImageServiceError,
    InvalidSignatureError,
    MetadataOperationFailedError,
    NotFoundError,
    StorageError,
    StoreNotRegisteredError,
    ValidationError,
)
from imaging.utils.constants import (
    ERROR_CODE_BAD_URL,
    ERROR_CODE_INVALID_SIGNATURE,
    ERROR_CODE_STORE_NOT_REGISTERED,
    ERROR_CODE_VALIDATION_FAILED,
)


class TestImageServiceError:
    def test_base_error(self) -> None:
        err = ImageServiceError(
            message="Something went wrong",
            error_code="TEST_ERROR",
            details={"foo": "bar"},
        )

        assert err.message == "Something went wrong"
        assert err.error_code == "TEST_ERROR"
        assert err.details == {"foo": "bar"}
        assert str(err) == "Something went wrong"

    def test_details_default_to_empty_dict(self) -> None:
        err = ImageServiceError(message="x", error_code="X")

        assert err.details == {}


class TestValidationErrors:
    def test_validation_error_defaults(self) -> None:
        err = ValidationError(message="Invalid input")

        assert err.error_code == ERROR_CODE_VALIDATION_FAILED
        assert err.details == {}

    @pytest.mark.parametrize(
        "error_cls",
        [
            BadURLError,
            ImageFormatUnsupportedError,
            ImageFitUnsupportedError,
            InvalidSignatureError,
            ImageDecodeError,
        ],
    )
    def test_request_errors_are_validation_errors_with_default_message(self, error_cls) -> None:
        err = error_cls()

        assert isinstance(err, ValidationError)
        assert err.message

    def test_specific_error_codes(self) -> None:
        assert BadURLError().error_code == ERROR_CODE_BAD_URL
        assert InvalidSignatureError().error_code == ERROR_CODE_INVALID_SIGNATURE

    def test_file_size_error_is_validation_error(self) -> None:
        err = FileSizeError(message="File size exceeds 25MB limit")

        assert isinstance(err, ValidationError)


class TestInfrastructureErrors:
    def test_store_not_registered(self) -> None:
        err = StoreNotRegisteredError(details={"store": "ftp"})

        assert err.error_code == ERROR_CODE_STORE_NOT_REGISTERED
        assert err.details == {"store": "ftp"}

    @pytest.mark.parametrize(
        "error_cls",
        [
            NotFoundError,
            DuplicateStoreError,
            StorageError,
            CacheError,
            MetadataOperationFailedError,
        ],
    )
    def test_errors_are_not_validation_errors(self, error_cls) -> None:
        err = error_cls(message="failure")

        assert isinstance(err, ImageServiceError)
        assert not isinstance(err, ValidationError)
