"""
Tests for shared_utils.error_handler.

Covers every exception subclass, to_dict() serialisation, HTTP status codes
and log_exception().
"""

from unittest.mock import MagicMock

import pytest

from shared_utils.constants import ErrorCode
from shared_utils.error_handler import (
    AppException,
    ConfigurationError,
    ExternalServiceError,
    ModelError,
    NotFoundError,
    StorageError,
    ValidationError,
    log_exception,
)


class TestAppException:
    def test_defaults(self) -> None:
        exc = AppException(error_code="TEST", message="boom")
        assert exc.http_status == 500
        assert exc.context == {}
        assert str(exc) == "boom"

    def test_to_dict_structure(self) -> None:
        exc = AppException("CODE", "msg", context={"a": 1})
        assert exc.to_dict() == {"error": {"code": "CODE", "message": "msg", "context": {"a": 1}}}


class TestSubclasses:
    @pytest.mark.parametrize(
        "exc,code,status",
        [
            (ValidationError("bad"), ErrorCode.INVALID_INPUT, 400),
            (NotFoundError("Project", "p1"), ErrorCode.NOT_FOUND, 404),
            (ConfigurationError("missing"), ErrorCode.INVALID_CONFIG, 500),
            (ModelError("down"), ErrorCode.MODEL_NOT_AVAILABLE, 503),
            (ExternalServiceError("S3", "denied"), ErrorCode.EXTERNAL_SERVICE_ERROR, 503),
            (StorageError("locked"), ErrorCode.STORAGE_ERROR, 503),
        ],
    )
    def test_codes_and_statuses(self, exc, code, status) -> None:
        assert isinstance(exc, AppException)
        assert exc.error_code == code.value
        assert exc.http_status == status

    def test_not_found_message_and_context(self) -> None:
        exc = NotFoundError("Project", "p1")
        assert exc.message == "Project not found"
        assert exc.context == {"id": "p1"}

    def test_external_service_message_and_context(self) -> None:
        exc = ExternalServiceError("AutoRAG", "HTTP 404", context={"status_code": 404})
        assert exc.message == "AutoRAG unavailable: HTTP 404"
        assert exc.context == {"status_code": 404, "service": "AutoRAG"}


class TestLogException:
    def test_app_exception_fields(self) -> None:
        logger = MagicMock()
        log_exception(ValidationError("bad", context={"field": "id"}), logger=logger)

        _, kwargs = logger.error.call_args
        assert logger.error.call_args[0][0] == "app_exception"
        assert kwargs["error_code"] == ErrorCode.INVALID_INPUT.value
        assert kwargs["http_status"] == 400
        assert kwargs["context"] == {"field": "id"}

    def test_unexpected_exception(self) -> None:
        logger = MagicMock()
        log_exception(RuntimeError("boom"), logger=logger)

        assert logger.error.call_args[0][0] == "unexpected_exception"
        assert logger.error.call_args[1]["error_type"] == "RuntimeError"

    def test_default_logger(self) -> None:
        log_exception(RuntimeError("boom"))
