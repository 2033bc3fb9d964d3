"""
Unit Tests for Exception Handlers.

Tests the exception handler functions in isolation.
"""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import Request
from fastapi.exceptions import RequestValidationError

from coldboard.backend.core.exception_handlers import (
    EXCEPTION_STATUS_MAP,
    _get_request_id,
    application_error_handler,
    unhandled_exception_handler,
    validation_error_handler,
)
from coldboard.backend.core.exceptions import (
    ApplicationError,
    ExternalServiceError,
    MalformedResponseError,
    ValidationError,
)


def _body(response) -> dict:
    return json.loads(response.body)


class TestExceptionStatusMapping:
    """Tests for exception to HTTP status code mapping."""

    def test_validation_maps_to_400(self):
        assert EXCEPTION_STATUS_MAP[ValidationError] == 400

    def test_upstream_failures_map_to_502(self):
        assert EXCEPTION_STATUS_MAP[ExternalServiceError] == 502
        assert EXCEPTION_STATUS_MAP[MalformedResponseError] == 502


class TestGetRequestId:
    """Tests for request ID extraction."""

    def test_extracts_from_request_state(self):
        request = MagicMock(spec=Request)
        request.state.request_id = "state-123"
        request.headers = {}

        assert _get_request_id(request) == "state-123"

    def test_extracts_from_header(self):
        request = MagicMock(spec=Request)
        del request.state.request_id
        request.headers = {"x-request-id": "header-456"}

        assert _get_request_id(request) == "header-456"

    def test_returns_none_when_not_present(self):
        request = MagicMock(spec=Request)
        del request.state.request_id
        request.headers = {}

        assert _get_request_id(request) is None


class TestApplicationErrorHandler:
    """Tests for application_error_handler."""

    @pytest.fixture
    def mock_request(self):
        request = MagicMock(spec=Request)
        request.url.path = "/api/v1/board/layout"
        request.method = "POST"
        request.headers = {"x-request-id": "test-123"}
        del request.state.request_id
        return request

    @pytest.mark.asyncio
    async def test_validation_error_returns_400(self, mock_request):
        response = await application_error_handler(mock_request, ValidationError("Bad range"))

        assert response.status_code == 400
        body = _body(response)
        assert body["success"] is False
        assert body["error"]["code"] == "VAL_VALIDATION_ERROR"
        assert body["error"]["message"] == "Bad range"
        assert body["metadata"]["request_id"] == "test-123"

    @pytest.mark.asyncio
    async def test_validation_details_are_included(self, mock_request):
        exc = ValidationError("Required fields missing", details={"missing_fields": ["board_id"]})

        response = await application_error_handler(mock_request, exc)

        assert response.status_code == 400
        assert _body(response)["error"]["details"] == {"missing_fields": ["board_id"]}

    @pytest.mark.asyncio
    async def test_upstream_status_is_reported(self, mock_request):
        exc = ExternalServiceError("Note not found", status_code=404, server_message="Note not found")

        response = await application_error_handler(mock_request, exc)

        assert response.status_code == 502
        body = _body(response)
        assert body["error"]["code"] == "SYS_EXTERNAL_SERVICE_ERROR"
        assert body["error"]["details"] == {"upstream_status": 404}

    @pytest.mark.asyncio
    async def test_malformed_response(self, mock_request):
        response = await application_error_handler(mock_request, MalformedResponseError())

        assert response.status_code == 502
        assert _body(response)["error"]["code"] == "SYS_MALFORMED_RESPONSE"

    @pytest.mark.asyncio
    async def test_unmapped_error_is_500(self, mock_request):
        response = await application_error_handler(mock_request, ApplicationError("odd"))
        assert response.status_code == 500


class TestOtherHandlers:
    @pytest.fixture
    def mock_request(self):
        request = MagicMock(spec=Request)
        request.url.path = "/api/v1/board/layout"
        request.method = "POST"
        request.headers = {}
        request.state.request_id = "req-1"
        return request

    @pytest.mark.asyncio
    async def test_validation_error_handler(self, mock_request):
        exc = RequestValidationError([
            {"loc": ("body", "viewport_width"), "msg": "Input should be greater than 0", "type": "greater_than"},
        ])

        response = await validation_error_handler(mock_request, exc)

        assert response.status_code == 422
        body = _body(response)
        assert body["error"]["code"] == "VAL_REQUEST_INVALID"
        assert body["error"]["details"]["validation_errors"][0]["field"] == "body.viewport_width"

    @pytest.mark.asyncio
    async def test_unhandled_exception_hides_internals(self, mock_request):
        response = await unhandled_exception_handler(mock_request, RuntimeError("secret detail"))

        assert response.status_code == 500
        body = _body(response)
        assert body["error"]["code"] == "SYS_INTERNAL_ERROR"
        assert "secret" not in body["error"]["message"]
        assert body["metadata"]["request_id"] == "req-1"
