"""Tests for domain error handler to verify structured JSON error responses."""
import json
from datetime import datetime

import pytest
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.error_handlers import (
    ERROR_STATUS_MAP,
    domain_error_handler,
    request_validation_error_handler,
)
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    RequestValidationFailed,
    ValidationError,
)


class MockRequest:
    """Mock FastAPI Request object for testing."""

    def __init__(self, request_id: str = "test-request-123"):
        self.state = type('State', (), {'request_id': request_id})()


class TestDomainErrorExceptions:
    """Test domain exception classes and their error codes."""

    def test_domain_error_base(self):
        error = DomainError(
            code="TEST_001",
            message="Test error message",
            details={"key": "value"}
        )

        assert error.code == "TEST_001"
        assert error.message == "Test error message"
        assert error.details == {"key": "value"}
        assert str(error) == "Test error message"

    def test_not_found_error(self):
        """Test NotFoundError generates correct error code."""
        error = NotFoundError("reservation", "Reservation not found", {"reservation_id": "abc"})

        assert error.code == "NF_RESERVATION_001"
        assert error.message == "Reservation not found"
        assert error.details == {"reservation_id": "abc"}

    def test_not_found_error_default_message(self):
        error = NotFoundError("authorized_user")

        assert error.code == "NF_AUTHORIZED_USER_001"
        assert error.message == "authorized_user not found"
        assert error.details == {}

    def test_validation_error(self):
        error = ValidationError("initial_date", "Invalid date format")

        assert error.code == "VAL_INITIAL_DATE_001"
        assert error.message == "Validation failed for initial_date: Invalid date format"
        assert error.details == {"field": "initial_date"}

    def test_request_validation_failed_carries_errors(self):
        errors = [{"loc": ["body", "end_date"], "msg": "Field required", "type": "missing"}]
        error = RequestValidationFailed(errors)

        assert error.code == "VAL_REQUEST_001"
        assert error.details == {"errors": errors}

    def test_authentication_error_default(self):
        error = AuthenticationError("Invalid token or authentication failed")

        assert error.code == "AUTH_001"
        assert error.details == {}

    def test_authentication_error_custom(self):
        error = AuthenticationError("Token not provided", code="AUTH_TOKEN_MISSING")

        assert error.code == "AUTH_TOKEN_MISSING"
        assert error.message == "Token not provided"

    def test_authorization_error_default(self):
        error = AuthorizationError("Identity provider returned no user information")

        assert error.code == "AUTH_006"
        assert error.details == {}


class TestErrorStatusMap:
    """Test ERROR_STATUS_MAP mapping."""

    @pytest.mark.parametrize(
        "error_type, status_code",
        [
            (NotFoundError, 404),
            (ValidationError, 400),
            (RequestValidationFailed, 400),
            (AuthenticationError, 401),
            (AuthorizationError, 403),
        ],
    )
    def test_status_codes(self, error_type, status_code):
        assert ERROR_STATUS_MAP[error_type] == status_code


class TestDomainErrorHandler:
    """Test domain_error_handler function."""

    @pytest.mark.asyncio
    async def test_not_found_error_response(self):
        """Test NotFoundError returns 404 with structured JSON."""
        error = NotFoundError("reservation", "Reservation 999 not found", {"reservation_id": "999"})
        request = MockRequest(request_id="req-123")

        response = await domain_error_handler(request, error)

        assert isinstance(response, JSONResponse)
        assert response.status_code == 404

        data = json.loads(response.body.decode())
        assert data["data"] is None
        assert len(data["errors"]) == 1

        error_dict = data["errors"][0]
        assert error_dict["code"] == "NF_RESERVATION_001"
        assert error_dict["message"] == "Reservation 999 not found"
        assert error_dict["details"] == {"reservation_id": "999"}

    @pytest.mark.asyncio
    async def test_validation_error_response(self):
        error = ValidationError("colour", "unknown filter field")
        request = MockRequest(request_id="req-456")

        response = await domain_error_handler(request, error)

        assert response.status_code == 400
        error_dict = json.loads(response.body.decode())["errors"][0]
        assert error_dict["code"] == "VAL_COLOUR_001"
        assert error_dict["details"]["field"] == "colour"

    @pytest.mark.asyncio
    async def test_authentication_error_response_challenges_bearer(self):
        """Test AuthenticationError returns 401 with a Bearer challenge."""
        error = AuthenticationError("Invalid token or authentication failed", code="AUTH_TOKEN_INVALID")
        request = MockRequest(request_id="req-auth")

        response = await domain_error_handler(request, error)

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        error_dict = json.loads(response.body.decode())["errors"][0]
        assert error_dict["code"] == "AUTH_TOKEN_INVALID"

    @pytest.mark.asyncio
    async def test_authorization_error_response(self):
        error = AuthorizationError("Identity provider returned no user information")
        request = MockRequest(request_id="req-authz")

        response = await domain_error_handler(request, error)

        assert response.status_code == 403
        assert "WWW-Authenticate" not in response.headers
        assert json.loads(response.body.decode())["errors"][0]["code"] == "AUTH_006"

    @pytest.mark.asyncio
    async def test_response_includes_metadata(self):
        """Test error response includes request_id and timestamp."""
        error = NotFoundError("test_entity")
        request = MockRequest(request_id="test-request-id-12345")

        response = await domain_error_handler(request, error)

        data = json.loads(response.body.decode())
        assert data["meta"]["request_id"] == "test-request-id-12345"

        # Verify timestamp is a valid ISO datetime string
        datetime.fromisoformat(data["meta"]["timestamp"].replace('Z', '+00:00'))

    @pytest.mark.asyncio
    async def test_unknown_domain_error_returns_500(self):
        """Test unknown DomainError subclass returns 500."""

        class CustomDomainError(DomainError):
            pass

        error = CustomDomainError("CUSTOM_001", "Custom error message")
        request = MockRequest(request_id="req-custom")

        response = await domain_error_handler(request, error)

        assert response.status_code == 500
        error_dict = json.loads(response.body.decode())["errors"][0]
        assert error_dict["code"] == "CUSTOM_001"
        assert error_dict["message"] == "Custom error message"

    @pytest.mark.asyncio
    async def test_error_with_none_request_id(self):
        """Test error response when request has no request_id."""
        error = ValidationError("field", "Invalid field")

        request = type('Request', (), {
            'state': type('State', (), {})()
        })()

        response = await domain_error_handler(request, error)

        data = json.loads(response.body.decode())
        assert data["meta"]["request_id"] is None


class TestRequestValidationErrorHandler:
    """Schema validation failures are reported as 400 in the same envelope."""

    @pytest.mark.asyncio
    async def test_returns_400_with_error_list(self):
        exc = RequestValidationError([
            {"loc": ("body", "initial_date"), "msg": "Input should be a valid date", "type": "date_from_datetime_parsing"},
            {"loc": ("body", "end_date"), "msg": "Field required", "type": "missing"},
        ])
        request = MockRequest(request_id="req-val")

        response = await request_validation_error_handler(request, exc)

        assert response.status_code == 400
        data = json.loads(response.body.decode())
        assert data["data"] is None
        assert data["meta"]["request_id"] == "req-val"

        error_dict = data["errors"][0]
        assert error_dict["code"] == "VAL_REQUEST_001"
        assert error_dict["details"]["errors"] == [
            {"loc": ["body", "initial_date"], "msg": "Input should be a valid date", "type": "date_from_datetime_parsing"},
            {"loc": ["body", "end_date"], "msg": "Field required", "type": "missing"},
        ]


class TestErrorResponseStructure:
    """Test that all error responses have consistent structure."""

    @pytest.mark.asyncio
    async def test_all_errors_have_consistent_structure(self):
        errors = [
            NotFoundError("test", "Not found"),
            ValidationError("field", "Validation failed"),
            RequestValidationFailed([]),
            AuthenticationError("Authentication failed"),
            AuthorizationError("Authorization failed"),
        ]

        request = MockRequest(request_id="test-req")

        for error in errors:
            response = await domain_error_handler(request, error)
            data = json.loads(response.body.decode())

            assert data["data"] is None
            assert "request_id" in data["meta"]
            assert "timestamp" in data["meta"]
            assert isinstance(data["errors"], list)
            assert len(data["errors"]) == 1

            error_obj = data["errors"][0]
            assert isinstance(error_obj["code"], str)
            assert isinstance(error_obj["message"], str)
            assert isinstance(error_obj["details"], dict)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
