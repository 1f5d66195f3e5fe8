"""Tests for shared/exceptions.py."""

import pytest

from shared.exceptions import (
    DriveError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    RateLimitError,
    ExternalServiceError,
)


class TestDriveError:
    def test_drive_error_message(self):
        """DriveError should store message."""
        error = DriveError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_drive_error_default_code(self):
        error = DriveError("Test error")
        assert error.code == "INTERNAL_ERROR"
        assert error.status_code == 500

    def test_drive_error_custom_code(self):
        """DriveError should accept custom code."""
        error = DriveError("Test error", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_to_dict_omits_empty_details(self):
        assert DriveError("Boom").to_dict() == {"error": "Boom", "code": "INTERNAL_ERROR"}

    def test_to_dict_includes_details(self):
        error = DriveError("Boom", details={"field": "name"})
        assert error.to_dict() == {
            "error": "Boom",
            "code": "INTERNAL_ERROR",
            "details": {"field": "name"},
        }


class TestSubclasses:
    @pytest.mark.parametrize(
        "error_class, status_code, code",
        [
            (NotFoundError, 404, "NOT_FOUND"),
            (ValidationError, 400, "VALIDATION_ERROR"),
            (ConflictError, 409, "CONFLICT"),
            (AuthenticationError, 401, "UNAUTHORIZED"),
            (AuthorizationError, 403, "FORBIDDEN"),
            (RateLimitError, 429, "RATE_LIMIT_EXCEEDED"),
        ],
    )
    def test_status_and_code(self, error_class, status_code, code):
        error = error_class("Nope")
        assert isinstance(error, DriveError)
        assert error.status_code == status_code
        assert error.code == code


class TestExternalServiceError:
    def test_stores_service(self):
        """ExternalServiceError should record the failing service."""
        error = ExternalServiceError("Relay unavailable", service="relay")
        assert error.service == "relay"
        assert error.status_code == 503
        assert error.details == {"service": "relay"}

    def test_keeps_extra_details(self):
        error = ExternalServiceError("Down", service="database", details={"attempt": 2})
        assert error.to_dict()["details"] == {"attempt": 2, "service": "database"}
