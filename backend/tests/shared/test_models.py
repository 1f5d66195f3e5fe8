"""
Tests for shared models.
"""

import pytest
from pydantic import ValidationError

from shared.models import AuthenticatedUser


class TestAuthenticatedUser:
    """Tests for the AuthenticatedUser model in shared."""

    def test_create_with_required_fields(self):
        """Should create user with only required fields."""
        user = AuthenticatedUser(
            id="user-123",
            email="test@example.com",
        )
        assert user.id == "user-123"
        assert user.email == "test@example.com"

    def test_default_values(self):
        """Should have correct default values."""
        user = AuthenticatedUser(id="user-123", email="test@example.com")
        assert user.name == ""
        assert user.role == "user"
        assert user.is_admin is False

    def test_admin_role(self):
        user = AuthenticatedUser(id="user-123", email="root@example.com", role="admin")
        assert user.is_admin is True

    def test_ignores_secret_fields(self):
        user = AuthenticatedUser(
            id="user-123",
            email="test@example.com",
            password_hash="$2b$12$abc",
        )
        assert "password_hash" not in user.model_dump()

    def test_is_immutable(self):
        """Should be frozen (immutable)."""
        user = AuthenticatedUser(id="user-123", email="test@example.com")
        with pytest.raises(ValidationError):
            user.role = "admin"

    def test_invalid_email_fails(self):
        """Should fail with invalid email format."""
        with pytest.raises(ValidationError):
            AuthenticatedUser(id="user-123", email="not-an-email")
