"""Tests for the auth module interface."""

from modules.auth.interfaces import IAuthService
from modules.auth.service import AuthService


class TestAuthInterface:
    METHODS = [
        "sign_token",
        "verify_token",
        "extract_token",
        "authenticate",
        "resolve_identity",
        "require_auth",
        "require_admin",
        "verify_ownership",
        "validate_origin",
        "register",
        "login",
    ]

    def test_interface_methods_exist(self):
        for method in self.METHODS:
            assert hasattr(IAuthService, method)

    def test_service_implements_interface(self, accounts, settings):
        service = AuthService(accounts=accounts, settings=settings)
        assert isinstance(service, IAuthService)
        for method in self.METHODS:
            assert callable(getattr(service, method))
