"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from shared.models import AuthenticatedUser

Role = Literal["user", "admin"]

# bcrypt refuses anything longer
MAX_PASSWORD_BYTES = 72


def _within_bcrypt_limit(password: str) -> str:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


class TokenPayload(BaseModel):
    """Decoded claims of a credential token."""

    sub: str = Field(..., description="Subject (account ID)")
    email: str = Field(..., description="Subject's email at signing time")
    iat: int = Field(..., description="Issued at timestamp")
    exp: int = Field(..., description="Expiration timestamp")


class Account(BaseModel):
    """
    Persisted account record.

    Carries the password hash, so it must never be returned to clients;
    convert with to_authenticated_user() first.
    """

    id: str
    email: EmailStr
    name: str
    password_hash: str = Field(..., repr=False)
    role: Role = "user"
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_authenticated_user(self) -> AuthenticatedUser:
        return AuthenticatedUser(id=self.id, email=self.email, name=self.name, role=self.role)


class AccountStats(BaseModel):
    total: int = 0
    active: int = 0
    admins: int = 0


class AuthResult(BaseModel):
    """
    Outcome of authenticating a request.

    The non-raising counterpart of require_auth: a failed result carries
    the same status and code the raised error would.
    """

    ok: bool
    user: Optional[AuthenticatedUser] = None
    status: Optional[int] = None
    code: Optional[str] = None

    @classmethod
    def success(cls, user: AuthenticatedUser) -> "AuthResult":
        return cls(ok=True, user=user)

    @classmethod
    def unauthorized(cls) -> "AuthResult":
        return cls(ok=False, status=401, code="UNAUTHORIZED")


class RegisterRequest(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=100)
    password: str = Field(..., min_length=8, max_length=MAX_PASSWORD_BYTES)

    @field_validator("password")
    @classmethod
    def _check_password_bytes(cls, value: str) -> str:
        return _within_bcrypt_limit(value)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters long")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=MAX_PASSWORD_BYTES)

    @field_validator("password")
    @classmethod
    def _check_password_bytes(cls, value: str) -> str:
        return _within_bcrypt_limit(value)
