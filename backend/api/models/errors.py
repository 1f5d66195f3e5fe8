"""
Error envelope models.

Every failed request is answered with ``{"error", "code", "details"?}``.
"""

from typing import Any, Optional

from pydantic import BaseModel

from shared.exceptions import DriveError


class ErrorResponse(BaseModel):
    """Envelope for any DriveError."""

    error: str
    code: Optional[str] = None
    details: Optional[dict[str, Any]] = None

    @classmethod
    def from_exception(cls, exc: DriveError) -> "ErrorResponse":
        return cls(**exc.to_dict())


class FieldError(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """Request body or parameters failed validation."""

    error: str = "Invalid input"
    code: str = "VALIDATION_ERROR"
    details: list[FieldError]
