"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from pydantic import BaseModel, EmailStr, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    Resolved from a verified token plus the persisted account record, with
    secret fields stripped. Lives only for the duration of one request.
    """

    id: str = Field(..., description="Account ID (UUID)")
    email: EmailStr = Field(..., description="User's email address")
    name: str = Field(default="", description="Display name")
    role: str = Field(default="user", description="Account role (user or admin)")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
