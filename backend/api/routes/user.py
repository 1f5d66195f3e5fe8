"""
Profile endpoint for the signed-in user.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from modules.files.models import StorageUsage
from modules.files.repository import FileRepository
from modules.storage.validation import format_file_size
from shared.models import AuthenticatedUser

from ..dependencies import get_file_repository
from ..middleware.auth import RequireAuth

router = APIRouter()


class UserProfileResponse(BaseModel):
    """The caller's identity plus totals over their non-deleted files."""

    id: str
    email: str
    name: str
    role: str
    stats: StorageUsage
    total_storage: str


@router.get("/user", response_model=UserProfileResponse)
def get_profile(
    user: AuthenticatedUser = RequireAuth,
    files: FileRepository = Depends(get_file_repository),
) -> UserProfileResponse:
    usage = files.get_storage_usage(user.id)
    return UserProfileResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        stats=usage,
        total_storage=format_file_size(usage.total_bytes),
    )
