"""
Admin-only endpoints.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from modules.auth.models import AccountStats
from modules.auth.repository import AccountRepository
from modules.files.models import FileStats
from modules.files.repository import FileRepository
from modules.storage.validation import format_file_size

from ..dependencies import get_account_repository, get_file_repository
from ..middleware.auth import RequireAdmin

router = APIRouter()


class AdminStatsResponse(BaseModel):
    """System-wide account and storage totals."""

    users: AccountStats
    files: FileStats
    total_storage: str


@router.get("/stats", response_model=AdminStatsResponse, dependencies=[RequireAdmin])
def get_stats(
    accounts: AccountRepository = Depends(get_account_repository),
    files: FileRepository = Depends(get_file_repository),
) -> AdminStatsResponse:
    """
    Account and file totals.

    Requires the admin role, re-checked against the database on every call.
    """
    file_stats = files.get_stats()
    return AdminStatsResponse(
        users=accounts.get_stats(),
        files=file_stats,
        total_storage=format_file_size(file_stats.total_bytes),
    )
