"""
File transfer endpoints.

Upload relays the bytes and records metadata; download streams the bytes
straight from the relay to the client without buffering them.
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import StreamingResponse

from modules.files.interfaces import IFileService
from modules.files.models import FileResponse
from shared.models import AuthenticatedUser

from ..dependencies import get_file_service
from ..middleware.auth import RequireAuth, SameOrigin
from ..middleware.rate_limit import rate_limit

router = APIRouter()


@router.post(
    "/upload",
    response_model=FileResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[SameOrigin, Depends(rate_limit("upload"))],
)
async def upload_file(
    file: UploadFile = File(...),
    user: AuthenticatedUser = RequireAuth,
    service: IFileService = Depends(get_file_service),
) -> FileResponse:
    """
    Upload a single file (multipart field ``file``).

    Limits: 50 MB per file; executables and scripts are refused.
    """
    data = await file.read()
    stored = await service.upload(
        user,
        data,
        file.filename or "file",
        file.content_type,
    )
    return FileResponse.from_stored(stored)


@router.get("/files/{file_id}/download")
async def download_file(
    file_id: str,
    user: AuthenticatedUser = RequireAuth,
    service: IFileService = Depends(get_file_service),
) -> StreamingResponse:
    """
    Stream a file the caller owns.

    Returns 404 for unknown files, 403 for files owned by someone else and
    503 when the relay cannot serve the bytes.
    """
    download = await service.open_download(user, file_id)
    stored = download.file

    headers = {
        "Content-Disposition": f"attachment; filename*=UTF-8''{quote(stored.name, safe='')}",
        "Cache-Control": "private, max-age=3600",
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
    }
    if stored.size_bytes:
        headers["Content-Length"] = str(stored.size_bytes)

    return StreamingResponse(
        download.stream,
        media_type=stored.mime_type or "application/octet-stream",
        headers=headers,
    )
