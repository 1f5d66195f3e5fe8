"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

import logging

import psycopg2
from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from modules.storage.interfaces import IBlobStorage
from shared.config import get_settings
from shared.database import ConnectionManager
from shared.exceptions import DriveError

from ..dependencies import get_blob_storage, get_connection_manager

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    relay: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


def _check_database(manager: ConnectionManager) -> str:
    try:
        return "connected" if manager.get_connection().ping() else "unavailable"
    except (DriveError, psycopg2.Error) as e:
        logger.warning("Readiness: database unavailable: %s", e)
        return "unavailable"


async def _check_relay(storage: IBlobStorage) -> str:
    if not get_settings().relay_configured:
        return "not_configured"
    if not await storage.verify_credentials():
        return "invalid_credentials"
    if not await storage.verify_destination_access():
        return "destination_unreachable"
    return "available"


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    response: Response,
    manager: ConnectionManager = Depends(get_connection_manager),
    storage: IBlobStorage = Depends(get_blob_storage),
) -> ReadinessResponse:
    """
    Readiness check endpoint.

    Returns 503 unless the database answers a trivial query and the relay
    accepts the bot token and can see the destination chat.
    """
    database = await run_in_threadpool(_check_database, manager)
    relay = await _check_relay(storage)

    ready = database == "connected" and relay == "available"
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status="ready" if ready else "not_ready",
        database=database,
        relay=relay,
    )
