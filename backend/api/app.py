"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from modules.ratelimit.exceptions import RateLimitExceededError
from modules.ratelimit.service import rate_limit_headers
from shared.config import get_settings
from shared.exceptions import AuthenticationError, DriveError, ExternalServiceError
from shared.logging_config import configure_logging

from .dependencies import get_container
from .models.errors import ErrorResponse, FieldError, ValidationErrorResponse
from .routes import admin, auth, files, health, user

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    container = get_container()
    container.connection_manager.install_shutdown_hooks()
    container.rate_limiter.start()
    if not settings.relay_configured:
        logger.warning("Relay bot token or chat ID missing; uploads and downloads will fail")
    logger.info("Starting %s on %s:%d", settings.app_name, settings.host, settings.port)
    yield
    # Shutdown
    logger.info("Shutting down %s", settings.app_name)
    await container.aclose()


async def drive_error_handler(request: Request, exc: DriveError) -> JSONResponse:
    """Render any DriveError as the standard error envelope."""
    headers = {}
    if isinstance(exc, RateLimitExceededError):
        headers.update(rate_limit_headers(exc.status))
    elif isinstance(exc, AuthenticationError):
        headers["WWW-Authenticate"] = "Bearer"

    if isinstance(exc, ExternalServiceError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse.from_exception(exc).model_dump(exclude_none=True),
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        FieldError(
            field=".".join(str(part) for part in error["loc"] if part != "body"),
            message=error["msg"],
        )
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationErrorResponse(details=details).model_dump(),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Internal server error", code="INTERNAL_ERROR").model_dump(
            exclude_none=True
        ),
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Personal cloud storage backed by a messaging bot relay",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.add_exception_handler(DriveError, drive_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(user.router, prefix="/api", tags=["user"])
    app.include_router(files.router, prefix="/api", tags=["files"])
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])

    return app


# Application instance for uvicorn
app = create_app()
