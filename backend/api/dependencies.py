"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Route handlers only ever see the interfaces, so tests can swap any piece
through ``app.dependency_overrides`` or by assigning to the container.
"""

import logging
from typing import TYPE_CHECKING, Optional

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService
    from modules.auth.repository import AccountRepository
    from modules.files.interfaces import IFileService
    from modules.files.repository import FileRepository
    from modules.ratelimit.service import RateLimiter
    from modules.storage.interfaces import IBlobStorage
    from shared.config import Settings
    from shared.database import ConnectionManager

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._connection_manager: "Optional[ConnectionManager]" = None
        self._account_repository: "Optional[AccountRepository]" = None
        self._file_repository: "Optional[FileRepository]" = None
        self._auth_service: "Optional[IAuthService]" = None
        self._rate_limiter: "Optional[RateLimiter]" = None
        self._storage: "Optional[IBlobStorage]" = None
        self._file_service: "Optional[IFileService]" = None

    @property
    def settings(self) -> "Settings":
        from shared.config import get_settings
        return get_settings()

    @property
    def connection_manager(self) -> "ConnectionManager":
        """Get the process-wide database connection manager."""
        if self._connection_manager is None:
            from shared.database import get_connection_manager
            self._connection_manager = get_connection_manager()
        return self._connection_manager

    @connection_manager.setter
    def connection_manager(self, value: "ConnectionManager") -> None:
        self._connection_manager = value

    @property
    def accounts(self) -> "AccountRepository":
        """Get the account repository instance."""
        if self._account_repository is None:
            from modules.auth.repository import AccountRepository
            self._account_repository = AccountRepository(
                lambda: self.connection_manager.get_connection()
            )
        return self._account_repository

    @accounts.setter
    def accounts(self, value: "AccountRepository") -> None:
        self._account_repository = value

    @property
    def file_repository(self) -> "FileRepository":
        """Get the file metadata repository instance."""
        if self._file_repository is None:
            from modules.files.repository import FileRepository
            self._file_repository = FileRepository(
                lambda: self.connection_manager.get_connection()
            )
        return self._file_repository

    @file_repository.setter
    def file_repository(self, value: "FileRepository") -> None:
        self._file_repository = value

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(accounts=self.accounts, settings=self.settings)
        return self._auth_service

    @auth.setter
    def auth(self, value: "IAuthService") -> None:
        self._auth_service = value

    @property
    def rate_limiter(self) -> "RateLimiter":
        """Get the rate limiter instance. The sweeper is started by the lifespan."""
        if self._rate_limiter is None:
            from modules.ratelimit.service import RateLimiter
            self._rate_limiter = RateLimiter(
                sweep_interval=self.settings.rate_limit_sweep_interval
            )
        return self._rate_limiter

    @rate_limiter.setter
    def rate_limiter(self, value: "RateLimiter") -> None:
        self._rate_limiter = value

    @property
    def storage(self) -> "IBlobStorage":
        """Get the blob storage gateway instance."""
        if self._storage is None:
            from modules.storage.service import RelayStorageGateway
            self._storage = RelayStorageGateway.from_settings(self.settings)
        return self._storage

    @storage.setter
    def storage(self, value: "IBlobStorage") -> None:
        self._storage = value

    @property
    def files(self) -> "IFileService":
        """Get the file service instance."""
        if self._file_service is None:
            from modules.files.service import FileService
            self._file_service = FileService(
                files=self.file_repository,
                storage=self.storage,
                auth=self.auth,
            )
        return self._file_service

    @files.setter
    def files(self, value: "IFileService") -> None:
        self._file_service = value

    async def aclose(self) -> None:
        """
        Release everything the container opened.

        Only services that were actually created are touched, so shutting
        down an app that never served a request does not connect anywhere.
        """
        if self._storage is not None and hasattr(self._storage, "aclose"):
            await self._storage.aclose()
        if self._rate_limiter is not None:
            self._rate_limiter.destroy()
        if self._connection_manager is not None:
            self._connection_manager.disconnect()
        logger.debug("Service container closed")

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._connection_manager = None
        self._account_repository = None
        self._file_repository = None
        self._auth_service = None
        self._rate_limiter = None
        self._storage = None
        self._file_service = None


# Module-level container singleton
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_rate_limiter() -> "RateLimiter":
    """FastAPI dependency for the rate limiter."""
    return get_container().rate_limiter


def get_blob_storage() -> "IBlobStorage":
    """FastAPI dependency for the blob storage gateway."""
    return get_container().storage


def get_file_service() -> "IFileService":
    """FastAPI dependency for file service."""
    return get_container().files


def get_account_repository() -> "AccountRepository":
    """FastAPI dependency for account repository."""
    return get_container().accounts


def get_file_repository() -> "FileRepository":
    """FastAPI dependency for file repository."""
    return get_container().file_repository


def get_connection_manager() -> "ConnectionManager":
    """FastAPI dependency for the database connection manager."""
    return get_container().connection_manager
