"""
Database connection manager for PostgreSQL.

Provides a single lazily-created connection pool shared by every caller in
the process. Concurrent first use results in exactly one connect attempt;
all callers wait on that attempt and receive the same handle.
"""

import atexit
import logging
import signal
import socket
import threading
from concurrent.futures import Future
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

import psycopg2
from psycopg2.extensions import parse_dsn
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool

from .config import Settings, get_settings
from .exceptions import ExternalServiceError


PoolFactory = Callable[..., Any]


class DatabaseConnectionError(ExternalServiceError):
    """Raised when the database cannot be reached or the pool is exhausted."""

    def __init__(self, message: str):
        super().__init__(message, service="database", code="DATABASE_UNAVAILABLE")


class DatabaseHandle:
    """
    Shared handle over a thread-safe connection pool.

    The handle itself is read-only after creation; concurrency is delegated
    to the pool. A semaphore bounds borrowers so callers wait for a free
    connection instead of failing immediately when the pool is busy.
    """

    def __init__(self, pool: Any, max_size: int, acquire_timeout: float):
        self._pool = pool
        self._slots = threading.BoundedSemaphore(max_size)
        self._acquire_timeout = acquire_timeout

    @property
    def closed(self) -> bool:
        return bool(getattr(self._pool, "closed", False))

    @contextmanager
    def cursor(self) -> Iterator[RealDictCursor]:
        """
        Borrow a pooled connection and yield a dict-row cursor.

        Commits when the block exits cleanly, rolls back otherwise, and
        always returns the connection to the pool.
        """
        if not self._slots.acquire(timeout=self._acquire_timeout):
            raise DatabaseConnectionError("Database connection pool exhausted")
        try:
            conn = self._pool.getconn()
            try:
                with conn.cursor(cursor_factory=RealDictCursor) as cur:
                    yield cur
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                self._pool.putconn(conn)
        finally:
            self._slots.release()

    def ping(self) -> bool:
        """Run a trivial query; used by readiness probes."""
        with self.cursor() as cur:
            cur.execute("SELECT 1 AS ok")
            row = cur.fetchone()
        return bool(row and row["ok"] == 1)

    def close(self) -> None:
        if not self.closed:
            self._pool.closeall()


def _resolve_ipv4(host: str, port: int) -> Optional[str]:
    """Resolve a hostname to its first IPv4 address, skipping IPv6 entirely."""
    if not host or host.startswith("/") or "," in host:
        return None
    try:
        socket.inet_aton(host)
        return host
    except OSError:
        pass
    infos = socket.getaddrinfo(host, port, family=socket.AF_INET, type=socket.SOCK_STREAM)
    return infos[0][4][0] if infos else None


class ConnectionManager:
    """
    Lazily connects to the database and caches the resulting handle.

    At most one connect attempt is in flight at a time. Callers arriving
    while an attempt is running wait on the same future. A failed attempt
    is forgotten so that a later call can try again; failures are never
    retried automatically. A ``disconnect()`` that lands while an attempt
    is running discards that attempt's pool instead of caching it.

    Once shutdown has begun no new pool is created; an existing handle
    keeps serving in-flight work until the pool is closed.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        pool_factory: Optional[PoolFactory] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._settings = settings or get_settings()
        self._pool_factory = pool_factory or ThreadedConnectionPool
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._handle: Optional[DatabaseHandle] = None
        self._pending: Optional[Future] = None
        self._shutting_down = False
        self._shutdown_done = False
        self._previous_handlers: dict[int, Any] = {}

    @property
    def connected(self) -> bool:
        return self._handle is not None

    @property
    def shutting_down(self) -> bool:
        return self._shutting_down

    def get_connection(self) -> DatabaseHandle:
        """
        Return the shared database handle, connecting on first use.

        Raises:
            DatabaseConnectionError: If the connect attempt fails, is
                interrupted by ``disconnect()``, or shutdown has begun.
        """
        with self._lock:
            if self._handle is not None:
                return self._handle
            if self._shutting_down:
                raise DatabaseConnectionError("Database is shutting down")
            owner = self._pending is None
            if owner:
                pending = self._pending = Future()
            else:
                pending = self._pending

        if not owner:
            return pending.result()

        try:
            handle = self._connect()
        except BaseException as e:
            with self._lock:
                if self._pending is pending:
                    self._pending = None
            pending.set_exception(e)
            raise

        with self._lock:
            current = self._pending is pending and not self._shutting_down
            if current:
                self._handle = handle
                self._pending = None

        if not current:
            # disconnect() or shutdown ran while this attempt was in flight
            handle.close()
            error = DatabaseConnectionError("Database was disconnected while connecting")
            pending.set_exception(error)
            raise error

        pending.set_result(handle)
        return handle

    def _connect_kwargs(self) -> dict[str, Any]:
        settings = self._settings
        kwargs: dict[str, Any] = {
            "dsn": settings.database_url,
            "connect_timeout": settings.db_connect_timeout,
            "options": f"-c statement_timeout={settings.db_socket_timeout * 1000}",
            "tcp_user_timeout": settings.db_socket_timeout * 1000,
            "application_name": "relaydrive",
        }
        params = parse_dsn(settings.database_url)
        hostaddr = _resolve_ipv4(params.get("host", ""), int(params.get("port") or 5432))
        if hostaddr and "hostaddr" not in params:
            kwargs["hostaddr"] = hostaddr
        return kwargs

    def _connect(self) -> DatabaseHandle:
        settings = self._settings
        try:
            pool = self._pool_factory(1, settings.db_max_pool_size, **self._connect_kwargs())
        except (psycopg2.Error, OSError) as e:
            self._logger.error("Database connection failed: %s", e)
            raise DatabaseConnectionError(f"Database connection failed: {e}") from e

        self._logger.info("Connected to database (pool size %d)", settings.db_max_pool_size)
        return DatabaseHandle(pool, settings.db_max_pool_size, settings.db_connect_timeout)

    def disconnect(self) -> None:
        """
        Close the pool and clear all cached state.

        Idempotent, and safe to call from a signal handler: the lock is
        reentrant, so interrupting a thread that holds it cannot deadlock.
        A connect attempt still in flight is abandoned and its pool closed
        when it completes.
        """
        with self._lock:
            handle, self._handle = self._handle, None
            self._pending = None
        if handle is None:
            return
        try:
            handle.close()
        except psycopg2.Error as e:
            self._logger.warning("Error while closing database pool: %s", e)
        self._logger.info("Disconnected from database")

    def _shutdown(self) -> None:
        with self._lock:
            self._shutting_down = True
            if self._shutdown_done:
                return
            self._shutdown_done = True
        self.disconnect()

    def _handle_signal(self, signum: int, frame: Any) -> None:
        # Only flag shutdown; the pool stays open for in-flight requests and
        # is closed by the app's lifespan or the atexit hook.
        self._shutting_down = True
        previous = self._previous_handlers.get(signum)
        if callable(previous):
            previous(signum, frame)
        elif previous != signal.SIG_IGN:
            raise SystemExit(128 + signum)

    def install_shutdown_hooks(
        self, signals: tuple[int, ...] = (signal.SIGINT, signal.SIGTERM)
    ) -> None:
        """
        Stop new connects on SIGINT/SIGTERM and disconnect once at exit.

        Previously installed handlers (e.g. the ASGI server's) still run, so
        in-flight requests drain on the open pool. Without one, the signal
        exits the interpreter and the ``atexit`` hook closes the pool.
        """
        atexit.register(self._shutdown)
        if threading.current_thread() is not threading.main_thread():
            self._logger.debug("Not in main thread; skipping signal handlers")
            return
        for signum in signals:
            if signum in self._previous_handlers:
                continue
            self._previous_handlers[signum] = signal.getsignal(signum)
            signal.signal(signum, self._handle_signal)


# Module-level manager cache
_manager: Optional[ConnectionManager] = None
_manager_lock = threading.Lock()


def get_connection_manager() -> ConnectionManager:
    """Get the process-wide connection manager."""
    global _manager
    with _manager_lock:
        if _manager is None:
            _manager = ConnectionManager()
        return _manager


def get_connection() -> DatabaseHandle:
    """Shortcut for ``get_connection_manager().get_connection()``."""
    return get_connection_manager().get_connection()


def reset_connection_manager() -> None:
    """
    Disconnect and drop the cached manager.

    Useful for testing or when configuration changes.
    """
    global _manager
    with _manager_lock:
        manager, _manager = _manager, None
    if manager is not None:
        manager.disconnect()
