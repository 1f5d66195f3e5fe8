"""
In-memory rolling-window rate limiter.

Each key gets a budget of ``max_requests`` that resets ``window_seconds``
after the first request of the current window. The record map is the only
shared mutable state; every transition happens under a single lock so two
concurrent requests can never both be admitted past the limit.
"""

import logging
import math
import threading
import time
from typing import Callable, Mapping, Optional

from .models import RateLimitPolicy, RateLimitRecord, RateLimitStatus


DEFAULT_SWEEP_INTERVAL = 5 * 60  # seconds
UNKNOWN_CLIENT = "unknown"


class RateLimiter:
    """
    Per-key request budgets with a background sweep of expired records.

    Instances are independent: tests create their own, the application
    creates one and calls ``start()``/``destroy()`` around its lifespan.
    """

    def __init__(
        self,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ):
        self._sweep_interval = sweep_interval
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._records: dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def start(self) -> "RateLimiter":
        """Start the background sweep thread (no-op if already running)."""
        if self._sweeper is not None and self._sweeper.is_alive():
            return self
        self._stop.clear()
        self._sweeper = threading.Thread(
            target=self._run_sweeper, name="rate-limit-sweeper", daemon=True
        )
        self._sweeper.start()
        return self

    def _run_sweeper(self) -> None:
        while not self._stop.wait(self._sweep_interval):
            removed = self.sweep()
            if removed:
                self._logger.debug("Swept %d expired rate limit records", removed)

    def _admit(
        self, key: str, max_requests: int, window_seconds: float, now: float
    ) -> tuple[bool, RateLimitRecord]:
        # Caller holds self._lock
        record = self._records.get(key)
        if record is None or now >= record.reset_at:
            record = RateLimitRecord(count=1, reset_at=now + window_seconds)
            self._records[key] = record
            return True, record
        if record.count >= max_requests:
            return False, record
        record.count += 1
        return True, record

    def check(self, key: str, max_requests: int, window_seconds: float) -> bool:
        """
        Count one request against ``key`` and report whether it is admitted.

        A rejected request does not mutate the record.
        """
        now = self._clock()
        with self._lock:
            allowed, _ = self._admit(key, max_requests, window_seconds, now)
        return allowed

    def remaining(self, key: str, max_requests: int) -> int:
        """Requests left in the current window (full budget if none active)."""
        now = self._clock()
        with self._lock:
            record = self._records.get(key)
            if record is None or now >= record.reset_at:
                return max_requests
            return max(0, max_requests - record.count)

    def reset_time(self, key: str) -> Optional[float]:
        """Epoch timestamp at which the current window ends, if one is active."""
        now = self._clock()
        with self._lock:
            record = self._records.get(key)
            if record is None or now >= record.reset_at:
                return None
            return record.reset_at

    def hit(self, client_key: str, policy: RateLimitPolicy) -> RateLimitStatus:
        """
        Apply ``policy`` to ``client_key`` and describe the outcome.

        Keys are namespaced by policy so an exhausted auth budget does not
        consume the general API budget of the same client.
        """
        key = f"{policy.name}:{client_key}"
        now = self._clock()
        with self._lock:
            allowed, record = self._admit(key, policy.max_requests, policy.window_seconds, now)
            count, reset_at = record.count, record.reset_at

        retry_after = None
        if not allowed:
            retry_after = max(1, math.ceil(reset_at - now))
            self._logger.warning(
                "Rate limit exceeded for %s on policy %s", client_key, policy.name
            )
        return RateLimitStatus(
            allowed=allowed,
            limit=policy.max_requests,
            remaining=max(0, policy.max_requests - count),
            reset_at=reset_at,
            retry_after=retry_after,
        )

    def sweep(self) -> int:
        """
        Delete records whose window has ended. Returns how many were removed.

        Keys are re-checked under the lock before deletion, so a record that
        a concurrent ``check`` just renewed survives.
        """
        now = self._clock()
        with self._lock:
            expired = [key for key, record in self._records.items() if now >= record.reset_at]

        removed = 0
        for key in expired:
            with self._lock:
                record = self._records.get(key)
                if record is not None and now >= record.reset_at:
                    del self._records[key]
                    removed += 1
        return removed

    def clear(self, key: Optional[str] = None) -> None:
        with self._lock:
            if key is None:
                self._records.clear()
            else:
                self._records.pop(key, None)

    def destroy(self) -> None:
        """Stop the sweep thread and drop all records."""
        self._stop.set()
        sweeper, self._sweeper = self._sweeper, None
        if sweeper is not None and sweeper is not threading.current_thread():
            sweeper.join(timeout=1.0)
        self.clear()


def get_client_ip(headers: Mapping[str, str]) -> str:
    """
    Derive the client key from proxy headers.

    Preference: X-Forwarded-For (first hop), X-Real-IP, CF-Connecting-IP.
    Requests carrying none of them share the ``"unknown"`` bucket.
    """
    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip() or UNKNOWN_CLIENT

    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    cf_ip = headers.get("cf-connecting-ip")
    if cf_ip:
        return cf_ip.strip()

    return UNKNOWN_CLIENT


def rate_limit_headers(status: RateLimitStatus) -> dict[str, str]:
    """Standard X-RateLimit-* and Retry-After headers for a decision."""
    headers = {
        "X-RateLimit-Limit": str(status.limit),
        "X-RateLimit-Remaining": str(status.remaining),
    }
    if status.reset_at is not None:
        headers["X-RateLimit-Reset"] = str(math.ceil(status.reset_at))
    if status.retry_after is not None:
        headers["Retry-After"] = str(status.retry_after)
    return headers
