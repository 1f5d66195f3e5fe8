"""
Rate limiter data models.

Policies are plain data: adding an endpoint class means adding a
RateLimitPolicy entry, never new code.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field


class RateLimitPolicy(BaseModel):
    """Request budget for one endpoint class."""

    name: str = Field(..., description="Policy name, used to namespace keys")
    max_requests: int = Field(..., ge=1, description="Requests allowed per window")
    window_seconds: float = Field(..., gt=0, description="Window length in seconds")

    model_config = {"frozen": True}


@dataclass
class RateLimitRecord:
    """Mutable per-key window state. Guarded by the limiter's lock."""

    count: int
    reset_at: float


class RateLimitStatus(BaseModel):
    """Outcome of one admission decision, used to build response headers."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: Optional[float] = None
    retry_after: Optional[int] = None


RATE_LIMITS: dict[str, RateLimitPolicy] = {
    "auth": RateLimitPolicy(name="auth", max_requests=5, window_seconds=5 * 60),
    "upload": RateLimitPolicy(name="upload", max_requests=10, window_seconds=5 * 60),
    "api": RateLimitPolicy(name="api", max_requests=100, window_seconds=5 * 60),
}
