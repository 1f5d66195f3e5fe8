"""
Rate limiting module.

Public API:
- RateLimiter: Injectable rolling-window limiter with background sweep
- RATE_LIMITS: Named policies (auth, upload, api)
- get_client_ip / rate_limit_headers: Request and response helpers
"""

from .models import RATE_LIMITS, RateLimitPolicy, RateLimitRecord, RateLimitStatus
from .exceptions import RateLimitExceededError
from .service import RateLimiter, get_client_ip, rate_limit_headers

__all__ = [
    "RATE_LIMITS",
    "RateLimitPolicy",
    "RateLimitRecord",
    "RateLimitStatus",
    "RateLimitExceededError",
    "RateLimiter",
    "get_client_ip",
    "rate_limit_headers",
]
