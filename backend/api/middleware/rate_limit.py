"""
Rate limiting request gate.

``rate_limit("auth")`` returns a dependency that charges one request to the
caller's bucket under the named policy and rejects with 429 once the
budget is spent. The headers of the decision are attached to the response
either way.
"""

from typing import Callable

from fastapi import Depends, Request, Response

from modules.ratelimit.exceptions import RateLimitExceededError
from modules.ratelimit.models import RATE_LIMITS
from modules.ratelimit.service import RateLimiter, get_client_ip, rate_limit_headers

from ..dependencies import get_rate_limiter


def rate_limit(policy_name: str) -> Callable[..., None]:
    """Build a dependency enforcing the named policy from RATE_LIMITS."""
    policy = RATE_LIMITS[policy_name]

    def dependency(
        request: Request,
        response: Response,
        limiter: RateLimiter = Depends(get_rate_limiter),
    ) -> None:
        status = limiter.hit(get_client_ip(request.headers), policy)
        if not status.allowed:
            raise RateLimitExceededError(status)
        response.headers.update(rate_limit_headers(status))

    dependency.__name__ = f"rate_limit_{policy_name}"
    return dependency
