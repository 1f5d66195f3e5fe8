"""
Rate limiter exceptions.
"""

from shared.exceptions import RateLimitError

from .models import RateLimitStatus


class RateLimitExceededError(RateLimitError):
    """Raised by request gates when a client has exhausted its budget."""

    def __init__(self, status: RateLimitStatus):
        super().__init__(
            "Too many requests. Please try again later.",
            code="RATE_LIMIT_EXCEEDED",
        )
        self.status = status
