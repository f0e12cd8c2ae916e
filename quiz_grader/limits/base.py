"""
Rate limiter interface.

Callers depend on `RateLimiter` only, so the in-process limiter can be
replaced by one backed by a shared store without touching them.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RateLimitDecision(BaseModel):
    """Outcome of checking one request against a user's rate limit."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    limit: int
    remaining: int
    reset_at: datetime | None = None
    retry_after: int | None = None

    def headers(self) -> dict[str, str]:
        """Standard `X-RateLimit-*` response headers for this decision."""
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
        }
        if self.reset_at is not None:
            headers["X-RateLimit-Reset"] = self.reset_at.isoformat()
        if self.retry_after is not None:
            headers["Retry-After"] = str(self.retry_after)
        return headers


class RateLimiter(ABC):
    """Advisory per-user request limiter."""

    @abstractmethod
    def check_and_record(self, user_id: str) -> RateLimitDecision:
        """
        Decide whether a request from `user_id` may proceed.

        An allowed request is counted against the user's limit; a blocked
        one is not.
        """
        ...

    @abstractmethod
    def remaining(self, user_id: str) -> int:
        """Requests `user_id` may still make in the current window."""
        ...
