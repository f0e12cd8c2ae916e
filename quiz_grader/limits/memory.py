"""
In-process sliding-window rate limiter.

Keeps a deque of request timestamps per user. State lives in this process
only: it is lost on restart and not shared between instances.
"""

import math
import random
import threading
import time
from collections import defaultdict, deque
from collections.abc import Callable
from datetime import datetime, timezone

import structlog

from quiz_grader.limits.base import RateLimitDecision, RateLimiter

logger = structlog.get_logger(__name__)


class SlidingWindowRateLimiter(RateLimiter):
    """
    Counts each user's requests within a trailing time window.

    Stale users are dropped by a sweep that runs with probability
    `sweep_probability` on each check, which bounds memory without a
    background thread. The limiter is fail-open: if computing a decision
    fails, the failure is logged and the request is allowed.
    """

    def __init__(
        self,
        limit: int = 50,
        window_seconds: float = 3600,
        *,
        sweep_probability: float = 0.01,
        clock: Callable[[], float] = time.time,
        rng: Callable[[], float] = random.random,
    ):
        self.limit = max(1, limit)
        self.window = max(1.0, float(window_seconds))
        self.sweep_probability = sweep_probability
        self._clock = clock
        self._rng = rng
        self._hits: defaultdict[str, deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def check_and_record(self, user_id: str) -> RateLimitDecision:
        try:
            return self._check_and_record(user_id)
        except Exception:
            logger.exception("rate_limit_check_failed", user_id=user_id)
            return RateLimitDecision(allowed=True, limit=self.limit, remaining=self.limit)

    def remaining(self, user_id: str) -> int:
        try:
            now = self._clock()
            with self._lock:
                timestamps = self._hits.get(user_id)
                if not timestamps:
                    return self.limit
                self._trim(timestamps, now)
                return max(0, self.limit - len(timestamps))
        except Exception:
            logger.exception("rate_limit_remaining_failed", user_id=user_id)
            return self.limit

    def reset(self) -> None:
        """Forget every recorded request."""
        with self._lock:
            self._hits.clear()

    def tracked_users(self) -> int:
        """Number of users currently held in memory."""
        with self._lock:
            return len(self._hits)

    def sweep(self) -> int:
        """
        Drop users with no requests inside the window.

        Returns:
            Number of users removed.
        """
        now = self._clock()
        with self._lock:
            return self._sweep(now)

    def _check_and_record(self, user_id: str) -> RateLimitDecision:
        now = self._clock()

        with self._lock:
            timestamps = self._hits[user_id]
            self._trim(timestamps, now)

            if len(timestamps) >= self.limit:
                reset_at = timestamps[0] + self.window
                logger.warning("rate_limit_blocked", user_id=user_id, limit=self.limit)
                return RateLimitDecision(
                    allowed=False,
                    limit=self.limit,
                    remaining=0,
                    reset_at=self._as_datetime(reset_at),
                    retry_after=max(0, math.ceil(reset_at - now)),
                )

            timestamps.append(now)
            decision = RateLimitDecision(
                allowed=True,
                limit=self.limit,
                remaining=self.limit - len(timestamps),
                reset_at=self._as_datetime(timestamps[0] + self.window),
            )

            if self._rng() < self.sweep_probability:
                self._sweep(now)

        return decision

    def _trim(self, timestamps: deque[float], now: float) -> None:
        earliest = now - self.window
        while timestamps and timestamps[0] <= earliest:
            timestamps.popleft()

    def _sweep(self, now: float) -> int:
        removed = 0
        for user_id in list(self._hits):
            timestamps = self._hits[user_id]
            self._trim(timestamps, now)
            if not timestamps:
                del self._hits[user_id]
                removed += 1
        if removed:
            logger.debug("rate_limit_sweep", removed=removed)
        return removed

    @staticmethod
    def _as_datetime(timestamp: float) -> datetime:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
