"""
Daily AI token budget.

Token usage is recorded in a ledger as tutor replies come back; the
limiter sums a user's usage since local midnight and compares it with
the daily budget.
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timedelta

import structlog
from pydantic import BaseModel, ConfigDict

logger = structlog.get_logger(__name__)


class TokenAllowance(BaseModel):
    """A user's token budget for the current day."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    used: int
    remaining: int
    limit: int


class TokenLedger(ABC):
    """Record of AI tokens consumed per user."""

    @abstractmethod
    def record(self, user_id: str, tokens: int, at: datetime) -> None:
        ...

    @abstractmethod
    def tokens_since(self, user_id: str, since: datetime) -> int:
        ...


class InMemoryTokenLedger(TokenLedger):
    """
    Per-process token ledger.

    Only the current and previous day are kept: entries older than the start
    of the day before the newest recorded entry are evicted, and users left
    without entries are dropped.
    """

    def __init__(self) -> None:
        self._entries: dict[str, list[tuple[datetime, int]]] = {}
        self._lock = threading.Lock()
        self._cutoff: datetime | None = None

    def record(self, user_id: str, tokens: int, at: datetime) -> None:
        if tokens <= 0:
            return
        cutoff = _start_of_day(at) - timedelta(days=1)
        with self._lock:
            if self._cutoff is None or cutoff > self._cutoff:
                self._cutoff = cutoff
                self._evict(cutoff)
            self._entries.setdefault(user_id, []).append((at, tokens))

    def tracked_users(self) -> int:
        """Number of users currently held in memory."""
        with self._lock:
            return len(self._entries)

    def entry_count(self, user_id: str) -> int:
        """Number of usage entries held for `user_id`."""
        with self._lock:
            return len(self._entries.get(user_id, ()))

    def _evict(self, cutoff: datetime) -> None:
        for user_id in list(self._entries):
            kept = [entry for entry in self._entries[user_id] if entry[0] >= cutoff]
            if kept:
                self._entries[user_id] = kept
            else:
                del self._entries[user_id]
        logger.debug("token_ledger_evicted", cutoff=cutoff.isoformat())

    def tokens_since(self, user_id: str, since: datetime) -> int:
        with self._lock:
            return sum(tokens for at, tokens in self._entries.get(user_id, ()) if at >= since)


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


class DailyTokenLimiter:
    """
    Blocks AI requests once a user has spent the daily token budget.

    Fail-open: a ledger failure is logged and the request is allowed.
    """

    def __init__(
        self,
        ledger: TokenLedger,
        daily_limit: int = 50_000,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.ledger = ledger
        self.daily_limit = daily_limit
        self._clock = clock

    def check(self, user_id: str) -> TokenAllowance:
        """Return the user's allowance for today."""
        try:
            used = self.ledger.tokens_since(user_id, _start_of_day(self._clock()))
        except Exception:
            logger.exception("token_limit_check_failed", user_id=user_id)
            return TokenAllowance(
                allowed=True, used=0, remaining=self.daily_limit, limit=self.daily_limit
            )

        allowed = used < self.daily_limit
        if not allowed:
            logger.warning("token_limit_reached", user_id=user_id, used=used)

        return TokenAllowance(
            allowed=allowed,
            used=used,
            remaining=max(0, self.daily_limit - used),
            limit=self.daily_limit,
        )

    def record(self, user_id: str, tokens: int) -> None:
        """Add tokens spent by `user_id` now to the ledger."""
        self.ledger.record(user_id, tokens, self._clock())
