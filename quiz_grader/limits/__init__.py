"""
AI Usage Limits Module.

Per-user request rate limiting and daily token budgets for the AI tutor.
"""

from quiz_grader.limits.base import RateLimitDecision, RateLimiter
from quiz_grader.limits.memory import SlidingWindowRateLimiter
from quiz_grader.limits.tokens import (
    DailyTokenLimiter,
    InMemoryTokenLedger,
    TokenAllowance,
    TokenLedger,
)

__all__ = [
    "DailyTokenLimiter",
    "InMemoryTokenLedger",
    "RateLimitDecision",
    "RateLimiter",
    "SlidingWindowRateLimiter",
    "TokenAllowance",
    "TokenLedger",
]
