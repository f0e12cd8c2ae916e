"""
AI tutor service.

Gates each tutor request on the learner's request rate and daily token
budget, forwards the conversation to the model and records the tokens
the reply cost.
"""

import time

import structlog
from pydantic import BaseModel, ConfigDict

from quiz_grader.config import Settings, get_settings
from quiz_grader.limits import (
    DailyTokenLimiter,
    InMemoryTokenLedger,
    RateLimitDecision,
    RateLimiter,
    SlidingWindowRateLimiter,
    TokenAllowance,
)
from quiz_grader.tutor.client import TutorClient, TutorReply
from quiz_grader.tutor.prompts import ChatMessage, TutorContext, build_messages

logger = structlog.get_logger(__name__)


class RateLimitExceededError(Exception):
    """Raised when a learner has used up the AI request rate."""

    status_code = 429

    def __init__(self, decision: RateLimitDecision):
        self.decision = decision
        super().__init__(
            f"Rate limit exceeded. You can make {decision.limit} AI requests per window. "
            "Please try again later."
        )


class TokenLimitExceededError(Exception):
    """Raised when a learner has spent the daily token budget."""

    status_code = 429

    def __init__(self, allowance: TokenAllowance):
        self.allowance = allowance
        super().__init__("Daily token limit reached. Please try again tomorrow.")


class TutorResponse(BaseModel):
    """A tutor reply with the limits that applied to it."""

    model_config = ConfigDict(frozen=True)

    reply: TutorReply
    rate_limit: RateLimitDecision
    tokens: TokenAllowance
    response_time_ms: int


class UsageSummary(BaseModel):
    """A learner's AI usage for today."""

    model_config = ConfigDict(frozen=True)

    tokens_used: int
    tokens_remaining: int
    tokens_limit: int
    requests_remaining: int


class TutorService:
    """Rate-limited access to the AI tutor."""

    def __init__(
        self,
        client: TutorClient,
        rate_limiter: RateLimiter,
        token_limiter: DailyTokenLimiter,
    ):
        self._client = client
        self._rate_limiter = rate_limiter
        self._token_limiter = token_limiter

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TutorService":
        """
        Build a service with in-process limiters sized from configuration.

        Raises:
            TutorError: If no API key is configured.
        """
        settings = settings or get_settings()
        rate_limiter = SlidingWindowRateLimiter(
            limit=settings.ai_rate_limit_per_hour,
            window_seconds=settings.ai_rate_window_seconds,
            sweep_probability=settings.ai_rate_sweep_probability,
        )
        token_limiter = DailyTokenLimiter(
            InMemoryTokenLedger(), daily_limit=settings.ai_daily_token_limit
        )
        return cls(TutorClient(settings), rate_limiter, token_limiter)

    def chat(
        self,
        user_id: str,
        message: str,
        history: list[ChatMessage] | None = None,
        context: TutorContext | None = None,
    ) -> TutorResponse:
        """
        Send a learner message to the tutor.

        Raises:
            ValueError: If the message is empty.
            RateLimitExceededError: If the learner is over the request rate.
            TokenLimitExceededError: If the learner is over the token budget.
            TutorError: If the model call fails.
        """
        text = message.strip() if message else ""
        if not text:
            raise ValueError("Message is required")

        decision = self._rate_limiter.check_and_record(user_id)
        if not decision.allowed:
            raise RateLimitExceededError(decision)

        allowance = self._token_limiter.check(user_id)
        if not allowance.allowed:
            raise TokenLimitExceededError(allowance)

        started = time.monotonic()
        reply = self._client.generate(build_messages(text, history, context))
        elapsed_ms = int((time.monotonic() - started) * 1000)

        self._token_limiter.record(user_id, reply.tokens_used)
        logger.info(
            "tutor_reply",
            user_id=user_id,
            tokens_used=reply.tokens_used,
            response_time_ms=elapsed_ms,
        )

        return TutorResponse(
            reply=reply,
            rate_limit=decision,
            tokens=allowance,
            response_time_ms=elapsed_ms,
        )

    def usage(self, user_id: str) -> UsageSummary:
        """Today's token usage and remaining request rate for a learner."""
        allowance = self._token_limiter.check(user_id)
        return UsageSummary(
            tokens_used=allowance.used,
            tokens_remaining=allowance.remaining,
            tokens_limit=allowance.limit,
            requests_remaining=self._rate_limiter.remaining(user_id),
        )
