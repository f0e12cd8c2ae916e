"""
AI Tutor Module.

Chat access to the language tutor, gated by per-user usage limits.
"""

from quiz_grader.tutor.client import TutorClient, TutorError, TutorReply
from quiz_grader.tutor.prompts import ChatMessage, TutorContext
from quiz_grader.tutor.service import (
    RateLimitExceededError,
    TokenLimitExceededError,
    TutorResponse,
    TutorService,
    UsageSummary,
)

__all__ = [
    "ChatMessage",
    "RateLimitExceededError",
    "TokenLimitExceededError",
    "TutorClient",
    "TutorContext",
    "TutorError",
    "TutorReply",
    "TutorResponse",
    "TutorService",
    "UsageSummary",
]
