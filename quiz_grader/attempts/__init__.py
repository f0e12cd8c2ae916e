"""
Attempt Module.

Submission, storage and review of quiz attempts.
"""

from quiz_grader.attempts.errors import (
    AttemptError,
    AttemptNotFoundError,
    MaxAttemptsExceededError,
    QuizNotFoundError,
    QuizNotPublishedError,
)
from quiz_grader.attempts.repository import (
    AttemptRepository,
    InMemoryAttemptRepository,
    InMemoryQuizRepository,
    QuizRepository,
)
from quiz_grader.attempts.service import AttemptService, SubmissionOutcome

__all__ = [
    "AttemptError",
    "AttemptNotFoundError",
    "AttemptRepository",
    "AttemptService",
    "InMemoryAttemptRepository",
    "InMemoryQuizRepository",
    "MaxAttemptsExceededError",
    "QuizNotFoundError",
    "QuizNotPublishedError",
    "QuizRepository",
    "SubmissionOutcome",
]
