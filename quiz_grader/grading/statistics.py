"""
Statistics over stored quiz attempts.

All summaries are computed on demand and never modify their input. Empty
input produces zeroed statistics.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from quiz_grader.grading.scoring import percentage, round_half_up
from quiz_grader.models import (
    AttemptRecord,
    AttemptStatistics,
    QuizReport,
    StudentStatistics,
)

RECENT_STUDENT_ATTEMPTS = 5
RECENT_QUIZ_ATTEMPTS = 10


class ScoredAttempt(Protocol):
    """Anything carrying a score and a pass flag."""

    score: int
    passed: bool


def calculate_quiz_stats(attempts: Iterable[ScoredAttempt]) -> AttemptStatistics:
    """
    Summarize a collection of attempt results.

    Args:
        attempts: Attempt results or stored attempt records.

    Returns:
        AttemptStatistics; all zero when there are no attempts.
    """
    scored = list(attempts)
    if not scored:
        return AttemptStatistics()

    scores = [a.score for a in scored]
    passed = sum(1 for a in scored if a.passed)

    return AttemptStatistics(
        total_attempts=len(scored),
        average_score=round_half_up(sum(scores) / len(scores)),
        highest_score=max(scores),
        lowest_score=min(scores),
        pass_rate=percentage(passed, len(scored)),
    )


def _newest_first(records: Iterable[AttemptRecord]) -> list[AttemptRecord]:
    return sorted(records, key=lambda r: r.created_at, reverse=True)


def calculate_student_stats(records: Sequence[AttemptRecord]) -> StudentStatistics:
    """Summarize one learner's attempts across all quizzes."""
    if not records:
        return StudentStatistics()

    stats = calculate_quiz_stats(records)
    passed = sum(1 for r in records if r.passed)

    return StudentStatistics(
        total_attempts=stats.total_attempts,
        average_score=stats.average_score,
        passed_quizzes=passed,
        failed_quizzes=len(records) - passed,
        pass_rate=stats.pass_rate,
        highest_score=stats.highest_score,
        recent_attempts=tuple(_newest_first(records)[:RECENT_STUDENT_ATTEMPTS]),
    )


def build_quiz_report(records: Sequence[AttemptRecord]) -> QuizReport:
    """Summarize every attempt made on one quiz for its instructor."""
    return QuizReport(
        statistics=calculate_quiz_stats(records),
        unique_students=len({r.student_id for r in records}),
        recent_attempts=tuple(_newest_first(records)[:RECENT_QUIZ_ATTEMPTS]),
    )
