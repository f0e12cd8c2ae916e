"""
Attempt service - grading at the request boundary.

Loads the quiz, enforces publication and attempt limits, grades the
submission, stores the attempt and keeps the quiz's running statistics
up to date.
"""

import math
import threading
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict

from quiz_grader.attempts.errors import (
    AttemptNotFoundError,
    MaxAttemptsExceededError,
    QuizNotFoundError,
    QuizNotPublishedError,
)
from quiz_grader.attempts.repository import AttemptRepository, QuizRepository
from quiz_grader.grading import (
    build_quiz_report,
    calculate_quiz_stats,
    calculate_student_stats,
    grade_quiz,
)
from quiz_grader.models import (
    AttemptAvailability,
    AttemptRecord,
    QuizReport,
    StudentStatistics,
)

logger = structlog.get_logger(__name__)


class SubmissionOutcome(BaseModel):
    """A stored attempt plus the quiz's reveal settings."""

    model_config = ConfigDict(frozen=True)

    attempt: AttemptRecord
    show_answers: bool
    show_score: bool
    allow_review: bool

    def public_view(self) -> dict[str, Any]:
        """
        The attempt as it may be shown to the learner.

        Per-answer correctness is withheld unless the quiz reveals answers,
        and the score is withheld unless the quiz shows scores.
        """
        data = self.attempt.model_dump(mode="json")
        if not self.show_answers:
            data["answers"] = [
                {"question_index": a["question_index"], "answer": a["answer"]}
                for a in data["answers"]
            ]
        if not self.show_score:
            for key in ("score", "earned_points", "passed", "grade"):
                data.pop(key, None)
        data["show_answers"] = self.show_answers
        data["allow_review"] = self.allow_review
        return data


def _time_spent(started_at: datetime, submitted_at: datetime) -> int:
    seconds = (submitted_at - started_at).total_seconds()
    return max(0, math.floor(seconds))


class AttemptService:
    """
    Submits and reviews quiz attempts.

    Submissions are serialized within the process so the attempt-limit
    check and the insert cannot interleave.
    """

    def __init__(self, quizzes: QuizRepository, attempts: AttemptRepository):
        self._quizzes = quizzes
        self._attempts = attempts
        self._submit_lock = threading.Lock()

    def submit(
        self,
        quiz_id: str,
        student_id: str,
        answers: Sequence[Any] | None,
        started_at: datetime,
        submitted_at: datetime | None = None,
    ) -> SubmissionOutcome:
        """
        Grade and store one quiz attempt.

        Args:
            quiz_id: Quiz being attempted.
            student_id: Learner submitting the attempt.
            answers: Answers in question order.
            started_at: When the learner opened the quiz.
            submitted_at: When the answers were submitted (defaults to now).

        Returns:
            SubmissionOutcome with the stored attempt.

        Raises:
            QuizNotFoundError: If the quiz does not exist.
            QuizNotPublishedError: If the quiz is not published.
            MaxAttemptsExceededError: If the learner has no attempts left.
        """
        submitted_at = submitted_at or datetime.now(timezone.utc)

        with self._submit_lock:
            quiz = self._quizzes.get(quiz_id)
            if quiz is None:
                raise QuizNotFoundError(str(quiz_id))

            if not quiz.published:
                raise QuizNotPublishedError(str(quiz_id))

            previous = self._attempts.list_for_student_quiz(student_id, str(quiz.id))
            max_attempts = quiz.settings.max_attempts
            if max_attempts and len(previous) >= max_attempts:
                logger.info(
                    "attempt_rejected_max_attempts",
                    quiz_id=str(quiz.id),
                    student_id=student_id,
                    max_attempts=max_attempts,
                )
                raise MaxAttemptsExceededError(str(quiz.id), max_attempts)

            result = grade_quiz(quiz, answers)

            record = AttemptRecord(
                student_id=student_id,
                quiz_id=str(quiz.id),
                course_id=quiz.course_id,
                answers=result.answers,
                score=result.score,
                total_points=result.total_points,
                earned_points=result.earned_points,
                started_at=started_at,
                submitted_at=submitted_at,
                time_spent=_time_spent(started_at, submitted_at),
                passed=result.passed,
                attempt_number=len(previous) + 1,
            )
            self._attempts.add(record)

            stats = calculate_quiz_stats(self._attempts.list_for_quiz(str(quiz.id)))
            self._quizzes.save(
                quiz.model_copy(
                    update={
                        "total_attempts": stats.total_attempts,
                        "average_score": stats.average_score,
                    }
                )
            )

        logger.info(
            "attempt_submitted",
            quiz_id=str(quiz.id),
            student_id=student_id,
            attempt_number=record.attempt_number,
            score=record.score,
            passed=record.passed,
        )

        return SubmissionOutcome(
            attempt=record,
            show_answers=quiz.settings.show_answers,
            show_score=quiz.settings.show_score,
            allow_review=quiz.settings.allow_review,
        )

    def availability(self, quiz_id: str, student_id: str) -> AttemptAvailability:
        """How many attempts a learner has used and has left on a quiz."""
        quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise QuizNotFoundError(str(quiz_id))

        previous = self._attempts.list_for_student_quiz(student_id, str(quiz.id))
        max_attempts = quiz.settings.max_attempts

        if max_attempts == 0:
            remaining = None
            can_attempt = True
        else:
            remaining = max(0, max_attempts - len(previous))
            can_attempt = remaining > 0

        return AttemptAvailability(
            attempt_count=len(previous),
            remaining_attempts=remaining,
            can_attempt=can_attempt,
            best_score=max((r.score for r in previous), default=None),
        )

    def add_feedback(self, attempt_id: str, feedback: str) -> AttemptRecord:
        """Attach instructor feedback to an attempt and mark it reviewed."""
        record = self._attempts.get(attempt_id)
        if record is None:
            raise AttemptNotFoundError(str(attempt_id))

        reviewed = record.model_copy(
            update={
                "feedback": feedback,
                "teacher_reviewed": True,
                "reviewed_at": datetime.now(timezone.utc),
            }
        )
        self._attempts.update(reviewed)
        logger.info("attempt_reviewed", attempt_id=str(attempt_id))
        return reviewed

    def quiz_report(self, quiz_id: str) -> QuizReport:
        """Instructor summary of every attempt on a quiz."""
        quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            raise QuizNotFoundError(str(quiz_id))
        return build_quiz_report(self._attempts.list_for_quiz(str(quiz.id)))

    def student_stats(self, student_id: str) -> StudentStatistics:
        """Summary of a learner's attempts across quizzes."""
        return calculate_student_stats(self._attempts.list_for_student(student_id))
