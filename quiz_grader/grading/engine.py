"""
Quiz grading engine - the core orchestrator.

Dispatches every question of a quiz to the grader for its type and
aggregates the results into an attempt result.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from quiz_grader.grading.graders import (
    grade_fill_blank,
    grade_matching,
    grade_single_choice,
    grade_true_false,
)
from quiz_grader.grading.scoring import percentage
from quiz_grader.models import (
    AttemptResult,
    FillBlankQuestion,
    GradedAnswer,
    MatchingQuestion,
    QuestionType,
    Quiz,
    SingleChoiceQuestion,
    SubmittedAnswer,
    TrueFalseQuestion,
)


def _grade_single_choice(question: SingleChoiceQuestion, answer: Any) -> bool:
    return grade_single_choice(answer, question.correct_index)


def _grade_fill_blank(question: FillBlankQuestion, answer: Any) -> bool:
    return grade_fill_blank(answer, question.blanks, question.case_sensitive)


def _grade_matching(question: MatchingQuestion, answer: Any) -> bool:
    return grade_matching(answer, question.pairs)


def _grade_true_false(question: TrueFalseQuestion, answer: Any) -> bool:
    return grade_true_false(answer, question.expected)


# Registry of graders by question type
_GRADERS: dict[str, Callable[[Any, Any], bool]] = {
    QuestionType.SINGLE_CHOICE.value: _grade_single_choice,
    QuestionType.FILL_BLANK.value: _grade_fill_blank,
    QuestionType.MATCHING.value: _grade_matching,
    QuestionType.TRUE_FALSE.value: _grade_true_false,
}


def grade_question(question: Any, answer: Any) -> bool:
    """
    Grade one answer against one question.

    Unknown question types are graded incorrect.
    """
    grader = _GRADERS.get(getattr(question, "type", None))
    if grader is None:
        return False
    return grader(question, answer)


def _answer_payload(submitted_answers: Sequence[Any], index: int) -> Any:
    """
    Payload submitted for the question at `index`, or None if unanswered.

    A missing entry, an entry that is not an answer object and a null
    payload all mean "no answer".
    """
    if index >= len(submitted_answers):
        return None

    entry = submitted_answers[index]
    if isinstance(entry, SubmittedAnswer):
        return entry.answer
    if isinstance(entry, Mapping):
        return entry.get("answer")
    return None


def grade_quiz(quiz: Quiz, submitted_answers: Sequence[Any] | None) -> AttemptResult:
    """
    Grade a full quiz submission.

    Answers are aligned with questions by position. Missing or null answers
    are graded incorrect without consulting the grader, and extra answers
    are ignored. Each question earns its full points or nothing.

    Args:
        quiz: The quiz with its answer key and settings.
        submitted_answers: Answers in question order, as `SubmittedAnswer`
            models or plain mappings with an `answer` key.

    Returns:
        AttemptResult with one graded answer per question.
    """
    entries = submitted_answers or ()

    graded: list[GradedAnswer] = []
    earned_points = 0

    for index, question in enumerate(quiz.questions):
        answer = _answer_payload(entries, index)
        is_correct = answer is not None and grade_question(question, answer)
        points_awarded = question.points if is_correct else 0
        earned_points += points_awarded

        graded.append(
            GradedAnswer(
                question_index=index,
                question_id=str(question.id),
                question_type=question.type,
                answer=answer,
                is_correct=is_correct,
                points_awarded=points_awarded,
            )
        )

    total_points = quiz.total_points
    score = percentage(earned_points, total_points)

    return AttemptResult(
        answers=tuple(graded),
        earned_points=earned_points,
        total_points=total_points,
        score=score,
        passed=score >= quiz.settings.passing_score,
    )
