"""
Unit tests for quiz-level grading and the quiz models it relies on.
"""

from typing import Any

import pytest
from pydantic import ValidationError

from quiz_grader.grading import grade_question, grade_quiz
from quiz_grader.models import (
    AttemptRecord,
    AttemptResult,
    GradedAnswer,
    Quiz,
    QuizSettings,
    SingleChoiceQuestion,
    SubmittedAnswer,
    TrueFalseQuestion,
    UnsupportedQuestion,
)


class TestGradeQuiz:
    """Tests for grade_quiz."""

    def test_half_correct_fails(self, two_question_quiz: Quiz) -> None:
        """Test one right and one wrong 1-point question scores 50 and fails at 70."""
        answers = [
            {"question_index": 0, "answer": 1},
            {"question_index": 1, "answer": True},
        ]
        result = grade_quiz(two_question_quiz, answers)

        assert result.earned_points == 1
        assert result.total_points == 2
        assert result.score == 50
        assert result.passed is False

    def test_all_correct(self, sample_quiz: Quiz, correct_answers: list[dict[str, Any]]) -> None:
        """Test a fully correct submission earns every point."""
        result = grade_quiz(sample_quiz, correct_answers)

        assert result.earned_points == 7
        assert result.total_points == 7
        assert result.score == 100
        assert result.passed
        assert all(a.is_correct for a in result.answers)

    def test_graded_answers_follow_question_order(
        self, sample_quiz: Quiz, correct_answers: list[dict[str, Any]]
    ) -> None:
        """Test one graded answer per question, in order, with question metadata."""
        result = grade_quiz(sample_quiz, correct_answers)

        assert [a.question_index for a in result.answers] == [0, 1, 2, 3]
        assert [a.question_type for a in result.answers] == [
            "mcq",
            "fill_blank",
            "matching",
            "true_false",
        ]
        assert [a.question_id for a in result.answers] == [
            str(q.id) for q in sample_quiz.questions
        ]
        assert [a.points_awarded for a in result.answers] == [1, 2, 3, 1]

    def test_submitted_answer_models(self, two_question_quiz: Quiz) -> None:
        """Test SubmittedAnswer models are accepted as well as mappings."""
        answers = [
            SubmittedAnswer(question_index=0, answer="1"),
            SubmittedAnswer(question_index=1, answer=False),
        ]
        result = grade_quiz(two_question_quiz, answers)

        assert result.score == 100
        assert result.answers[0].answer == "1"

    def test_missing_answers_are_incorrect(self, sample_quiz: Quiz) -> None:
        """Test fewer answers than questions grades the rest as unanswered."""
        result = grade_quiz(sample_quiz, [{"question_index": 0, "answer": 2}])

        assert len(result.answers) == 4
        assert result.answers[0].is_correct
        assert all(not a.is_correct for a in result.answers[1:])
        assert all(a.answer is None for a in result.answers[1:])
        assert result.earned_points == 1

    def test_no_answers_at_all(self, sample_quiz: Quiz) -> None:
        """Test None or an empty list grades every question incorrect."""
        for answers in (None, []):
            result = grade_quiz(sample_quiz, answers)
            assert result.earned_points == 0
            assert result.score == 0
            assert not result.passed

    def test_extra_answers_are_ignored(self, two_question_quiz: Quiz) -> None:
        """Test answers beyond the last question are ignored."""
        answers = [
            {"question_index": 0, "answer": 1},
            {"question_index": 1, "answer": False},
            {"question_index": 2, "answer": "extra"},
        ]
        result = grade_quiz(two_question_quiz, answers)

        assert len(result.answers) == 2
        assert result.score == 100

    def test_malformed_entries_are_unanswered(self, two_question_quiz: Quiz) -> None:
        """Test entries that are not answer objects count as unanswered."""
        result = grade_quiz(two_question_quiz, ["1", None])

        assert [a.answer for a in result.answers] == [None, None]
        assert not any(a.is_correct for a in result.answers)
        assert result.score == 0

    @pytest.mark.parametrize(
        "answers",
        [
            [],
            [{"question_index": 0, "answer": 1}],
            [{"question_index": 0, "answer": 1}, {"question_index": 1, "answer": None}],
            [{"question_index": 0, "answer": 1}, {"question_index": 1}],
        ],
    )
    def test_unanswered_false_statement_is_incorrect(
        self, two_question_quiz: Quiz, answers: list[dict[str, Any]]
    ) -> None:
        """Test a missing answer to a false statement earns nothing."""
        result = grade_quiz(two_question_quiz, answers)

        assert not result.answers[1].is_correct
        assert result.answers[1].answer is None
        assert result.answers[1].points_awarded == 0
        assert result.earned_points == (1 if answers else 0)

    def test_explicit_false_answer_is_correct(self, two_question_quiz: Quiz) -> None:
        """Test answering False to a false statement still earns its points."""
        result = grade_quiz(two_question_quiz, [{"answer": 0}, {"answer": False}])

        assert result.answers[1].is_correct
        assert result.earned_points == 1

    def test_unknown_question_type_is_incorrect(self) -> None:
        """Test an unsupported question type loads and is graded incorrect."""
        quiz = Quiz.model_validate(
            {
                "title": "Mixed",
                "questions": [
                    {"type": "essay", "prompt": "Describe your day", "points": 3},
                    {"type": "true_false", "prompt": "1 + 1 = 2", "expected": True},
                ],
            }
        )
        assert isinstance(quiz.questions[0], UnsupportedQuestion)

        result = grade_quiz(
            quiz,
            [
                {"question_index": 0, "answer": "A long essay"},
                {"question_index": 1, "answer": True},
            ],
        )

        assert result.answers[0].question_type == "essay"
        assert not result.answers[0].is_correct
        assert result.earned_points == 1
        assert result.total_points == 4
        assert result.score == 25

    def test_zero_questions(self) -> None:
        """Test a quiz without questions scores 0 without dividing by zero."""
        quiz = Quiz(title="Empty")
        result = grade_quiz(quiz, [])

        assert result.total_points == 0
        assert result.score == 0
        assert not result.passed

    def test_zero_points(self) -> None:
        """Test a quiz worth zero points scores 0."""
        quiz = Quiz(
            title="Practice",
            settings=QuizSettings(passing_score=0),
            questions=[TrueFalseQuestion(prompt="Ungraded", expected=True, points=0)],
        )
        result = grade_quiz(quiz, [{"question_index": 0, "answer": True}])

        assert result.answers[0].is_correct
        assert result.earned_points == 0
        assert result.total_points == 0
        assert result.score == 0
        assert result.passed

    def test_score_rounds_half_up(self) -> None:
        """Test 1 of 8 points (12.5%) rounds to 13."""
        quiz = Quiz(
            title="Weighted",
            questions=[
                SingleChoiceQuestion(prompt="q1", options=["a", "b"], correct_index=0, points=1),
                TrueFalseQuestion(prompt="q2", expected=True, points=7),
            ],
        )
        result = grade_quiz(
            quiz,
            [{"question_index": 0, "answer": 0}, {"question_index": 1, "answer": False}],
        )

        assert result.score == 13

    def test_passing_score_is_inclusive(self, two_question_quiz: Quiz) -> None:
        """Test a score equal to the passing score passes."""
        quiz = two_question_quiz.model_copy(update={"settings": QuizSettings(passing_score=50)})
        result = grade_quiz(
            quiz,
            [{"question_index": 0, "answer": 1}, {"question_index": 1, "answer": True}],
        )

        assert result.score == 50
        assert result.passed

    def test_grade_question_unknown_type(self) -> None:
        """Test grade_question fails closed for unknown types."""
        question = UnsupportedQuestion(type="ordering", prompt="Put in order")
        assert grade_question(question, [0, 1, 2]) is False


class TestQuizModels:
    """Tests for the quiz and result models."""

    def test_total_points_is_derived(self, sample_quiz: Quiz) -> None:
        """Test total points and question count come from the questions."""
        assert sample_quiz.total_points == 7
        assert sample_quiz.question_count == 4

    def test_question_union_from_json(self, sample_quiz: Quiz) -> None:
        """Test questions keep their concrete types through JSON."""
        loaded = Quiz.model_validate_json(sample_quiz.model_dump_json())

        assert [type(q) for q in loaded.questions] == [type(q) for q in sample_quiz.questions]
        assert loaded.total_points == sample_quiz.total_points

    def test_negative_points_rejected(self) -> None:
        """Test question points cannot be negative."""
        with pytest.raises(ValidationError):
            TrueFalseQuestion(prompt="x", expected=True, points=-1)

    def test_passing_score_range(self) -> None:
        """Test passing score must be a percentage."""
        with pytest.raises(ValidationError):
            QuizSettings(passing_score=101)

    def test_attempt_result_points_invariant(self) -> None:
        """Test earned points cannot exceed total points."""
        with pytest.raises(ValidationError, match="cannot exceed"):
            AttemptResult(earned_points=3, total_points=2, score=100, passed=True)

    def test_attempt_result_is_frozen(self, two_question_quiz: Quiz) -> None:
        """Test graded results cannot be modified."""
        result = grade_quiz(two_question_quiz, [])

        with pytest.raises(ValidationError):
            result.score = 100  # type: ignore[misc]

    @pytest.mark.parametrize(
        "score,grade",
        [(100, "A"), (90, "A"), (89, "B"), (80, "B"), (75, "C"), (60, "D"), (59, "F"), (0, "F")],
    )
    def test_attempt_record_grade(self, score: int, grade: str, started_at) -> None:
        """Test letter grades for attempt records."""
        record = AttemptRecord(
            student_id="s1",
            quiz_id="q1",
            answers=(
                GradedAnswer(
                    question_index=0,
                    question_id="x",
                    question_type="mcq",
                    answer=1,
                    is_correct=True,
                    points_awarded=1,
                ),
            ),
            score=score,
            total_points=100,
            earned_points=score,
            started_at=started_at,
            submitted_at=started_at,
            passed=score >= 70,
            attempt_number=1,
        )
        assert record.grade == grade
