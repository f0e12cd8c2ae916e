"""
Integration tests for the complete quiz workflow.

Tests the end-to-end flow from loading a quiz file through grading,
storing attempts and reporting, plus the command-line interface.
"""

import json
from datetime import datetime
from pathlib import Path

from typer.testing import CliRunner

from quiz_grader.attempts import AttemptService, InMemoryAttemptRepository, InMemoryQuizRepository
from quiz_grader.loaders import load_answers, load_quiz
from quiz_grader.main import app
from quiz_grader.models import AttemptResult, Quiz
from quiz_grader.validation import QuizValidator

runner = CliRunner()


class TestEndToEndWorkflow:
    """End-to-end workflow tests."""

    def test_full_attempt_pipeline(
        self, quiz_json_file: Path, answers_json_file: Path, started_at: datetime
    ) -> None:
        """Test load, validate, submit and report."""
        quiz = load_quiz(quiz_json_file)
        is_valid, _ = QuizValidator().validate(quiz)
        assert is_valid

        service = AttemptService(InMemoryQuizRepository([quiz]), InMemoryAttemptRepository())
        answers = load_answers(answers_json_file)

        outcome = service.submit(str(quiz.id), "student-1", answers, started_at)
        assert outcome.attempt.score == 100

        service.submit(str(quiz.id), "student-2", answers[:1], started_at)

        report = service.quiz_report(str(quiz.id))
        assert report.statistics.total_attempts == 2
        assert report.statistics.average_score == 57
        assert report.statistics.pass_rate == 50


class TestCli:
    """Tests for the quiz-grader command line."""

    def test_grade(self, quiz_json_file: Path, answers_json_file: Path, temp_dir: Path) -> None:
        """Test grading prints the score and writes the result."""
        output = temp_dir / "out" / "result.json"

        result = runner.invoke(
            app, ["grade", str(quiz_json_file), str(answers_json_file), "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert "100%" in result.output
        assert "PASSED" in result.output
        saved = AttemptResult.model_validate_json(output.read_text(encoding="utf-8"))
        assert saved.earned_points == 7

    def test_grade_missing_answers(self, quiz_json_file: Path, temp_dir: Path) -> None:
        """Test a missing answers file exits with an error."""
        result = runner.invoke(app, ["grade", str(quiz_json_file), str(temp_dir / "none.json")])

        assert result.exit_code == 1
        assert "Load Error" in result.output

    def test_validate_valid(self, quiz_json_file: Path) -> None:
        """Test a valid quiz passes validation."""
        result = runner.invoke(app, ["validate", str(quiz_json_file)])

        assert result.exit_code == 0, result.output
        assert "Quiz is valid" in result.output

    def test_validate_invalid(self, temp_dir: Path) -> None:
        """Test an ungradeable quiz fails validation."""
        quiz = Quiz.model_validate(
            {
                "title": "Broken",
                "questions": [
                    {"type": "mcq", "prompt": "Pick", "options": ["a", "b"], "correct_index": 5}
                ],
            }
        )
        path = temp_dir / "broken.json"
        path.write_text(quiz.model_dump_json(), encoding="utf-8")

        result = runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "out of range" in result.output

    def test_stats(self, temp_dir: Path) -> None:
        """Test attempt statistics are printed."""
        path = temp_dir / "attempts.json"
        path.write_text(
            json.dumps(
                [
                    {"earned_points": 10, "total_points": 10, "score": 100, "passed": True},
                    {"earned_points": 5, "total_points": 10, "score": 50, "passed": False},
                ]
            ),
            encoding="utf-8",
        )

        result = runner.invoke(app, ["stats", str(path)])

        assert result.exit_code == 0, result.output
        assert "75%" in result.output
