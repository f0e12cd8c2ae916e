"""
Pytest configuration and fixtures.

Provides common test fixtures for all test modules.
"""

import json
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Generator

import pytest

from quiz_grader.attempts import AttemptService, InMemoryAttemptRepository, InMemoryQuizRepository
from quiz_grader.config import Settings
from quiz_grader.models import (
    FillBlankQuestion,
    MatchingPair,
    MatchingQuestion,
    Quiz,
    QuizSettings,
    SingleChoiceQuestion,
    TrueFalseQuestion,
)


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ==============================================================================
# Sample Quiz Fixtures
# ==============================================================================


@pytest.fixture
def matching_pairs() -> list[MatchingPair]:
    """Article matching key used across tests."""
    return [
        MatchingPair(left="der", right="the(m)"),
        MatchingPair(left="die", right="the(f)"),
    ]


@pytest.fixture
def sample_quiz(matching_pairs: list[MatchingPair]) -> Quiz:
    """A published quiz with one question of every type (7 points)."""
    return Quiz(
        title="A1 Articles and Basics",
        course_id="course-1",
        teacher_id="teacher-1",
        published=True,
        settings=QuizSettings(passing_score=70, max_attempts=3),
        questions=[
            SingleChoiceQuestion(
                prompt="Which article goes with 'Haus'?",
                options=["der", "die", "das"],
                correct_index=2,
                points=1,
            ),
            FillBlankQuestion(
                prompt="Ich ___ Student.",
                blanks=["bin"],
                points=2,
            ),
            MatchingQuestion(
                prompt="Match the articles",
                pairs=matching_pairs,
                points=3,
            ),
            TrueFalseQuestion(
                prompt="'Danke' means 'thank you'.",
                expected=True,
                points=1,
            ),
        ],
    )


@pytest.fixture
def correct_answers() -> list[dict[str, Any]]:
    """Fully correct answers for `sample_quiz`."""
    return [
        {"question_index": 0, "answer": 2},
        {"question_index": 1, "answer": ["bin"]},
        {
            "question_index": 2,
            "answer": [
                {"left_index": 0, "right_index": 0},
                {"left_index": 1, "right_index": 1},
            ],
        },
        {"question_index": 3, "answer": True},
    ]


@pytest.fixture
def two_question_quiz() -> Quiz:
    """One single-choice and one true/false question, 1 point each."""
    return Quiz(
        title="Two Questions",
        published=True,
        settings=QuizSettings(passing_score=70),
        questions=[
            SingleChoiceQuestion(prompt="Pick B", options=["A", "B"], correct_index=1),
            TrueFalseQuestion(prompt="The sky is green", expected=False),
        ],
    )


# ==============================================================================
# Service Fixtures
# ==============================================================================


@pytest.fixture
def quiz_repository(sample_quiz: Quiz) -> InMemoryQuizRepository:
    """Quiz store holding `sample_quiz`."""
    return InMemoryQuizRepository([sample_quiz])


@pytest.fixture
def attempt_repository() -> InMemoryAttemptRepository:
    """Empty attempt store."""
    return InMemoryAttemptRepository()


@pytest.fixture
def attempt_service(
    quiz_repository: InMemoryQuizRepository,
    attempt_repository: InMemoryAttemptRepository,
) -> AttemptService:
    """Attempt service over the in-memory stores."""
    return AttemptService(quiz_repository, attempt_repository)


@pytest.fixture
def started_at() -> datetime:
    """A fixed start time for attempts."""
    return datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def submitted_at(started_at: datetime) -> datetime:
    """Submission time 5 minutes and 30 seconds after the start."""
    return started_at + timedelta(minutes=5, seconds=30)


@pytest.fixture
def fake_clock() -> FakeClock:
    """Manually advanced clock."""
    return FakeClock()


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with mocked values."""
    return Settings(
        openai_api_key="test-api-key-for-testing",
        openai_base_url="https://test.api.local/",
        tutor_model="test-model",
        tutor_temperature=0.0,
        tutor_max_tokens=200,
        ai_rate_limit_per_hour=2,
        ai_daily_token_limit=150,
    )


# ==============================================================================
# File Fixtures
# ==============================================================================


@pytest.fixture
def quiz_json_file(temp_dir: Path, sample_quiz: Quiz) -> Path:
    """`sample_quiz` written as a JSON document."""
    file_path = temp_dir / "quiz.json"
    file_path.write_text(sample_quiz.model_dump_json(indent=2), encoding="utf-8")
    return file_path


@pytest.fixture
def answers_json_file(temp_dir: Path, correct_answers: list[dict[str, Any]]) -> Path:
    """Fully correct answers written as JSON."""
    file_path = temp_dir / "answers.json"
    file_path.write_text(json.dumps(correct_answers), encoding="utf-8")
    return file_path


@pytest.fixture
def empty_file(temp_dir: Path) -> Path:
    """Create an empty file."""
    file_path = temp_dir / "empty.json"
    file_path.write_text("", encoding="utf-8")
    return file_path
