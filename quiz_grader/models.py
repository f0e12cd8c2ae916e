"""
Pydantic models for the Quiz Grader system.

These models define the schemas for:
- Questions and their type-specific answer keys
- Quizzes and their delivery settings
- Submitted answers, graded answers and attempt results
- Persisted attempt records and derived statistics

Derived records are frozen: they are computed once per submission and
stored verbatim by the caller.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    computed_field,
    field_validator,
    model_validator,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ==============================================================================
# Question Models
# ==============================================================================


class QuestionType(str, Enum):
    """Question types the grading engine knows how to grade."""

    SINGLE_CHOICE = "mcq"
    FILL_BLANK = "fill_blank"
    MATCHING = "matching"
    TRUE_FALSE = "true_false"


class _QuestionBase(BaseModel):
    """Fields shared by every question type."""

    id: UUID = Field(
        default_factory=uuid4,
        description="Stable identifier of the question",
    )

    prompt: str = Field(
        ...,
        description="Question text shown to the learner",
    )

    points: int = Field(
        default=1,
        ge=0,
        description="Points awarded for a correct answer",
    )

    explanation: str = Field(
        default="",
        description="Optional explanation revealed after grading",
    )

    order: int = Field(
        default=0,
        description="Authoring order hint",
    )


class SingleChoiceQuestion(_QuestionBase):
    """Pick one option out of an ordered list."""

    type: Literal["mcq"] = "mcq"

    options: list[str] = Field(
        default_factory=list,
        description="Ordered option strings",
    )

    correct_index: int = Field(
        ...,
        description="Index of the correct option",
    )


class FillBlankQuestion(_QuestionBase):
    """Fill one or more blanks with free text."""

    type: Literal["fill_blank"] = "fill_blank"

    blanks: list[str] = Field(
        default_factory=list,
        description="Expected text for each blank, in order",
    )

    case_sensitive: bool = Field(
        default=False,
        description="Whether letter case must match",
    )


class MatchingPair(BaseModel):
    """One correct left/right association."""

    left: str
    right: str


class MatchingQuestion(_QuestionBase):
    """Associate each left item with a right item."""

    type: Literal["matching"] = "matching"

    pairs: list[MatchingPair] = Field(
        default_factory=list,
        description="Correct left/right pairs",
    )


class TrueFalseQuestion(_QuestionBase):
    """A statement the learner marks as true or false."""

    type: Literal["true_false"] = "true_false"

    expected: bool = Field(
        ...,
        description="Whether the statement is true",
    )


class UnsupportedQuestion(_QuestionBase):
    """
    A question whose type the engine does not know.

    Kept loadable so that a quiz document with a newer question type can
    still be graded; such questions are always graded incorrect.
    """

    model_config = ConfigDict(extra="allow")

    type: str


_KNOWN_TYPES = frozenset(t.value for t in QuestionType)


def _question_tag(value: Any) -> str:
    """Pick the union member for a raw or already-built question."""
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    if isinstance(kind, QuestionType):
        kind = kind.value
    if isinstance(kind, str) and kind in _KNOWN_TYPES:
        return kind
    return "unsupported"


Question = Annotated[
    Union[
        Annotated[SingleChoiceQuestion, Tag("mcq")],
        Annotated[FillBlankQuestion, Tag("fill_blank")],
        Annotated[MatchingQuestion, Tag("matching")],
        Annotated[TrueFalseQuestion, Tag("true_false")],
        Annotated[UnsupportedQuestion, Tag("unsupported")],
    ],
    Discriminator(_question_tag),
]


# ==============================================================================
# Quiz Models
# ==============================================================================


class QuizSettings(BaseModel):
    """Delivery and scoring settings chosen by the instructor."""

    time_limit: int = Field(default=30, ge=0, description="Time limit in minutes")
    passing_score: int = Field(default=70, ge=0, le=100, description="Pass threshold (%)")
    max_attempts: int = Field(default=3, ge=0, description="Attempts allowed; 0 = unlimited")
    show_answers: bool = True
    show_score: bool = True
    shuffle_questions: bool = False
    shuffle_options: bool = False
    allow_review: bool = True


class Quiz(BaseModel):
    """
    A quiz as authored by an instructor.

    `total_points` and `question_count` are always derived from the
    questions, so they cannot drift from the answer key.
    """

    id: UUID = Field(default_factory=uuid4)

    title: str = Field(..., min_length=1, max_length=500)

    description: str = ""

    course_id: str | None = None

    teacher_id: str | None = None

    questions: list[Question] = Field(default_factory=list)

    settings: QuizSettings = Field(default_factory=QuizSettings)

    published: bool = False

    total_attempts: int = Field(default=0, ge=0)

    average_score: int = Field(default=0, ge=0, le=100)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_points(self) -> int:
        """Sum of the points of every question."""
        return sum(q.points for q in self.questions)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def question_count(self) -> int:
        """Return the number of questions."""
        return len(self.questions)


# ==============================================================================
# Answer and Result Models
# ==============================================================================


class SubmittedAnswer(BaseModel):
    """
    A learner's answer to one question.

    The payload stays untyped here: it is whatever the client sent, and
    the grader for the question's type decides whether it is well formed.
    """

    question_index: int

    answer: Any = None


class GradedAnswer(BaseModel):
    """Grading outcome for a single question."""

    model_config = ConfigDict(frozen=True)

    question_index: int
    question_id: str
    question_type: str
    answer: Any = None
    is_correct: bool
    points_awarded: int = Field(..., ge=0)


class AttemptResult(BaseModel):
    """Outcome of grading a whole quiz submission."""

    model_config = ConfigDict(frozen=True)

    answers: tuple[GradedAnswer, ...] = ()

    earned_points: int = Field(..., ge=0)

    total_points: int = Field(..., ge=0)

    score: int = Field(..., ge=0, le=100)

    passed: bool

    @model_validator(mode="after")
    def validate_points_range(self) -> "AttemptResult":
        """Ensure earned points don't exceed total points."""
        if self.earned_points > self.total_points:
            raise ValueError(
                f"Earned points ({self.earned_points}) cannot exceed "
                f"total points ({self.total_points})"
            )
        return self


class AttemptStatistics(BaseModel):
    """Summary over a collection of attempt results."""

    model_config = ConfigDict(frozen=True)

    total_attempts: int = 0
    average_score: int = 0
    highest_score: int = 0
    lowest_score: int = 0
    pass_rate: int = 0


# ==============================================================================
# Persisted Attempt Models
# ==============================================================================


class AttemptRecord(BaseModel):
    """
    A stored quiz attempt.

    Holds the grading outcome verbatim plus timing and review metadata.
    """

    id: UUID = Field(default_factory=uuid4)

    student_id: str

    quiz_id: str

    course_id: str | None = None

    answers: tuple[GradedAnswer, ...] = ()

    score: int = Field(..., ge=0, le=100)

    total_points: int = Field(..., ge=0)

    earned_points: int = Field(..., ge=0)

    started_at: datetime

    submitted_at: datetime

    time_spent: int = Field(default=0, ge=0, description="Seconds spent on the attempt")

    passed: bool

    attempt_number: int = Field(..., ge=1)

    feedback: str = ""

    teacher_reviewed: bool = False

    reviewed_at: datetime | None = None

    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("feedback", mode="before")
    @classmethod
    def default_feedback(cls, v: Any) -> Any:
        """Treat a missing feedback value as empty."""
        return "" if v is None else v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def grade(self) -> str:
        """Letter grade for the score."""
        if self.score >= 90:
            return "A"
        if self.score >= 80:
            return "B"
        if self.score >= 70:
            return "C"
        if self.score >= 60:
            return "D"
        return "F"


class StudentStatistics(BaseModel):
    """Summary of one learner's attempts across quizzes."""

    model_config = ConfigDict(frozen=True)

    total_attempts: int = 0
    average_score: int = 0
    passed_quizzes: int = 0
    failed_quizzes: int = 0
    pass_rate: int = 0
    highest_score: int = 0
    recent_attempts: tuple[AttemptRecord, ...] = ()


class QuizReport(BaseModel):
    """Instructor-facing summary of all attempts on one quiz."""

    model_config = ConfigDict(frozen=True)

    statistics: AttemptStatistics = Field(default_factory=AttemptStatistics)
    unique_students: int = 0
    recent_attempts: tuple[AttemptRecord, ...] = ()


class AttemptAvailability(BaseModel):
    """How many more times a learner may attempt a quiz."""

    model_config = ConfigDict(frozen=True)

    attempt_count: int
    remaining_attempts: int | None = Field(
        ...,
        description="Attempts left, or None when attempts are unlimited",
    )
    can_attempt: bool
    best_score: int | None = None
