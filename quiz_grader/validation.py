"""
Quiz validation module.

Checks an authored quiz for answer keys that cannot be graded sensibly
before it is published.
"""

from quiz_grader.models import (
    FillBlankQuestion,
    MatchingQuestion,
    Quiz,
    SingleChoiceQuestion,
    UnsupportedQuestion,
)


class QuizValidationError(Exception):
    """Raised when quiz validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        message = "Quiz validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(message)


class QuizValidator:
    """
    Validates quizzes for completeness and gradeability.

    Checks:
    1. The quiz has a title and at least one question
    2. Every question has a prompt and a usable answer key
    3. The quiz is worth more than zero points
    """

    MIN_OPTIONS = 2
    MIN_PAIRS = 2

    def validate(self, quiz: Quiz) -> tuple[bool, list[str]]:
        """
        Validate a quiz and return any issues found.

        Args:
            quiz: The quiz to validate.

        Returns:
            Tuple of (is_valid, list of issues).
        """
        issues: list[str] = []

        if not quiz.title.strip():
            issues.append("Quiz title is empty")

        if not quiz.questions:
            issues.append("Quiz has no questions")

        for i, question in enumerate(quiz.questions, start=1):
            issues.extend(self._validate_question(question, i))

        if quiz.questions and quiz.total_points <= 0:
            issues.append("Total points must be greater than 0")

        return len(issues) == 0, issues

    def validate_or_raise(self, quiz: Quiz) -> None:
        """
        Validate a quiz and raise if invalid.

        Raises:
            QuizValidationError: If validation fails.
        """
        is_valid, issues = self.validate(quiz)
        if not is_valid:
            raise QuizValidationError(issues)

    def _validate_question(self, question, index: int) -> list[str]:
        """Validate a single question."""
        issues: list[str] = []
        prefix = f"Question {index} ({question.type})"

        if not question.prompt.strip():
            issues.append(f"{prefix}: Prompt is empty")

        if isinstance(question, SingleChoiceQuestion):
            if len(question.options) < self.MIN_OPTIONS:
                issues.append(f"{prefix}: Needs at least {self.MIN_OPTIONS} options")
            if not 0 <= question.correct_index < len(question.options):
                issues.append(
                    f"{prefix}: Correct index {question.correct_index} is out of range "
                    f"for {len(question.options)} options"
                )

        elif isinstance(question, FillBlankQuestion):
            if not question.blanks:
                issues.append(f"{prefix}: Needs at least one blank")
            elif any(not blank.strip() for blank in question.blanks):
                issues.append(f"{prefix}: Blank answers must not be empty")

        elif isinstance(question, MatchingQuestion):
            if len(question.pairs) < self.MIN_PAIRS:
                issues.append(f"{prefix}: Needs at least {self.MIN_PAIRS} pairs")
            lefts = [p.left for p in question.pairs]
            if len(lefts) != len(set(lefts)):
                issues.append(f"{prefix}: Left items must be unique")

        elif isinstance(question, UnsupportedQuestion):
            issues.append(f"{prefix}: Unsupported question type; it will always be graded incorrect")

        return issues
