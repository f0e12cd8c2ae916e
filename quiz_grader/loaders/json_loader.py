"""
JSON quiz loader.

Reads quiz documents exported from the quiz store as JSON.
"""

from pathlib import Path
from typing import ClassVar

from pydantic import ValidationError

from quiz_grader.loaders.base import LoaderError, QuizLoader
from quiz_grader.models import Quiz

ENCODINGS: tuple[str, ...] = ("utf-8-sig", "latin-1")


def read_text(file_path: Path) -> str:
    """
    Read a text file, trying each supported encoding in turn.

    Raises:
        LoaderError: If no encoding works or the file is blank.
    """
    last_error: Exception | None = None

    for encoding in ENCODINGS:
        try:
            content = file_path.read_text(encoding=encoding)
            break
        except UnicodeDecodeError as e:
            last_error = e
    else:
        raise LoaderError(
            f"Could not decode file with any supported encoding: {ENCODINGS}",
            file_path,
            cause=last_error,
        )

    if not content.strip():
        raise LoaderError("File is empty or contains only whitespace", file_path)
    return content


def describe_validation_error(error: ValidationError) -> str:
    """One line per pydantic error, prefixed with its location."""
    return "; ".join(
        f"{'.'.join(str(part) for part in e['loc']) or '<root>'}: {e['msg']}"
        for e in error.errors()
    )


class JsonQuizLoader(QuizLoader):
    """Loads a quiz from a `.json` document."""

    SUPPORTED_EXTENSIONS: ClassVar[tuple[str, ...]] = (".json",)

    def load(self, file_path: Path) -> Quiz:
        self._validate_file(file_path)
        content = read_text(file_path)

        try:
            return Quiz.model_validate_json(content)
        except ValidationError as e:
            raise LoaderError(
                f"Invalid quiz document: {describe_validation_error(e)}",
                file_path,
                cause=e,
            ) from e
