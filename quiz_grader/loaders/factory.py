"""
Loader factory module.

Selects the appropriate quiz loader by file extension and reads the JSON
answer and attempt files used by the CLI.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from quiz_grader.loaders.base import LoaderError, QuizLoader
from quiz_grader.loaders.excel_loader import ExcelQuizLoader
from quiz_grader.loaders.json_loader import JsonQuizLoader, describe_validation_error, read_text
from quiz_grader.models import AttemptResult, Quiz, SubmittedAnswer

# Registry of all available loaders
_LOADERS: tuple[type[QuizLoader], ...] = (
    JsonQuizLoader,
    ExcelQuizLoader,
)

_ATTEMPTS = TypeAdapter(list[AttemptResult])


def get_supported_extensions() -> tuple[str, ...]:
    """All quiz file extensions across all loaders."""
    extensions: list[str] = []
    for loader_cls in _LOADERS:
        extensions.extend(loader_cls.SUPPORTED_EXTENSIONS)
    return tuple(sorted(set(extensions)))


def create_loader(file_path: Path | str) -> QuizLoader:
    """
    Create the appropriate loader for a given file.

    Raises:
        LoaderError: If the file format is not supported.
    """
    path = Path(file_path)
    extension = path.suffix.lower()

    for loader_cls in _LOADERS:
        if extension in loader_cls.SUPPORTED_EXTENSIONS:
            return loader_cls()

    supported = get_supported_extensions()
    raise LoaderError(
        f"Unsupported file format '{extension}'. Supported formats: {supported}",
        path,
    )


def load_quiz(file_path: Path | str) -> Quiz:
    """
    Load a quiz from a JSON document or spreadsheet.

    Raises:
        LoaderError: If loading fails.
    """
    path = Path(file_path)
    return create_loader(path).load(path)


def _read_json(path: Path) -> Any:
    if not path.is_file():
        raise LoaderError("File does not exist", path)
    try:
        return json.loads(read_text(path))
    except json.JSONDecodeError as e:
        raise LoaderError(f"Invalid JSON: {e}", path, cause=e) from e


def load_answers(file_path: Path | str) -> list[SubmittedAnswer]:
    """
    Load submitted answers from a JSON file.

    The file holds a list, either of `{"question_index", "answer"}` objects
    or of bare answer payloads in question order. An object form may also
    be wrapped as `{"answers": [...]}`. An object without an `answer` key
    is read as unanswered.

    Raises:
        LoaderError: If the file is not a list of answers.
    """
    path = Path(file_path)
    data = _read_json(path)

    if isinstance(data, dict) and "answers" in data:
        data = data["answers"]
    if not isinstance(data, list):
        raise LoaderError("Answers file must contain a list", path)

    answers: list[SubmittedAnswer] = []
    for index, item in enumerate(data):
        if isinstance(item, dict) and ("answer" in item or "question_index" in item):
            try:
                answers.append(SubmittedAnswer.model_validate({"question_index": index, **item}))
            except ValidationError as e:
                raise LoaderError(
                    f"Invalid answer at position {index}: {describe_validation_error(e)}",
                    path,
                    cause=e,
                ) from e
        else:
            answers.append(SubmittedAnswer(question_index=index, answer=item))
    return answers


def load_attempts(file_path: Path | str) -> list[AttemptResult]:
    """
    Load a JSON list of attempt results.

    Raises:
        LoaderError: If the file is not a list of attempt results.
    """
    path = Path(file_path)
    data = _read_json(path)

    try:
        return _ATTEMPTS.validate_python(data)
    except ValidationError as e:
        raise LoaderError(
            f"Invalid attempts file: {describe_validation_error(e)}", path, cause=e
        ) from e
