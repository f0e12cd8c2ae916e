"""
Excel quiz loader using openpyxl.

Instructors can author a quiz as a spreadsheet. The first worksheet holds
one question per row under a header row:

    type | prompt | points | choices | answer | case_sensitive

- mcq:        choices = "opt A | opt B | ...", answer = 0-based correct index
- fill_blank: answer = "blank 1 | blank 2 | ...", case_sensitive = TRUE/FALSE
- matching:   choices = "left = right | left = right | ..."
- true_false: answer = TRUE/FALSE

An optional worksheet named "Settings" holds `key | value` rows for the
quiz title, description and any `QuizSettings` field.
"""

from pathlib import Path
from typing import Any, ClassVar

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from pydantic import ValidationError

from quiz_grader.loaders.base import LoaderError, QuizLoader
from quiz_grader.loaders.json_loader import describe_validation_error
from quiz_grader.models import Quiz, QuizSettings

REQUIRED_COLUMNS = ("type", "prompt", "answer")
SEPARATOR = "|"
SETTINGS_SHEET = "Settings"


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _split(value: Any) -> list[str]:
    text = _text(value)
    if not text:
        return []
    return [part.strip() for part in text.split(SEPARATOR)]


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return _text(value).lower() in {"true", "yes", "1", "t", "y"}


class ExcelQuizLoader(QuizLoader):
    """Loads a quiz from an `.xlsx` workbook."""

    SUPPORTED_EXTENSIONS: ClassVar[tuple[str, ...]] = (".xlsx",)

    def load(self, file_path: Path) -> Quiz:
        self._validate_file(file_path)

        try:
            workbook = load_workbook(file_path, read_only=True, data_only=True)
        except InvalidFileException as e:
            raise LoaderError(
                "File is not a valid Excel document or is corrupted", file_path, cause=e
            ) from e
        except Exception as e:
            raise LoaderError(f"Unexpected error: {e}", file_path, cause=e) from e

        try:
            question_sheet = workbook[workbook.sheetnames[0]]
            questions = self._read_questions(question_sheet, file_path)

            document: dict[str, Any] = {"title": file_path.stem}
            if SETTINGS_SHEET in workbook.sheetnames and workbook.sheetnames[0] != SETTINGS_SHEET:
                document.update(self._read_settings(workbook[SETTINGS_SHEET]))
        finally:
            workbook.close()

        document["questions"] = questions

        try:
            return Quiz.model_validate(document)
        except ValidationError as e:
            raise LoaderError(
                f"Invalid quiz document: {describe_validation_error(e)}",
                file_path,
                cause=e,
            ) from e

    def _read_questions(self, sheet: Any, file_path: Path) -> list[dict[str, Any]]:
        """Turn question rows into question documents."""
        rows = sheet.iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            raise LoaderError("Spreadsheet contains no data", file_path)

        header = [_text(cell).lower() for cell in header_row]
        missing = [c for c in REQUIRED_COLUMNS if c not in header]
        if missing:
            raise LoaderError(f"Missing columns: {missing}", file_path)

        questions: list[dict[str, Any]] = []
        for row_number, row in enumerate(rows, start=2):
            cells = dict(zip(header, row))
            if not any(_text(v) for v in cells.values()):
                continue
            questions.append(self._build_question(cells, row_number, file_path))

        if not questions:
            raise LoaderError("Spreadsheet contains no questions", file_path)
        return questions

    def _build_question(
        self, cells: dict[str, Any], row_number: int, file_path: Path
    ) -> dict[str, Any]:
        kind = _text(cells.get("type")).lower()
        question: dict[str, Any] = {"type": kind, "prompt": _text(cells.get("prompt"))}

        points = cells.get("points")
        if _text(points):
            try:
                question["points"] = int(float(_text(points)))
            except ValueError as e:
                raise LoaderError(
                    f"Row {row_number}: points must be a number, got {points!r}", file_path, cause=e
                ) from e

        answer = cells.get("answer")

        if kind == "mcq":
            question["options"] = _split(cells.get("choices"))
            try:
                question["correct_index"] = int(float(_text(answer)))
            except ValueError as e:
                raise LoaderError(
                    f"Row {row_number}: answer must be the correct option index", file_path, cause=e
                ) from e

        elif kind == "fill_blank":
            question["blanks"] = _split(answer)
            question["case_sensitive"] = _as_bool(cells.get("case_sensitive"))

        elif kind == "matching":
            pairs = []
            for item in _split(cells.get("choices")):
                left, sep, right = item.partition("=")
                if not sep:
                    raise LoaderError(
                        f"Row {row_number}: matching pairs must look like 'left = right'",
                        file_path,
                    )
                pairs.append({"left": left.strip(), "right": right.strip()})
            question["pairs"] = pairs

        elif kind == "true_false":
            question["expected"] = _as_bool(answer)

        return question

    def _read_settings(self, sheet: Any) -> dict[str, Any]:
        """Read `key | value` rows into quiz fields and settings."""
        document: dict[str, Any] = {}
        settings: dict[str, Any] = {}

        for row in sheet.iter_rows(values_only=True):
            if not row or not _text(row[0]):
                continue
            key = _text(row[0]).lower()
            value = row[1] if len(row) > 1 else None
            if key in ("title", "description"):
                document[key] = _text(value)
            elif key in QuizSettings.model_fields:
                settings[key] = value

        if settings:
            document["settings"] = settings
        return document
