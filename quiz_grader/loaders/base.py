"""
Base classes for quiz loading.

Defines the abstract interface that all quiz loaders must implement,
ensuring consistent behavior across different file formats.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from quiz_grader.models import Quiz


class LoaderError(Exception):
    """
    Raised when a quiz or answer file cannot be loaded.

    Contains detailed information about the failure cause.
    """

    def __init__(self, message: str, file_path: str | Path, cause: Exception | None = None):
        self.file_path = str(file_path)
        self.cause = cause
        super().__init__(f"Failed to load '{file_path}': {message}")


class QuizLoader(ABC):
    """
    Abstract base class for quiz loaders.

    All loaders must implement the `load` method and declare
    which file extensions they support via `SUPPORTED_EXTENSIONS`.
    """

    SUPPORTED_EXTENSIONS: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def supports(cls, file_path: Path) -> bool:
        """Check if this loader supports the given file."""
        return file_path.suffix.lower() in cls.SUPPORTED_EXTENSIONS

    @abstractmethod
    def load(self, file_path: Path) -> Quiz:
        """
        Load a quiz from the file.

        Raises:
            LoaderError: If loading fails for any reason.
        """
        ...

    def _validate_file(self, file_path: Path) -> None:
        """
        Validate that the file exists and is supported.

        Raises:
            LoaderError: If file doesn't exist or isn't supported.
        """
        if not file_path.exists():
            raise LoaderError("File does not exist", file_path)

        if not file_path.is_file():
            raise LoaderError("Path is not a file", file_path)

        if not self.supports(file_path):
            raise LoaderError(
                f"Unsupported file format. Expected one of: {self.SUPPORTED_EXTENSIONS}",
                file_path,
            )
