"""
Quiz Loading Module.

Reads quizzes, answer sheets and attempt histories from files.
"""

from quiz_grader.loaders.base import LoaderError, QuizLoader
from quiz_grader.loaders.excel_loader import ExcelQuizLoader
from quiz_grader.loaders.factory import (
    create_loader,
    get_supported_extensions,
    load_answers,
    load_attempts,
    load_quiz,
)
from quiz_grader.loaders.json_loader import JsonQuizLoader

__all__ = [
    "ExcelQuizLoader",
    "JsonQuizLoader",
    "LoaderError",
    "QuizLoader",
    "create_loader",
    "get_supported_extensions",
    "load_answers",
    "load_attempts",
    "load_quiz",
]
