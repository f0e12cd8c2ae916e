"""
Storage interfaces for quizzes and attempts.

The production backend keeps both in a document store; the in-memory
implementations here serve the CLI and the tests and show the contract
a real store has to meet.
"""

import threading
from abc import ABC, abstractmethod

from quiz_grader.models import AttemptRecord, Quiz


class QuizRepository(ABC):
    """Lookup and persistence of quiz documents."""

    @abstractmethod
    def get(self, quiz_id: str) -> Quiz | None:
        """Return the quiz, or None if it does not exist."""
        ...

    @abstractmethod
    def save(self, quiz: Quiz) -> None:
        """Insert or replace a quiz."""
        ...


class AttemptRepository(ABC):
    """Append-mostly storage of attempt records."""

    @abstractmethod
    def add(self, record: AttemptRecord) -> None:
        ...

    @abstractmethod
    def get(self, attempt_id: str) -> AttemptRecord | None:
        ...

    @abstractmethod
    def update(self, record: AttemptRecord) -> None:
        ...

    @abstractmethod
    def list_for_quiz(self, quiz_id: str) -> list[AttemptRecord]:
        ...

    @abstractmethod
    def list_for_student(self, student_id: str) -> list[AttemptRecord]:
        ...

    def list_for_student_quiz(self, student_id: str, quiz_id: str) -> list[AttemptRecord]:
        """Attempts one learner made on one quiz."""
        return [r for r in self.list_for_student(student_id) if r.quiz_id == quiz_id]


class InMemoryQuizRepository(QuizRepository):
    def __init__(self, quizzes: list[Quiz] | None = None):
        self._quizzes: dict[str, Quiz] = {}
        self._lock = threading.Lock()
        for quiz in quizzes or []:
            self.save(quiz)

    def get(self, quiz_id: str) -> Quiz | None:
        with self._lock:
            return self._quizzes.get(str(quiz_id))

    def save(self, quiz: Quiz) -> None:
        with self._lock:
            self._quizzes[str(quiz.id)] = quiz


class InMemoryAttemptRepository(AttemptRepository):
    def __init__(self) -> None:
        self._records: dict[str, AttemptRecord] = {}
        self._lock = threading.Lock()

    def add(self, record: AttemptRecord) -> None:
        with self._lock:
            self._records[str(record.id)] = record

    def get(self, attempt_id: str) -> AttemptRecord | None:
        with self._lock:
            return self._records.get(str(attempt_id))

    def update(self, record: AttemptRecord) -> None:
        with self._lock:
            if str(record.id) not in self._records:
                raise KeyError(str(record.id))
            self._records[str(record.id)] = record

    def list_for_quiz(self, quiz_id: str) -> list[AttemptRecord]:
        with self._lock:
            return [r for r in self._records.values() if r.quiz_id == str(quiz_id)]

    def list_for_student(self, student_id: str) -> list[AttemptRecord]:
        with self._lock:
            return [r for r in self._records.values() if r.student_id == student_id]
