"""Presentation-order helpers. Nothing here affects grading."""

import random
from collections.abc import Sequence
from typing import TypeVar

from quiz_grader.models import Quiz, QuizSettings, SingleChoiceQuestion

T = TypeVar("T")


def shuffle(sequence: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """
    Return a uniformly shuffled copy of `sequence`.

    The input is left untouched. Pass a seeded `random.Random` for a
    reproducible order.
    """
    items = list(sequence)
    (rng or random).shuffle(items)
    return items


def presentation_order(quiz: Quiz, rng: random.Random | None = None) -> list[int]:
    """
    Positions of the quiz questions in the order they should be shown.

    Answers are still graded by original position, so callers must submit
    them back in `quiz.questions` order.
    """
    positions = list(range(len(quiz.questions)))
    if quiz.settings.shuffle_questions:
        return shuffle(positions, rng)
    return positions


def option_order(
    question: SingleChoiceQuestion,
    settings: QuizSettings,
    rng: random.Random | None = None,
) -> list[int]:
    """
    Positions of a single-choice question's options in display order.

    Shuffled only when `settings.shuffle_options` is set. The answer key
    keeps the authored positions, so a learner's pick must be mapped back
    through this order before it is submitted.
    """
    positions = list(range(len(question.options)))
    if settings.shuffle_options:
        return shuffle(positions, rng)
    return positions
