"""
Percentage helpers shared by the quiz grader and the statistics summaries.

Scores are whole percentages rounded half up (12.5 -> 13), which is what
learners and instructors expect to see; Python's built-in `round` would
round half to even.
"""

import math


def round_half_up(value: float) -> int:
    """Round a non-negative number to the nearest integer, halves going up."""
    return int(math.floor(value + 0.5))


def percentage(part: float, whole: float) -> int:
    """
    Whole-number percentage of `part` out of `whole`.

    Returns 0 when `whole` is not positive instead of dividing by zero.
    """
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole)
