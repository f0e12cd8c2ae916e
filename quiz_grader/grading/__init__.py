"""
Grading Engine Module.

Pure grading of quiz submissions plus statistics over stored attempts.
"""

from quiz_grader.grading.engine import grade_question, grade_quiz
from quiz_grader.grading.graders import (
    grade_fill_blank,
    grade_matching,
    grade_single_choice,
    grade_true_false,
)
from quiz_grader.grading.scoring import percentage, round_half_up
from quiz_grader.grading.shuffle import option_order, presentation_order, shuffle
from quiz_grader.grading.statistics import (
    build_quiz_report,
    calculate_quiz_stats,
    calculate_student_stats,
)

__all__ = [
    "build_quiz_report",
    "calculate_quiz_stats",
    "calculate_student_stats",
    "grade_fill_blank",
    "grade_matching",
    "grade_question",
    "grade_quiz",
    "grade_single_choice",
    "grade_true_false",
    "option_order",
    "percentage",
    "presentation_order",
    "round_half_up",
    "shuffle",
]
