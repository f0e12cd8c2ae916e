"""
Quiz Grader - auto-grading and attempt bookkeeping for an LMS backend.

This package grades learner quiz submissions against instructor answer
keys, summarizes attempt history, and gates AI tutor usage with per-user
rate and token limits.
"""

__version__ = "1.0.0"
__author__ = "Quiz Grader Team"
