"""
Per-type answer graders.

Each grader compares a learner's raw answer payload with the answer key
for one question type. Graders are total: a payload of the wrong shape is
simply an incorrect answer, never an exception, so every submission can
be turned into a well-formed attempt result.
"""

import math
import re
from collections.abc import Mapping
from typing import Any

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Marks a side of a matching pair that could not be resolved.
_MISSING = object()


def _parse_int(value: Any) -> int | None:
    """
    Leniently read an integer out of a payload value.

    Accepts ints, finite floats (truncated) and strings that start with an
    integer ("2", " 3 ", "4th"). Anything else, booleans included, is not
    a number and yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def grade_single_choice(submitted: Any, correct_index: Any) -> bool:
    """
    Grade a single-choice answer.

    Both sides are coerced to integers first, so "2" matches 2. A side that
    is not a number never matches.
    """
    given = _parse_int(submitted)
    expected = _parse_int(correct_index)
    if given is None or expected is None:
        return False
    return given == expected


def _normalize_blank(text: str, case_sensitive: bool) -> str:
    text = text.strip()
    return text if case_sensitive else text.lower()


def grade_fill_blank(submitted: Any, expected: Any, case_sensitive: bool = False) -> bool:
    """
    Grade a fill-in-the-blank answer.

    Every blank must match after trimming surrounding whitespace (and
    lower-casing, unless case sensitive). There is no partial credit.

    Args:
        submitted: The learner's list of blank texts.
        expected: The answer key's list of blank texts.
        case_sensitive: Whether letter case must match.

    Returns:
        True only if all blanks match.
    """
    if not _is_sequence(submitted) or not _is_sequence(expected):
        return False

    if len(submitted) != len(expected):
        return False

    for given, wanted in zip(submitted, expected):
        if not isinstance(given, str) or not isinstance(wanted, str):
            return False
        if _normalize_blank(given, case_sensitive) != _normalize_blank(wanted, case_sensitive):
            return False

    return True


def _pair_side(pair: Any, side: str) -> Any:
    """Read `left` or `right` from a key pair given as a model or a mapping."""
    if isinstance(pair, Mapping):
        return pair.get(side, _MISSING)
    return getattr(pair, side, _MISSING)


def _selection_index(selection: Any, name: str) -> Any:
    """Read `left_index` / `right_index` from a submitted pair."""
    camel = name.replace("_index", "Index")
    if isinstance(selection, Mapping):
        if name in selection:
            return selection[name]
        return selection.get(camel)
    return getattr(selection, name, getattr(selection, camel, None))


def _resolve_index(index: Any, size: int) -> int | None:
    if isinstance(index, bool):
        return None
    if isinstance(index, str) and index.isdigit():
        index = int(index)
    elif isinstance(index, float) and index.is_integer():
        index = int(index)
    if isinstance(index, int) and 0 <= index < size:
        return index
    return None


def grade_matching(submitted: Any, correct_pairs: Any) -> bool:
    """
    Grade a matching answer.

    Each submitted `{left_index, right_index}` names a left value (taken
    from `correct_pairs[left_index].left`) and a right value (taken from
    `correct_pairs[right_index].right`). A submitted pair counts when that
    combination exists in the key; the answer is correct when the number
    of counted pairs equals the number of key pairs.

    Indices are not checked for repeats, so a submission that names the
    same correct pair twice can still be marked correct. Stored attempts
    were graded this way and must keep grading the same.
    """
    if not _is_sequence(submitted) or not _is_sequence(correct_pairs):
        return False

    if len(submitted) != len(correct_pairs):
        return False

    combinations = [(_pair_side(p, "left"), _pair_side(p, "right")) for p in correct_pairs]
    size = len(combinations)

    matched = 0
    for selection in submitted:
        left_index = _resolve_index(_selection_index(selection, "left_index"), size)
        right_index = _resolve_index(_selection_index(selection, "right_index"), size)
        if left_index is None or right_index is None:
            continue

        left = combinations[left_index][0]
        right = combinations[right_index][1]
        if left is _MISSING or right is _MISSING:
            continue

        if (left, right) in combinations:
            matched += 1

    return matched == size


def grade_true_false(submitted: Any, expected: Any) -> bool:
    """Grade a true/false answer by comparing truthiness."""
    return bool(submitted) == bool(expected)
