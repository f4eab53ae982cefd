# File: src/lms_assessment/utils/auto_grader.py
"""
Scoring of multiple-choice submissions against an assignment's answer key.

Everything here is pure: no database access, no clock, no logging side
effects beyond debug output, so a score can be recomputed at any time and
will always come out the same.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, NamedTuple, Optional, Sequence

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


class AutoGradeResult(NamedTuple):
    correct_count: int
    scaled_score: Decimal


def round_score(value) -> Decimal:
    """Round half-up to two decimal places, the precision grades are stored with."""
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def fits_two_places(value: Decimal) -> bool:
    """True when a two-decimal column can hold ``value`` without losing digits."""
    return value == value.quantize(TWO_PLACES)


def _correct_index(question: Any) -> Optional[int]:
    # questions come straight from the JSON column (dicts) or as McqQuestion schemas
    if isinstance(question, dict):
        return question.get("correct_option_index")
    return getattr(question, "correct_option_index", None)


def _is_correct(answer: Any, question: Any) -> bool:
    # bool is an int subclass; True must not match option 1
    if isinstance(answer, bool) or not isinstance(answer, int):
        return False
    return answer == _correct_index(question)


def score(mcq_answers: Optional[Sequence[Any]], questions: Sequence[Any], max_grade) -> AutoGradeResult:
    """
    Count matching answers and scale the ratio to ``max_grade``.

    Answers are matched by position. Missing, extra, out-of-range and
    non-integer answers are simply wrong; this never raises on answer content.
    An empty question bank scores (0, 0.00).
    """
    answers = list(mcq_answers or [])
    if not questions:
        return AutoGradeResult(0, round_score(0))

    correct_count = sum(
        1
        for index, question in enumerate(questions)
        if index < len(answers) and _is_correct(answers[index], question)
    )
    scaled = Decimal(correct_count) / Decimal(len(questions)) * Decimal(str(max_grade))
    result = AutoGradeResult(correct_count, round_score(scaled))
    logger.debug(f"Auto-graded {len(answers)} answers against {len(questions)} questions: {result}")
    return result
