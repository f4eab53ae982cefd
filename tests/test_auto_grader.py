# tests/test_auto_grader.py

from decimal import Decimal

from lms_assessment.utils.auto_grader import round_score, score

KEY = [
    {"question_text": "q1", "options": ["a", "b", "c"], "correct_option_index": 0},
    {"question_text": "q2", "options": ["a", "b", "c"], "correct_option_index": 1},
    {"question_text": "q3", "options": ["a", "b", "c"], "correct_option_index": 2},
    {"question_text": "q4", "options": ["a", "b", "c"], "correct_option_index": 0},
]


def test_three_of_four_correct_out_of_ten():
    result = score([0, 1, 2, 3], KEY, Decimal("10"))
    assert result.correct_count == 3
    assert result.scaled_score == Decimal("7.50")


def test_score_is_deterministic():
    first = score([0, 1, 0, 0], KEY, 10)
    second = score([0, 1, 0, 0], KEY, 10)
    assert first == second


def test_accepts_schema_questions(sample_questions):
    result = score([0, 1, 2, 0], sample_questions, Decimal("20"))
    assert result.correct_count == 4
    assert result.scaled_score == Decimal("20.00")


def test_bools_and_non_integers_are_wrong():
    # True == 1 in Python, but it is not a valid answer
    result = score([0, True, "2", 0.0], KEY, 10)
    assert result.correct_count == 1


def test_missing_and_out_of_range_answers_are_wrong():
    assert score([0], KEY, 10).correct_count == 1
    assert score([9, -1, 2, 0], KEY, 10).correct_count == 2
    assert score(None, KEY, 10).correct_count == 0


def test_extra_answers_are_ignored():
    result = score([0, 1, 2, 0, 1, 1], KEY, 10)
    assert result.correct_count == 4
    assert result.scaled_score == Decimal("10.00")


def test_empty_question_bank_scores_zero():
    result = score([0, 1], [], 10)
    assert result.correct_count == 0
    assert result.scaled_score == Decimal("0.00")


def test_scaled_score_rounds_half_up():
    # 1/3 of 10 -> 3.33, 2/3 of 10 -> 6.67
    three = KEY[:3]
    assert score([0, 0, 0], three, 10).scaled_score == Decimal("3.33")
    assert score([0, 1, 0], three, 10).scaled_score == Decimal("6.67")
    assert round_score(Decimal("2.345")) == Decimal("2.35")
