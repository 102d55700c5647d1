"""
Scoring Logic for candidate answers.

Responsibilities:
- Compute the points a single answer earns against a validated question.
- Round earned points for presentation.
- Aggregate per-answer scores into totals and a breakdown.

Non-Responsibilities:
- No question validation (see schema.validate_question).
- No storage access.
- No checks that the answer set matches the job.

Invariant:
Given identical inputs, calculate_score always returns the same value,
between 0 and question.points inclusive, and never raises.
"""

import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .models import Answer, Points, Question, ScoreBreakdown
from .types import QuestionType


def _to_number(value: Any) -> Optional[float]:
    """Coerce an answer to a float, or None when it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return None
    if isinstance(value, str):
        # digit separators are not part of the accepted number syntax
        if "_" in value:
            return None
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _score_single_choice(question: Question, value: Any) -> float:
    return question.points if value == question.correct_option else 0.0


def _score_multi_choice(question: Question, value: Any) -> float:
    if not isinstance(value, (list, tuple)):
        return 0.0
    correct = set(question.correct_options or [])
    if not correct:
        return 0.0
    # membership test on the raw answer so unhashable items cannot raise
    matched = sum(1 for option in correct if option in value)
    return question.points * matched / len(correct)


def _score_number(question: Question, value: Any) -> float:
    number = _to_number(value)
    if number is None or math.isnan(number):
        return 0.0
    lo = question.min if question.min is not None else -math.inf
    hi = question.max if question.max is not None else math.inf
    return question.points if lo <= number <= hi else 0.0


def _score_text(question: Question, value: Any) -> float:
    if not isinstance(value, str):
        return 0.0
    answer = value.lower()
    keywords = question.keywords or []
    matched = sum(1 for keyword in keywords if keyword.lower() in answer)
    total = len(keywords) or 1
    return question.points * matched / total


_SCORERS = {
    QuestionType.SINGLE_CHOICE: _score_single_choice,
    QuestionType.MULTI_CHOICE: _score_multi_choice,
    QuestionType.NUMBER: _score_number,
    QuestionType.TEXT: _score_text,
}


def calculate_score(question: Question, value: Any) -> float:
    """
    Points earned by value against question.

    Malformed or mismatched answers earn 0; the result is not rounded.
    """
    scorer = _SCORERS.get(question.type)
    if scorer is None:
        return 0.0
    return scorer(question, value)


def round_points(value: float) -> float:
    """Round to 2 decimal places, halves away from zero."""
    scaled = math.floor(abs(value) * 100 + 0.5) / 100
    return math.copysign(scaled, value) if value else 0.0


def score_answers(
    questions: Dict[str, Question],
    answers: Iterable[Answer],
) -> Tuple[float, Points, List[ScoreBreakdown]]:
    """
    Score every answer against its question.

    Args:
        questions: Questions keyed by id; every answer must reference one of them
        answers: Submitted answers, scored in the given order

    Returns:
        Tuple of (total_score, max_score, breakdown), totals rounded once;
        max_score stays an int when every question has integer points
    """
    total = 0.0
    maximum: Points = 0
    breakdown: List[ScoreBreakdown] = []

    for answer in answers:
        question = questions[answer.question_id]
        earned = calculate_score(question, answer.value)
        breakdown.append(
            ScoreBreakdown(
                question_id=question.id,
                question_text=question.text,
                points_earned=round_points(earned),
                points_possible=question.points,
                answer=answer.value,
            )
        )
        total += earned
        maximum += question.points

    if isinstance(maximum, float):
        maximum = round_points(maximum)
    return round_points(total), maximum, breakdown
