from enum import Enum
from typing import Any


class QuestionType(str, Enum):
    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"
    NUMBER = "number"
    TEXT = "text"


SORT_KEYS = ("score", "date")


def parse_question_type(value: Any):
    """Return the QuestionType for value, or None if it is not a known type."""
    if not isinstance(value, str):
        return None
    try:
        return QuestionType(value)
    except ValueError:
        return None
