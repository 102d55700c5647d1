"""
Validation for question rubrics and incoming request payloads.

Every validator here returns a list of human-readable error messages; an
empty list means valid. They never raise for malformed input.
"""

import math
import uuid
from typing import Any, List, Mapping

from email_validator import EmailNotValidError, validate_email

from .types import QuestionType, parse_question_type

# (field, message) in the order errors are reported
JOB_REQUIRED_STR_FIELDS = [
    ("title", "Title is required"),
    ("location", "Location is required"),
    ("customer", "Customer is required"),
    ("jobName", "Job name is required"),
    ("description", "Description is required"),
]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_number(v: Any) -> bool:
    # bool is an int subclass but never a valid number here
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    try:
        return math.isfinite(v)
    except OverflowError:
        return False


def _is_str_list(v: Any) -> bool:
    return isinstance(v, list) and all(isinstance(item, str) for item in v)


def _is_uuid(v: Any) -> bool:
    if not isinstance(v, str):
        return False
    try:
        uuid.UUID(v)
    except ValueError:
        return False
    return True


def validate_question(question: Any) -> List[str]:
    """
    Returns the structural defects that would make a question unscoreable.

    Checks accumulate in a fixed order; a value of the wrong JSON type counts
    as missing.
    """
    q: Mapping[str, Any] = question if isinstance(question, Mapping) else {}
    errors: List[str] = []

    if not _is_non_empty_str(q.get("text")):
        errors.append("Question text is required")

    qtype = parse_question_type(q.get("type"))
    if qtype is None:
        errors.append("Invalid question type")

    points = q.get("points")
    if not _is_number(points) or points <= 0:
        errors.append("Points must be greater than 0")

    options = q.get("options") if _is_str_list(q.get("options")) else None

    if qtype is QuestionType.SINGLE_CHOICE:
        correct = q.get("correctOption")
        if not _is_non_empty_str(correct):
            errors.append("correctOption is required for single_choice type")
        elif options is not None and correct not in options:
            errors.append("correctOption must be in options list")

    elif qtype is QuestionType.MULTI_CHOICE:
        correct_options = q.get("correctOptions")
        if not _is_str_list(correct_options) or not correct_options:
            errors.append("correctOptions is required for multi_choice type")
        elif options is not None and any(opt not in options for opt in correct_options):
            errors.append("All correctOptions must be in options list")

    elif qtype is QuestionType.NUMBER:
        lo, hi = q.get("min"), q.get("max")
        if not _is_number(lo):
            errors.append("min is required for number type")
        if not _is_number(hi):
            errors.append("max is required for number type")
        if _is_number(lo) and _is_number(hi) and hi < lo:
            errors.append("max must be greater than or equal to min")

    elif qtype is QuestionType.TEXT:
        keywords = q.get("keywords")
        if not _is_str_list(keywords) or not keywords:
            errors.append("keywords are required for text type")

    return errors


def validate_questions(questions: List[Any]) -> List[str]:
    """Validate a batch, prefixing each message with the 1-based question index."""
    errors: List[str] = []
    for idx, question in enumerate(questions, start=1):
        errors.extend(f"Question {idx}: {err}" for err in validate_question(question))
    return errors


def validate_job_payload(data: Any) -> List[str]:
    """Field-level checks for a job creation request (questions not included)."""
    if not isinstance(data, Mapping):
        return ["Request body must be a JSON object"]

    errors: List[str] = []
    for field, message in JOB_REQUIRED_STR_FIELDS:
        if not _is_non_empty_str(data.get(field)):
            errors.append(message)

    questions = data.get("questions")
    if not isinstance(questions, list) or len(questions) < 1:
        errors.append("At least one question is required")

    return errors


def validate_application_payload(data: Any) -> List[str]:
    """Field-level checks for an application submission request."""
    if not isinstance(data, Mapping):
        return ["Request body must be a JSON object"]

    errors: List[str] = []
    if not _is_uuid(data.get("jobId")):
        errors.append("Invalid job ID")
    if not _is_non_empty_str(data.get("candidateName")):
        errors.append("Candidate name is required")
    if not is_valid_email(data.get("candidateEmail")):
        errors.append("Valid email is required")
    if data.get("answers") is None:
        errors.append("Answers field is required")
    return errors


def validate_answer_entries(answers: List[Any]) -> List[str]:
    errors: List[str] = []
    for idx, answer in enumerate(answers, start=1):
        if not isinstance(answer, Mapping) or not _is_non_empty_str(answer.get("questionId")):
            errors.append(f"Answer {idx}: questionId is required")
    return errors


def is_valid_email(v: Any) -> bool:
    if not isinstance(v, str):
        return False
    try:
        validate_email(v.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_id(v: Any) -> bool:
    return _is_uuid(v)


# Fields copied onto a stored question, per type
VARIANT_FIELDS = {
    QuestionType.SINGLE_CHOICE: ("options", "correctOption"),
    QuestionType.MULTI_CHOICE: ("options", "correctOptions"),
    QuestionType.NUMBER: ("min", "max"),
    QuestionType.TEXT: ("keywords",),
}


def clean_question(question: Mapping[str, Any]) -> dict:
    """
    Reduce a validated question draft to the fields its type uses.

    Assumes validate_question(question) returned no errors. A malformed
    optional options list is dropped, as validation ignored it.
    """
    qtype = QuestionType(question["type"])
    cleaned = {
        "text": question["text"],
        "type": qtype,
        "points": question["points"],
    }
    for field in VARIANT_FIELDS[qtype]:
        value = question.get(field)
        if value is None:
            continue
        if field == "options" and not _is_str_list(value):
            continue
        cleaned[field] = value
    return cleaned
