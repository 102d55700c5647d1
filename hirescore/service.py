"""
Job and application orchestration.

Turns request payloads into stored, scored entities. Validation errors and
missing entities are raised as exceptions for the transport layer to map.
"""

import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .logger import StructuredLogger, get_logger
from .models import Answer, Application, Job, Question, ScoreBreakdown
from .schema import (
    clean_question,
    is_valid_id,
    validate_answer_entries,
    validate_application_payload,
    validate_job_payload,
    validate_questions,
)
from .scoring import score_answers
from .storage import Store
from .types import SORT_KEYS


class ValidationError(Exception):
    """Raised when a request fails validation; carries every message."""

    def __init__(self, errors: List[str]):
        super().__init__("Validation failed")
        self.errors = list(errors)


class NotFoundError(Exception):
    """Raised when a referenced job or application does not exist."""
    pass


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _reject(errors: List[str], logger: StructuredLogger, action: str) -> None:
    logger.record_validation_failure()
    logger.warning(f"Rejected {action}", errors=errors)
    raise ValidationError(errors)


def create_job(payload: Any, store: Store, logger: Optional[StructuredLogger] = None) -> Job:
    """
    Validate a job payload, assign ids and persist it.

    Raises:
        ValidationError: On field errors, or on any question defect (messages
            prefixed with the 1-based question index)
    """
    logger = logger or get_logger()

    errors = validate_job_payload(payload)
    if errors:
        _reject(errors, logger, "job")

    errors = validate_questions(payload["questions"])
    if errors:
        _reject(errors, logger, "job")

    job = Job(
        id=_new_id(),
        title=payload["title"].strip(),
        location=payload["location"].strip(),
        customer=payload["customer"].strip(),
        job_name=payload["jobName"].strip(),
        description=payload["description"].strip(),
        questions=[
            Question.model_validate({"id": _new_id(), **clean_question(q)})
            for q in payload["questions"]
        ],
        created_at=_now(),
    )
    store.jobs.insert(job)
    logger.record_job_created()
    logger.info("Job created", job_id=job.id, questions=len(job.questions))
    return job


def list_jobs(store: Store) -> List[Job]:
    return store.jobs.list()


def get_job(job_id: str, store: Store) -> Job:
    if not is_valid_id(job_id):
        raise ValidationError(["Invalid job ID"])
    job = store.jobs.get(job_id)
    if job is None:
        raise NotFoundError("Job not found")
    return job


def check_answers(job: Job, answers: Any) -> List[Answer]:
    """
    Ensure answers cover exactly the job's questions, once each.

    Raises:
        ValidationError: On an empty or malformed answer list, duplicate
            answers, or missing/unknown question ids
    """
    if not isinstance(answers, list) or not answers:
        raise ValidationError(["At least one answer is required"])

    errors = validate_answer_entries(answers)
    if errors:
        raise ValidationError(errors)

    answered = [a["questionId"] for a in answers]
    duplicates = [qid for qid, n in Counter(answered).items() if n > 1]
    if duplicates:
        raise ValidationError([f"Duplicate answers for questions: {', '.join(duplicates)}"])

    required = [q.id for q in job.questions]
    missing = [qid for qid in required if qid not in answered]
    extra = [qid for qid in answered if qid not in required]
    if missing or extra:
        errors = []
        if missing:
            errors.append(f"Missing answers for questions: {', '.join(missing)}")
        if extra:
            errors.append(f"Invalid question IDs: {', '.join(extra)}")
        raise ValidationError(errors)

    return [Answer(question_id=a["questionId"], value=a.get("value")) for a in answers]


def score_job_answers(job: Job, answers: Any) -> Tuple[List[Answer], float, float, List[ScoreBreakdown]]:
    """Check and score answers against a job without storing anything."""
    checked = check_answers(job, answers)
    questions: Dict[str, Question] = {q.id: q for q in job.questions}
    total, maximum, breakdown = score_answers(questions, checked)
    return checked, total, maximum, breakdown


def submit_application(payload: Any, store: Store, logger: Optional[StructuredLogger] = None) -> Application:
    """
    Validate, score and persist a candidate application.

    Raises:
        ValidationError: On field errors or an answer set that does not match
            the job's questions
        NotFoundError: If the referenced job does not exist
    """
    logger = logger or get_logger()

    errors = validate_application_payload(payload)
    if errors:
        _reject(errors, logger, "application")

    job = store.jobs.get(payload["jobId"])
    if job is None:
        logger.warning("Application for unknown job", job_id=payload["jobId"])
        raise NotFoundError("Job not found")

    try:
        answers, total, maximum, breakdown = score_job_answers(job, payload["answers"])
    except ValidationError as e:
        _reject(e.errors, logger, "application")

    application = Application(
        id=_new_id(),
        job_id=job.id,
        candidate_name=payload["candidateName"].strip(),
        candidate_email=payload["candidateEmail"].strip(),
        answers=answers,
        total_score=total,
        max_score=maximum,
        score_breakdown=breakdown,
        submitted_at=_now(),
    )
    store.applications.insert(application)
    logger.record_application(job.id, total, maximum)
    logger.info(
        "Application scored",
        application_id=application.id,
        job_id=job.id,
        total_score=total,
        max_score=maximum,
    )
    return application


def list_applications(job_id: str, store: Store, sort_by: Optional[str] = None) -> List[Application]:
    """
    Applications for a job, best score first (sort_by="score", the default) or
    newest first (sort_by="date").
    """
    if sort_by is None:
        sort_by = "score"
    errors = []
    if not is_valid_id(job_id):
        errors.append("Invalid job ID")
    if sort_by not in SORT_KEYS:
        errors.append("Invalid sort parameter")
    if errors:
        raise ValidationError(errors)

    if store.jobs.get(job_id) is None:
        raise NotFoundError("Job not found")

    applications = [a for a in store.applications.list() if a.job_id == job_id]
    if sort_by == "score":
        return sorted(applications, key=lambda a: a.total_score, reverse=True)
    return sorted(applications, key=lambda a: a.submitted_at, reverse=True)


def get_application(application_id: str, store: Store) -> Application:
    if not is_valid_id(application_id):
        raise ValidationError(["Invalid application ID"])
    application = store.applications.get(application_id)
    if application is None:
        raise NotFoundError("Application not found")
    return application
