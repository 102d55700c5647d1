"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Dict, Any, List

from fastapi.testclient import TestClient

from hirescore.api import create_app
from hirescore.config import Settings
from hirescore.logger import StructuredLogger, reset_logger
from hirescore.storage import memory_store


@pytest.fixture
def single_choice_question() -> Dict[str, Any]:
    return {
        "text": "What is 2+2?",
        "type": "single_choice",
        "points": 10,
        "options": ["3", "4", "5"],
        "correctOption": "4",
    }


@pytest.fixture
def multi_choice_question() -> Dict[str, Any]:
    return {
        "text": "Select all even numbers",
        "type": "multi_choice",
        "points": 10,
        "options": ["1", "2", "3", "4"],
        "correctOptions": ["2", "4"],
    }


@pytest.fixture
def number_question() -> Dict[str, Any]:
    return {
        "text": "Years of experience?",
        "type": "number",
        "points": 10,
        "min": 0,
        "max": 20,
    }


@pytest.fixture
def text_question() -> Dict[str, Any]:
    return {
        "text": "Describe your skills",
        "type": "text",
        "points": 10,
        "keywords": ["typescript", "node", "testing"],
    }


@pytest.fixture
def question_drafts(
    single_choice_question, multi_choice_question, number_question, text_question
) -> List[Dict[str, Any]]:
    """One well-formed question of every type, in a fixed order."""
    return [single_choice_question, multi_choice_question, number_question, text_question]


@pytest.fixture
def job_payload(question_drafts) -> Dict[str, Any]:
    return {
        "title": "Test Job",
        "location": "Berlin",
        "customer": "Acme",
        "jobName": "test-job",
        "description": "Test job for scoring",
        "questions": question_drafts,
    }


@pytest.fixture
def quiet_logger() -> StructuredLogger:
    """Logger without handlers so tests stay silent."""
    return StructuredLogger(name="hirescore.test", enable_console=False)


@pytest.fixture
def store():
    return memory_store()


@pytest.fixture
def client(store, quiet_logger):
    """TestClient over an app backed by a fresh in-memory store."""
    reset_logger()
    app = create_app(store=store, settings=Settings(), logger=quiet_logger)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def posted_job(client, job_payload) -> Dict[str, Any]:
    response = client.post("/api/jobs", json=job_payload)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def submit(client, posted_job):
    """Submit answers for posted_job, values given in question order."""
    question_ids = [q["id"] for q in posted_job["questions"]]

    def _submit(*values, **overrides):
        payload = {
            "jobId": posted_job["id"],
            "candidateName": "Test User",
            "candidateEmail": "test@example.com",
            "answers": [
                {"questionId": qid, "value": value}
                for qid, value in zip(question_ids, values)
            ],
        }
        payload.update(overrides)
        return client.post("/api/applications", json=payload)

    return _submit
